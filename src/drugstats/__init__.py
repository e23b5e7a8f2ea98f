"""Drug tolerance, addiction and overdose analytics."""

__version__ = "0.4.0"
