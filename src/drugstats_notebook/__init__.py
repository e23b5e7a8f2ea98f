"""drugstats notebook helpers."""

from drugstats_notebook.notebook import (
    find_repo_root,
    generate_policy,
    get_example_snapshot,
    report_drugs,
    run_pipeline,
)

__all__ = [
    "find_repo_root",
    "generate_policy",
    "get_example_snapshot",
    "report_drugs",
    "run_pipeline",
]
