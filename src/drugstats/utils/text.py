from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable


def capitalize_first(text: str | None) -> str:
    if not text:
        return ""
    return text[0].upper() + text[1:]


def to_comma_list(items: Iterable[str]) -> str:
    return ", ".join(item for item in items if item)


def trim_decimals(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def to_string_percent(value: float) -> str:
    percent = value * 100
    if abs(percent - round(percent)) < 1e-6:
        return f"{round(percent):d}%"
    return f"{trim_decimals(percent, 1)}%"


def to_string_decimal_if_small(value: float) -> str:
    if abs(value) < 1:
        return trim_decimals(value, 2)
    if abs(value) < 10:
        return trim_decimals(value, 1)
    return f"{value:.0f}"


def to_string_with_sign(value: int) -> str:
    return f"{value:+d}"


def to_string_yes_no(value: bool, translate: Callable[..., str]) -> str:
    return translate("Yes") if value else translate("No")


@dataclass
class PeriodFormatter:
    """Turns tick counts and day values into host-style period strings."""

    translate: Callable[..., str]
    ticks_per_hour: int = 2500
    hours_per_day: int = 24
    days_per_quadrum: int = 15
    quadrums_per_year: int = 4

    @classmethod
    def from_engine_config(cls, translate: Callable[..., str], engine: dict[str, Any]) -> "PeriodFormatter":
        return cls(
            translate=translate,
            ticks_per_hour=int(engine.get("ticks_per_hour", 2500)),
            hours_per_day=int(engine.get("hours_per_day", 24)),
            days_per_quadrum=int(engine.get("days_per_quadrum", 15)),
            quadrums_per_year=int(engine.get("quadrums_per_year", 4)),
        )

    @property
    def ticks_per_day(self) -> int:
        return self.ticks_per_hour * self.hours_per_day

    @property
    def ticks_per_quadrum(self) -> int:
        return self.ticks_per_day * self.days_per_quadrum

    @property
    def ticks_per_year(self) -> int:
        return self.ticks_per_quadrum * self.quadrums_per_year

    def days_to_period(self, days: float) -> str:
        return self.ticks_to_period(int(round(days * self.ticks_per_day)), allow_seconds=False)

    def ticks_to_period(self, ticks: int, *, allow_seconds: bool = False) -> str:
        if allow_seconds and ticks < self.ticks_per_hour:
            if ticks < 600 or round(ticks / self.ticks_per_hour, 1) == 0:
                return self.translate("PeriodSeconds", count=str(round(ticks / 60)))

        years, remainder = divmod(ticks, self.ticks_per_year)
        quadrums, remainder = divmod(remainder, self.ticks_per_quadrum)
        days, remainder = divmod(remainder, self.ticks_per_day)
        hours = remainder / self.ticks_per_hour

        if years > 0:
            parts = [self.translate("PeriodYears", count=str(years))]
            if quadrums > 0:
                parts.append(self.translate("PeriodQuadrums", count=str(quadrums)))
            return ", ".join(parts)
        if quadrums > 0:
            parts = [self.translate("PeriodQuadrums", count=str(quadrums))]
            if days > 0:
                parts.append(self.translate("PeriodDays", count=str(days)))
            return ", ".join(parts)
        if days > 0:
            day_count = round(days + hours / self.hours_per_day, 1)
            # rounding up to a full quadrum rolls over
            if day_count >= self.days_per_quadrum:
                return self.translate("PeriodQuadrums", count="1")
            return self.translate("PeriodDays", count=trim_decimals(day_count, 1))
        hour_count = round(hours, 1)
        if hour_count >= self.hours_per_day:
            return self.translate("PeriodDays", count="1")
        return self.translate("PeriodHours", count=trim_decimals(hour_count, 1))
