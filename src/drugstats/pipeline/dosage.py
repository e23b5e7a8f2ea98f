from __future__ import annotations

from dataclasses import dataclass

from drugstats.context import AnalysisContext
from drugstats.models import DrugComponent


@dataclass
class DosingMetrics:
    """Result of one safe dosing computation. None means the metric does not apply."""

    doses_before_addiction: float | None = None
    doses_before_overdose: float | None = None
    addiction_decay_days: float | None = None
    overdose_decay_days: float | None = None
    safe_interval_days: float = 0.0
    not_safe: bool = False


def compute_safe_dosing(component: DrugComponent, ctx: AnalysisContext) -> DosingMetrics:
    metrics = DosingMetrics()
    _addiction_metrics(component, metrics)
    _overdose_metrics(component, ctx, metrics)

    if component.min_tolerance_to_addict == 0:
        metrics.not_safe = True
    if component.large_overdose_chance > 0:
        metrics.not_safe = True

    decay_days = [d for d in (metrics.addiction_decay_days, metrics.overdose_decay_days) if d is not None]
    metrics.safe_interval_days = max(decay_days) if decay_days else 0.0
    return metrics


def _addiction_metrics(component: DrugComponent, metrics: DosingMetrics) -> None:
    effect = component.tolerance_effect()
    if effect is None or effect.severity == 0:
        return

    doses = component.min_tolerance_to_addict / effect.severity
    if doses <= 1:
        # cannot take partial doses
        doses = 0.0
    metrics.doses_before_addiction = doses
    if doses == 0:
        metrics.not_safe = True

    decay_per_day = effect.target.severity_per_day
    if decay_per_day:
        metrics.addiction_decay_days = abs(effect.severity / decay_per_day)


def _overdose_metrics(component: DrugComponent, ctx: AnalysisContext, metrics: DosingMetrics) -> None:
    max_severity = component.overdose_severity.max
    if max_severity <= 0 and component.large_overdose_chance <= 0:
        return

    if max_severity > 0 and ctx.overdose_fall_per_day > 0:
        metrics.overdose_decay_days = max_severity / ctx.overdose_fall_per_day

    overdose = ctx.overdose_affliction
    if overdose is None or len(overdose.stages) < 2:
        return

    doses = overdose.stages[1].min_severity / max_severity if max_severity > 0 else 0.0
    if doses <= 1:
        # cannot take partial doses
        doses = 0.0
    if component.large_overdose_chance > 0:
        # a large overdose can happen on any dose
        doses = 0.0
    metrics.doses_before_overdose = doses
    if doses == 0:
        metrics.not_safe = True


def render_safe_interval(metrics: DosingMetrics, ctx: AnalysisContext) -> str:
    if metrics.not_safe:
        return ctx.translate("None")
    if metrics.safe_interval_days == 0:
        return ctx.translate("Always")
    return ctx.days_to_period(metrics.safe_interval_days)


def high_duration_days(component: DrugComponent | None) -> float:
    """Days a single dose keeps its bearer high, 0 when it never wears off."""
    if component is None:
        return 0.0
    effect = component.high_effect()
    if effect is None:
        return 0.0
    fall = effect.target.fall_per_day
    if fall <= 0:
        return 0.0
    return effect.severity / fall
