from __future__ import annotations

from typing import Iterator

from drugstats.context import AnalysisContext
from drugstats.models import DrugDefinition, ReportEntry, StatCategory
from drugstats.utils.text import capitalize_first, to_string_percent


def host_drug_stats(drug: DrugDefinition, ctx: AnalysisContext) -> Iterator[ReportEntry]:
    """Stock entries the host lists for a drug ahead of the engine's own."""
    translate = ctx.translate
    comp = drug.component
    if comp is None:
        return

    def _entry(key: str, value: float, text: str, priority: int) -> ReportEntry:
        return ReportEntry(
            category=StatCategory.DRUG,
            label=capitalize_first(translate(key)),
            description=translate(f"Stat_Thing_Drug_{key}_Desc"),
            value=text,
            priority=priority,
            numeric_value=value,
        )

    tolerance_effect = comp.tolerance_effect()
    if tolerance_effect is not None:
        yield _entry("ToleranceGain", tolerance_effect.severity, to_string_percent(tolerance_effect.severity), 2460)
        rate = abs(tolerance_effect.target.severity_per_day or 0.0)
        yield _entry("ToleranceFallRate", rate, translate("PerDay", value=to_string_percent(rate)), 2455)

    if drug.is_addictive:
        yield _entry(
            "MinimumToleranceForAddiction",
            comp.min_tolerance_to_addict,
            to_string_percent(comp.min_tolerance_to_addict),
            2450,
        )
        yield _entry("Addictiveness", comp.addictiveness, to_string_percent(comp.addictiveness), 2445)

    yield _entry("RandomODChance", comp.large_overdose_chance, to_string_percent(comp.large_overdose_chance), 2440)

    if drug.joy > 0:
        yield _entry("Joy", drug.joy, to_string_percent(drug.joy), 2410)
