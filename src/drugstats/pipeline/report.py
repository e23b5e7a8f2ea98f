from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, Iterator

from drugstats.context import AnalysisContext
from drugstats.models import DrugComponent, DrugDefinition, ReportEntry, StatCategory
from drugstats.pipeline.dosage import DosingMetrics, compute_safe_dosing, render_safe_interval
from drugstats.pipeline.risks import aggregate_risk
from drugstats.utils.text import (
    capitalize_first,
    to_comma_list,
    to_string_decimal_if_small,
    to_string_percent,
    to_string_yes_no,
)

PRIORITY_CATEGORY = 2495
PRIORITY_CHEMICAL = 2490
PRIORITY_SAFE_DOSE_INTERVAL = 2484
PRIORITY_COMBAT_ENHANCING = 2482
PRIORITY_RISKS = 2400
PRIORITY_TOLERANCE_BODY_SIZE = 2439
PRIORITY_DOSES_BEFORE_ADDICTION = 2426
PRIORITY_OVERDOSE_GAIN = 2370
PRIORITY_OVERDOSE_FALL_RATE = 2360
PRIORITY_OVERDOSE_BODY_SIZE = 2350
PRIORITY_OVERDOSE_LEVELS = 2340
PRIORITY_DOSES_BEFORE_OVERDOSE = 2330
PRIORITY_OVERDOSE_RISKS = 2300

HOST_STAT_KEYS = (
    "ToleranceGain",
    "ToleranceFallRate",
    "MinimumToleranceForAddiction",
    "Addictiveness",
    "RandomODChance",
    "SafeDoseInterval",
    "Joy",
)
TOLERANCE_STAT_PATTERN = re.compile(r"^(?:Minimum)?Tolerance|^Addictiveness$")


def build_report(
    drug: DrugDefinition,
    ctx: AnalysisContext,
    component: DrugComponent | None = None,
) -> Iterator[ReportEntry]:
    """Yield the engine's report entries for one drug component.

    Nothing is yielded when the component is missing or has no chemical;
    third-party content ships such components and they are skipped quietly.
    """
    comp = component if component is not None else drug.component
    if comp is None:
        return
    if comp.chemical is None:
        return

    metrics = compute_safe_dosing(comp, ctx)

    yield from basic_drug_stats(drug, comp, ctx)
    yield from drug_tolerance_stats(comp, metrics, ctx)
    yield from drug_addiction_stats(drug, comp, ctx)
    yield from drug_overdose_stats(comp, metrics, ctx)

    yield ReportEntry(
        category=StatCategory.DRUG,
        label=capitalize_first(ctx.translate("SafeDoseInterval")),
        description=ctx.translate("Stat_Thing_Drug_SafeDoseInterval_Desc"),
        value=render_safe_interval(metrics, ctx),
        priority=PRIORITY_SAFE_DOSE_INTERVAL,
        numeric_value=None if metrics.not_safe else metrics.safe_interval_days,
    )


def basic_drug_stats(drug: DrugDefinition, comp: DrugComponent, ctx: AnalysisContext) -> Iterator[ReportEntry]:
    translate = ctx.translate
    category = StatCategory.DRUG

    high_effect = comp.high_effect()
    if high_effect is not None:
        yield aggregate_risk(high_effect.target, "HighBenefitsRisks", category, PRIORITY_RISKS, ctx)

    if drug.category:
        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_Category_Name"),
            description=translate("Stat_Thing_Drug_Category_Desc"),
            value=capitalize_first(drug.category),
            priority=PRIORITY_CATEGORY,
        )

    if comp.chemical is not None:
        yield ReportEntry(
            category=category,
            label=translate("Chemical"),
            description=translate("Stat_Thing_Drug_Chemical_Desc"),
            value=capitalize_first(comp.chemical.label),
            priority=PRIORITY_CHEMICAL,
        )

    yield ReportEntry(
        category=category,
        label=translate("Stat_Thing_Drug_CombatEnhancingDrug_Name"),
        description=translate("Stat_Thing_Drug_CombatEnhancingDrug_Desc"),
        value=to_string_yes_no(drug.is_combat_enhancing, translate),
        priority=PRIORITY_COMBAT_ENHANCING,
    )


def drug_tolerance_stats(comp: DrugComponent, metrics: DosingMetrics, ctx: AnalysisContext) -> Iterator[ReportEntry]:
    translate = ctx.translate
    category = StatCategory.DRUG_TOLERANCE

    # Nothing to report
    tolerance_effect = comp.tolerance_effect()
    if tolerance_effect is None or tolerance_effect.severity == 0:
        return

    yield aggregate_risk(tolerance_effect.target, "ToleranceRisks", category, PRIORITY_RISKS, ctx)

    yield ReportEntry(
        category=category,
        label=translate("Stat_Thing_Drug_SeverityUsesBodySize_Name"),
        description=translate("Stat_Thing_Drug_SeverityUsesBodySize_Desc"),
        value=to_string_yes_no(tolerance_effect.divide_by_body_size, translate),
        priority=PRIORITY_TOLERANCE_BODY_SIZE,
    )

    if metrics.doses_before_addiction is not None:
        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_DosagesBeforeAddiction_Name"),
            description=translate("Stat_Thing_Drug_DosagesBeforeAddiction_Desc"),
            value=to_string_decimal_if_small(metrics.doses_before_addiction),
            priority=PRIORITY_DOSES_BEFORE_ADDICTION,
            numeric_value=metrics.doses_before_addiction,
        )


def drug_addiction_stats(drug: DrugDefinition, comp: DrugComponent, ctx: AnalysisContext) -> Iterator[ReportEntry]:
    # Nothing to report
    if not drug.is_addictive:
        return

    addiction = comp.chemical.addiction_affliction if comp.chemical is not None else None
    if addiction is not None:
        yield aggregate_risk(addiction, "AddictionRisks", StatCategory.DRUG_ADDICTION, PRIORITY_RISKS, ctx)


def drug_overdose_stats(comp: DrugComponent, metrics: DosingMetrics, ctx: AnalysisContext) -> Iterator[ReportEntry]:
    translate = ctx.translate
    category = StatCategory.DRUG_OVERDOSE

    # Nothing to report
    if not comp.can_cause_overdose and comp.large_overdose_chance == 0:
        return
    overdose = ctx.overdose_affliction
    if overdose is None:
        return

    if comp.can_cause_overdose:
        severity = comp.overdose_severity
        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_OverdoseGainPerDose_Name"),
            description=translate("Stat_Thing_Drug_OverdoseGainPerDose_Desc"),
            value=" ~ ".join([to_string_percent(severity.min), to_string_percent(severity.max)]),
            priority=PRIORITY_OVERDOSE_GAIN,
        )

        fall = abs(ctx.overdose_fall_per_day)
        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_OverdoseFallRate_Name"),
            description=translate("Stat_Thing_Drug_OverdoseFallRate_Desc"),
            value=translate("PerDay", value=to_string_percent(fall)),
            priority=PRIORITY_OVERDOSE_FALL_RATE,
        )

        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_SeverityUsesBodySize_Name"),
            description=translate("Stat_Thing_Drug_SeverityUsesBodySize_Desc"),
            value=to_string_yes_no(True, translate),
            priority=PRIORITY_OVERDOSE_BODY_SIZE,
        )

        levels = [to_string_percent(stage.min_severity) for stage in overdose.stages[1:3]]
        if overdose.is_lethal:
            levels.append(to_string_percent(overdose.lethal_severity))
        if levels:
            yield ReportEntry(
                category=category,
                label=translate("Stat_Thing_Drug_OverdoseSeverityLevels_Name"),
                description=translate("Stat_Thing_Drug_OverdoseSeverityLevels_Desc"),
                value=to_comma_list(levels),
                priority=PRIORITY_OVERDOSE_LEVELS,
            )

    if metrics.doses_before_overdose is not None:
        yield ReportEntry(
            category=category,
            label=translate("Stat_Thing_Drug_DosagesBeforeOverdose_Name"),
            description=translate("Stat_Thing_Drug_DosagesBeforeOverdose_Desc"),
            value=to_string_decimal_if_small(metrics.doses_before_overdose),
            priority=PRIORITY_DOSES_BEFORE_OVERDOSE,
            numeric_value=metrics.doses_before_overdose,
        )

    yield aggregate_risk(overdose, "OverdoseRisks", category, PRIORITY_OVERDOSE_RISKS, ctx)


def tweak_host_entry(
    entry: ReportEntry,
    drug: DrugDefinition,
    ctx: AnalysisContext,
    component: DrugComponent | None = None,
) -> ReportEntry | None:
    """Recategorize one host entry for a drug, or return None to drop it."""
    for key in HOST_STAT_KEYS:
        if entry.label != capitalize_first(ctx.translate(key)):
            continue

        if TOLERANCE_STAT_PATTERN.match(key):
            comp = component if component is not None else drug.component
            # don't report if there isn't tolerance gain
            if comp is None or comp.tolerance_gain() == 0:
                return None
            return replace(entry, category=StatCategory.DRUG_TOLERANCE)
        if key == "RandomODChance":
            # don't report if it's zero
            if entry.numeric_value is not None and entry.numeric_value == 0:
                return None
            return replace(entry, category=StatCategory.DRUG_OVERDOSE)
        if key == "SafeDoseInterval":
            # replaced by the engine's own entry
            return None
        if key == "Joy":
            return replace(entry, category=StatCategory.CAPACITY_EFFECTS)
    return entry


def special_display_stats(
    host_entries: Iterable[ReportEntry],
    drug: DrugDefinition,
    ctx: AnalysisContext,
    component: DrugComponent | None = None,
) -> Iterator[ReportEntry]:
    """Pass the host's entries through first, then append the engine's report."""
    for entry in host_entries:
        tweaked = tweak_host_entry(entry, drug, ctx, component)
        if tweaked is not None:
            yield tweaked
    yield from build_report(drug, ctx, component)


def sort_entries(entries: Iterable[ReportEntry], category_order: list[str] | None = None) -> list[ReportEntry]:
    order = category_order or [
        StatCategory.DRUG,
        StatCategory.DRUG_TOLERANCE,
        StatCategory.DRUG_ADDICTION,
        StatCategory.DRUG_OVERDOSE,
        StatCategory.CAPACITY_EFFECTS,
    ]

    def _key(entry: ReportEntry) -> tuple[int, int]:
        rank = order.index(entry.category) if entry.category in order else len(order)
        return rank, -entry.priority

    return sorted(entries, key=_key)


def entry_to_dict(entry: ReportEntry, drug_id: str | None = None) -> dict[str, object]:
    payload: dict[str, object] = {
        "category": entry.category,
        "label": entry.label,
        "value": entry.value,
        "priority": entry.priority,
        "description": entry.description,
        "cross_references": list(entry.cross_references),
    }
    if drug_id is not None:
        payload = {"drug": drug_id, **payload}
    return payload
