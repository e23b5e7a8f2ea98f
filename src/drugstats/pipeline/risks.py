from __future__ import annotations

from drugstats.context import AnalysisContext
from drugstats.models import (
    AfflictionDefinition,
    OtherTrigger,
    RandomCurveTrigger,
    RandomFixedTrigger,
    ReportEntry,
    Trigger,
)
from drugstats.utils.text import capitalize_first, to_comma_list, to_string_percent, to_string_with_sign

INDENT = "    "


def aggregate_risk(
    affliction: AfflictionDefinition | None,
    label_key: str,
    category: str,
    priority_base: int,
    ctx: AnalysisContext,
) -> ReportEntry:
    """Summarize everything an affliction can do to its bearer as one report entry.

    The value lists short risk keys (stage labels, "Incurable", "Thoughts",
    triggered afflictions, "Fatal"); the description holds one block per key.
    """
    if affliction is None:
        raise ValueError(f"aggregate_risk needs an affliction for {label_key}.")

    translate = ctx.translate
    risk_keys: list[str] = []
    fragments: list[str] = [translate(f"Stat_Thing_Drug_{label_key}_Desc")]
    cross_references: list[str] = [affliction.id]

    if not affliction.curable:
        incurable = translate("Incurable")
        risk_keys.append(incurable)
        fragments.append(incurable)

    multi_stage = len(affliction.stages) > 1
    for stage in affliction.stages:
        if multi_stage and (not stage.label or not stage.visible):
            continue

        lines: list[str] = []
        for stat in sorted(stage.stats, key=lambda s: s.priority):
            lines.append(f"{INDENT}{capitalize_first(stat.label)}: {stat.value}")

        for key, days in (
            ("Stat_MTBVomit", stage.vomit_mtb_days),
            ("Stat_MTBForget", stage.forget_memory_mtb_days),
            ("Stat_MTBMentalBreak", stage.mental_break_mtb_days),
            ("Stat_MTBDeath", stage.death_mtb_days),
        ):
            if days > 0:
                lines.append(f"{INDENT}{translate(key)}: {ctx.days_to_period(days)}")

        for trigger in stage.triggers:
            lines.extend(INDENT + line for line in describe_trigger(trigger, ctx))

        if not lines:
            continue

        label = capitalize_first(stage.label or affliction.label)
        risk_keys.append(label)
        fragments.append(label + ":\n" + "\n".join(lines))

    thought_lines = _reaction_lines(affliction, ctx)
    if thought_lines:
        thoughts = translate("Thoughts")
        risk_keys.append(thoughts)
        fragments.append(thoughts + ":\n" + "\n".join(thought_lines))

    if affliction.triggers:
        lines = []
        for trigger in affliction.triggers:
            lines.extend(describe_trigger(trigger, ctx))
            risk_keys.append(capitalize_first(trigger.target.label))
            if trigger.target.id not in cross_references:
                cross_references.append(trigger.target.id)
        fragments.append("\n".join(lines))

    if affliction.is_lethal:
        risk_keys.append(translate("Fatal"))
        fragments.append(translate("Stat_FatalAt", severity=to_string_percent(affliction.lethal_severity)))

    return ReportEntry(
        category=category,
        label=translate(f"Stat_Thing_Drug_{label_key}_Name"),
        description="\n\n".join(fragments),
        value=to_comma_list(risk_keys) if risk_keys else translate("None"),
        priority=priority_base,
        cross_references=cross_references,
    )


def describe_trigger(trigger: Trigger, ctx: AnalysisContext) -> list[str]:
    """Render a trigger as one or more unindented lines."""
    translate = ctx.translate
    mtb_label = translate("Stat_MTB_Hediff", HEDIFF=trigger.target.label)

    match trigger:
        case RandomFixedTrigger(mtb_days=mtb_days):
            return [f"{mtb_label}: {ctx.days_to_period(mtb_days)}"]
        case RandomCurveTrigger(base_mtb_days=base) if base > 0:
            return [f"{mtb_label}: {ctx.days_to_period(base)}"]
        case RandomCurveTrigger(curve=curve) if curve:
            lines = [f"{mtb_label}:"]
            for severity, days in curve:
                period = ctx.days_to_period(days) if 0 < days < ctx.never_mtb_days else translate("Never")
                lines.append(f"{INDENT}{to_string_percent(severity)}: {period}")
            return lines
        case OtherTrigger() | RandomCurveTrigger():
            return [translate("Stat_CanCause_Hediff", HEDIFF=trigger.target.label)]


def _reaction_lines(affliction: AfflictionDefinition, ctx: AnalysisContext) -> list[str]:
    translate = ctx.translate
    lines: list[str] = []
    for reaction in ctx.database.reactions_for(affliction):
        multi_stage = len(reaction.stages) > 1
        for stage in reaction.stages:
            if multi_stage and (not stage.label or not stage.visible):
                continue
            effects = []
            if stage.mood != 0:
                effects.append(translate("Stat_Thought_MoodEffect", value=to_string_with_sign(int(stage.mood))))
            if stage.opinion != 0:
                effects.append(translate("Stat_Thought_OpinionOffset", value=to_string_with_sign(int(stage.opinion))))
            if not effects:
                continue
            label = capitalize_first(stage.label or reaction.label)
            lines.append(f"{INDENT}{label}: {to_comma_list(effects)}")
    return lines
