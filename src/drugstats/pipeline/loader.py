from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console

from drugstats.models import (
    NO_LETHAL_SEVERITY,
    AfflictionDefinition,
    Chemical,
    DoseEffect,
    DoseEffectKind,
    DrugComponent,
    DrugDefinition,
    HostDatabase,
    OtherTrigger,
    PsychReaction,
    PsychReactionStage,
    RandomCurveTrigger,
    RandomFixedTrigger,
    SeverityRange,
    Stage,
    StageStat,
    Trigger,
)
from drugstats.pipeline.validation import SnapshotError, check_snapshot
from drugstats.utils.io import read_structured

console = Console()


def load_snapshot(path: Path, *, overdose_affliction: str = "DrugOverdose", quiet: bool = False) -> HostDatabase:
    path = path.expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found at {path}.")
    payload = read_structured(path) or {}
    return database_from_payload(payload, overdose_affliction=overdose_affliction, quiet=quiet)


def database_from_payload(
    payload: dict[str, Any],
    *,
    overdose_affliction: str = "DrugOverdose",
    quiet: bool = False,
) -> HostDatabase:
    errors, warnings = check_snapshot(payload, overdose_affliction)
    if errors:
        raise SnapshotError(f"Snapshot has {len(errors)} error(s): {errors[0]}", errors)
    if not quiet:
        for warning in warnings:
            console.print(f"[yellow]{warning}[/yellow]")

    db = HostDatabase()
    raw_afflictions = payload.get("afflictions", [])

    # Two passes so triggers can point at afflictions defined later, or at themselves.
    for raw in raw_afflictions:
        db.afflictions[raw["id"]] = AfflictionDefinition(
            id=raw["id"],
            label=raw.get("label") or raw["id"],
            lethal_severity=_lethal(raw.get("lethal_severity")),
            curable=raw.get("curable", True),
            severity_per_day=raw.get("severity_per_day"),
        )
    for raw in raw_afflictions:
        affliction = db.afflictions[raw["id"]]
        affliction.stages = [_stage(stage, db) for stage in raw.get("stages", [])]
        affliction.triggers = [_trigger(trigger, db) for trigger in raw.get("triggers", [])]

    for raw in payload.get("chemicals", []):
        db.chemicals[raw["id"]] = Chemical(
            id=raw["id"],
            label=raw.get("label") or raw["id"],
            tolerance_affliction=_optional_affliction(raw.get("tolerance_affliction"), db),
            addiction_affliction=_optional_affliction(raw.get("addiction_affliction"), db),
        )

    for raw in payload.get("psych_reactions", []):
        db.psych_reactions.append(
            PsychReaction(
                id=raw["id"],
                label=raw.get("label") or raw["id"],
                affliction=db.afflictions[raw["affliction"]],
                stages=[
                    PsychReactionStage(
                        label=stage.get("label"),
                        mood=stage.get("mood", 0.0),
                        opinion=stage.get("opinion", 0.0),
                        visible=stage.get("visible", True),
                    )
                    for stage in raw.get("stages", [])
                ],
            )
        )

    for raw in payload.get("drugs", []):
        components = [_component(component, db) for component in raw.get("components", [])]
        db.drugs[raw["id"]] = DrugDefinition(
            id=raw["id"],
            label=raw.get("label") or raw["id"],
            category=raw.get("category", ""),
            is_addictive=raw.get("addictive", any(c.addictiveness > 0 for c in components)),
            is_pleasurable=raw.get("pleasurable", False),
            is_combat_enhancing=raw.get("combat_enhancing", False),
            is_medical=raw.get("medical", False),
            joy=raw.get("joy", 0.0),
            components=components,
        )

    return db


def _lethal(value: float | None) -> float:
    return NO_LETHAL_SEVERITY if value is None else float(value)


def _optional_affliction(ref: str | None, db: HostDatabase) -> AfflictionDefinition | None:
    return db.afflictions[ref] if ref is not None else None


def _stage(raw: dict[str, Any], db: HostDatabase) -> Stage:
    return Stage(
        min_severity=raw.get("min_severity", 0.0),
        label=raw.get("label"),
        visible=raw.get("visible", True),
        vomit_mtb_days=raw.get("vomit_mtb_days", 0.0),
        forget_memory_mtb_days=raw.get("forget_memory_mtb_days", 0.0),
        mental_break_mtb_days=raw.get("mental_break_mtb_days", 0.0),
        death_mtb_days=raw.get("death_mtb_days", 0.0),
        stats=[
            StageStat(label=stat["label"], value=stat["value"], priority=stat.get("priority", 0))
            for stat in raw.get("stats", [])
        ],
        triggers=[_trigger(trigger, db) for trigger in raw.get("triggers", [])],
    )


def _trigger(raw: dict[str, Any], db: HostDatabase) -> Trigger:
    target = db.afflictions[raw["target"]]
    kind = raw["kind"]
    if kind == "random_fixed":
        return RandomFixedTrigger(target=target, mtb_days=raw.get("mtb_days", 0.0))
    if kind == "random_curve":
        return RandomCurveTrigger(
            target=target,
            base_mtb_days=raw.get("base_mtb_days", 0.0),
            curve=[(float(x), float(y)) for x, y in raw.get("curve", [])],
        )
    return OtherTrigger(target=target)


def _component(raw: dict[str, Any], db: HostDatabase) -> DrugComponent:
    severity = raw.get("overdose_severity", {})
    chemical_id = raw.get("chemical")
    return DrugComponent(
        addictiveness=raw.get("addictiveness", 0.0),
        min_tolerance_to_addict=raw.get("min_tolerance_to_addict", 0.0),
        overdose_severity=SeverityRange(min=severity.get("min", 0.0), max=severity.get("max", 0.0)),
        large_overdose_chance=raw.get("large_overdose_chance", 0.0),
        chemical=db.chemicals[chemical_id] if chemical_id is not None else None,
        dose_effects=[
            DoseEffect(
                target=db.afflictions[effect["target"]],
                severity=effect.get("severity", 0.0),
                divide_by_body_size=effect.get("divide_by_body_size", False),
                kind=effect.get("kind", DoseEffectKind.OTHER),
            )
            for effect in raw.get("dose_effects", [])
        ],
    )
