from __future__ import annotations

from typing import Any

from drugstats.context import AnalysisContext, build_context
from drugstats.models import (
    AfflictionDefinition,
    Chemical,
    DoseEffect,
    DoseEffectKind,
    DrugComponent,
    DrugDefinition,
    HostDatabase,
    SeverityRange,
    Stage,
)


def make_affliction(affliction_id: str = "TestAffliction", **overrides: Any) -> AfflictionDefinition:
    base: dict[str, Any] = {"id": affliction_id, "label": affliction_id.lower()}
    base.update(overrides)
    return AfflictionDefinition(**base)


def make_overdose(stage_severities: tuple[float, ...] = (0.5, 0.75), **overrides: Any) -> AfflictionDefinition:
    stages = [Stage(min_severity=0.0)]
    for index, severity in enumerate(stage_severities):
        stages.append(Stage(min_severity=severity, label=("minor", "major", "extreme")[index]))
    base: dict[str, Any] = {
        "label": "overdose",
        "lethal_severity": 1.0,
        "severity_per_day": -1.0,
        "stages": stages,
    }
    base.update(overrides)
    return make_affliction("DrugOverdose", **base)


def make_chemical(
    tolerance: AfflictionDefinition | None = None,
    addiction: AfflictionDefinition | None = None,
    chemical_id: str = "TestChemical",
) -> Chemical:
    return Chemical(
        id=chemical_id,
        label=chemical_id.lower(),
        tolerance_affliction=tolerance,
        addiction_affliction=addiction,
    )


def make_component(
    *,
    chemical: Chemical | None = None,
    tolerance_severity: float | None = None,
    min_tolerance_to_addict: float = 0.5,
    overdose: tuple[float, float] = (0.0, 0.0),
    large_overdose_chance: float = 0.0,
    high: DoseEffect | None = None,
    addictiveness: float = 0.0,
) -> DrugComponent:
    effects: list[DoseEffect] = []
    if high is not None:
        effects.append(high)
    if tolerance_severity is not None and chemical is not None and chemical.tolerance_affliction is not None:
        effects.append(
            DoseEffect(
                target=chemical.tolerance_affliction,
                severity=tolerance_severity,
                divide_by_body_size=True,
                kind=DoseEffectKind.TOLERANCE,
            )
        )
    return DrugComponent(
        addictiveness=addictiveness,
        min_tolerance_to_addict=min_tolerance_to_addict,
        overdose_severity=SeverityRange(min=overdose[0], max=overdose[1]),
        large_overdose_chance=large_overdose_chance,
        chemical=chemical,
        dose_effects=effects,
    )


def make_drug(drug_id: str = "TestDrug", components: list[DrugComponent] | None = None, **overrides: Any) -> DrugDefinition:
    base: dict[str, Any] = {"id": drug_id, "label": drug_id.lower(), "category": "social"}
    base.update(overrides)
    return DrugDefinition(components=components or [], **base)


def make_database(
    *afflictions: AfflictionDefinition,
    drugs: list[DrugDefinition] | None = None,
    psych_reactions: list | None = None,
) -> HostDatabase:
    db = HostDatabase()
    for affliction in afflictions:
        db.afflictions[affliction.id] = affliction
    for drug in drugs or []:
        db.drugs[drug.id] = drug
        for comp in drug.components:
            if comp.chemical is not None:
                db.chemicals[comp.chemical.id] = comp.chemical
    db.psych_reactions.extend(psych_reactions or [])
    return db


def make_context(database: HostDatabase | None = None, config: dict[str, Any] | None = None) -> AnalysisContext:
    overrides = {"runtime": {"progress": False}}
    if config:
        overrides.update(config)
    return build_context(database or HostDatabase(), overrides)
