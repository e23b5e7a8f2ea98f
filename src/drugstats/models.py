from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union


class StatCategory:
    DRUG = "Drug"
    DRUG_TOLERANCE = "DrugTolerance"
    DRUG_ADDICTION = "DrugAddiction"
    DRUG_OVERDOSE = "DrugOverdose"
    CAPACITY_EFFECTS = "CapacityEffects"


NO_LETHAL_SEVERITY = -1.0


class DoseEffectKind:
    HIGH = "high"
    TOLERANCE = "tolerance"
    OTHER = "other"


@dataclass
class StageStat:
    label: str
    value: str
    priority: int = 0


@dataclass(eq=False)
class Stage:
    min_severity: float = 0.0
    label: str | None = None
    visible: bool = True
    vomit_mtb_days: float = 0.0
    forget_memory_mtb_days: float = 0.0
    mental_break_mtb_days: float = 0.0
    death_mtb_days: float = 0.0
    stats: list[StageStat] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class AfflictionDefinition:
    """A health effect with staged severity. Compared by identity so trigger graphs may be cyclic."""

    id: str
    label: str
    lethal_severity: float = NO_LETHAL_SEVERITY
    curable: bool = True
    severity_per_day: float | None = None
    stages: list[Stage] = field(default_factory=list, repr=False)
    triggers: list[Trigger] = field(default_factory=list, repr=False)

    @property
    def fall_per_day(self) -> float:
        """Severity lost per day; positive only when the affliction actually decays."""
        if self.severity_per_day is None:
            return 0.0
        return -self.severity_per_day

    @property
    def is_lethal(self) -> bool:
        return self.lethal_severity >= 0


@dataclass(eq=False)
class RandomFixedTrigger:
    target: AfflictionDefinition
    mtb_days: float


@dataclass(eq=False)
class RandomCurveTrigger:
    target: AfflictionDefinition
    base_mtb_days: float = 0.0
    curve: list[tuple[float, float]] = field(default_factory=list)


@dataclass(eq=False)
class OtherTrigger:
    target: AfflictionDefinition


Trigger = Union[RandomFixedTrigger, RandomCurveTrigger, OtherTrigger]


@dataclass
class PsychReactionStage:
    label: str | None = None
    mood: float = 0.0
    opinion: float = 0.0
    visible: bool = True


@dataclass(eq=False)
class PsychReaction:
    id: str
    label: str
    affliction: AfflictionDefinition
    stages: list[PsychReactionStage] = field(default_factory=list)


@dataclass(eq=False)
class Chemical:
    id: str
    label: str
    tolerance_affliction: AfflictionDefinition | None = None
    addiction_affliction: AfflictionDefinition | None = None


@dataclass(eq=False)
class DoseEffect:
    target: AfflictionDefinition
    severity: float = 0.0
    divide_by_body_size: bool = False
    kind: str = DoseEffectKind.OTHER


@dataclass
class SeverityRange:
    min: float = 0.0
    max: float = 0.0


@dataclass(eq=False)
class DrugComponent:
    addictiveness: float = 0.0
    min_tolerance_to_addict: float = 0.0
    overdose_severity: SeverityRange = field(default_factory=SeverityRange)
    large_overdose_chance: float = 0.0
    chemical: Chemical | None = None
    dose_effects: list[DoseEffect] = field(default_factory=list)

    @property
    def can_cause_overdose(self) -> bool:
        return self.overdose_severity.max > 0

    def tolerance_effect(self) -> DoseEffect | None:
        if self.chemical is None or self.chemical.tolerance_affliction is None:
            return None
        for effect in self.dose_effects:
            if effect.target is self.chemical.tolerance_affliction:
                return effect
        return None

    def tolerance_gain(self) -> float:
        effect = self.tolerance_effect()
        return effect.severity if effect is not None else 0.0

    def high_effect(self) -> DoseEffect | None:
        for effect in self.dose_effects:
            if effect.kind == DoseEffectKind.HIGH:
                return effect
        return None


@dataclass(eq=False)
class DrugDefinition:
    id: str
    label: str
    category: str = ""
    is_addictive: bool = False
    is_pleasurable: bool = False
    is_combat_enhancing: bool = False
    is_medical: bool = False
    joy: float = 0.0
    components: list[DrugComponent] = field(default_factory=list)

    @property
    def component(self) -> DrugComponent | None:
        return self.components[0] if self.components else None


@dataclass
class ReportEntry:
    category: str
    label: str
    description: str
    value: str
    priority: int = 0
    cross_references: list[str] = field(default_factory=list)
    numeric_value: float | None = None


@dataclass
class DosePolicyEntry:
    drug_id: str
    allowed_for_addiction: bool = False
    allowed_for_joy: bool = False
    allow_scheduled: bool = False
    days_frequency: float = 1.0
    only_if_joy_below: float = 1.0
    only_if_mood_below: float = 1.0
    take_to_inventory: int = 0


@dataclass
class HostDatabase:
    afflictions: dict[str, AfflictionDefinition] = field(default_factory=dict)
    chemicals: dict[str, Chemical] = field(default_factory=dict)
    drugs: dict[str, DrugDefinition] = field(default_factory=dict)
    psych_reactions: list[PsychReaction] = field(default_factory=list)

    def affliction(self, affliction_id: str) -> AfflictionDefinition | None:
        return self.afflictions.get(affliction_id)

    def drug(self, drug_id: str) -> DrugDefinition | None:
        return self.drugs.get(drug_id)

    def reactions_for(self, affliction: AfflictionDefinition) -> Iterator[PsychReaction]:
        for reaction in self.psych_reactions:
            if reaction.affliction is affliction:
                yield reaction
