from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from jsonschema import Draft202012Validator
from rich.console import Console
from tqdm import tqdm

from drugstats.context import AnalysisContext
from drugstats.models import DosePolicyEntry, DrugDefinition
from drugstats.pipeline.dosage import compute_safe_dosing, high_duration_days
from drugstats.schemas import POLICY_STORE_SCHEMA
from drugstats.utils.io import read_structured, write_yaml

console = Console()

AUTO_POLICY_LABEL = "Responsible (Auto)"


@dataclass
class PolicyStore:
    """Drug id -> policy entry. Upsert only; locked drugs belong to the user."""

    label: str = AUTO_POLICY_LABEL
    entries: dict[str, DosePolicyEntry] = field(default_factory=dict)
    locked: set[str] = field(default_factory=set)

    def upsert(self, entry: DosePolicyEntry) -> None:
        self.entries[entry.drug_id] = entry

    def get(self, drug_id: str) -> DosePolicyEntry | None:
        return self.entries.get(drug_id)

    def lock(self, drug_id: str) -> None:
        self.locked.add(drug_id)

    def is_locked(self, drug_id: str) -> bool:
        return drug_id in self.locked

    def __contains__(self, drug_id: object) -> bool:
        return drug_id in self.entries

    def __iter__(self) -> Iterator[DosePolicyEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "locked": sorted(self.locked),
            "entries": [asdict(entry) for entry in self.entries.values()],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "PolicyStore":
        Draft202012Validator(POLICY_STORE_SCHEMA).validate(payload)
        entries = [DosePolicyEntry(**raw) for raw in payload.get("entries", [])]
        return cls(
            label=payload["label"],
            entries={entry.drug_id: entry for entry in entries},
            locked=set(payload.get("locked", [])),
        )


def load_policy_store(path: Path, label: str = AUTO_POLICY_LABEL) -> PolicyStore:
    if not path.exists():
        return PolicyStore(label=label)
    return PolicyStore.from_dict(read_structured(path) or {"label": label, "entries": []})


def save_policy_store(store: PolicyStore, path: Path) -> None:
    write_yaml(path, store.to_dict())


def derive_default_policy(
    drug: DrugDefinition,
    safe_interval_days: float,
    not_safe: bool,
    high_duration: float = 0.0,
    settings: dict[str, Any] | None = None,
) -> DosePolicyEntry:
    settings = settings or {}
    entry = DosePolicyEntry(drug_id=drug.id)

    entry.allowed_for_addiction = drug.is_addictive
    entry.allowed_for_joy = (
        not drug.is_addictive and drug.is_pleasurable and not not_safe and safe_interval_days == 0
    )

    # Medical drugs (life-changing ones included) are never scheduled automatically
    if drug.is_medical:
        return entry

    if not not_safe and not entry.allowed_for_joy and high_duration > 0:
        joy_min = settings.get("joy_below_min", 0.2)
        joy_max = settings.get("joy_below_max", 0.5)
        entry.allow_scheduled = True
        entry.days_frequency = max(safe_interval_days, high_duration)
        entry.only_if_joy_below = max(min(1 - drug.joy, joy_max), joy_min)
        entry.only_if_mood_below = settings.get("only_if_mood_below", 0.35)
    return entry


def policy_for_drug(drug: DrugDefinition, ctx: AnalysisContext) -> DosePolicyEntry:
    comp = drug.component
    if comp is None:
        return derive_default_policy(drug, 0.0, True, settings=ctx.policy)
    metrics = compute_safe_dosing(comp, ctx)
    return derive_default_policy(
        drug,
        metrics.safe_interval_days,
        metrics.not_safe,
        high_duration_days(comp),
        settings=ctx.policy,
    )


def register_discovered_drug(ctx: AnalysisContext, store: PolicyStore, drug: DrugDefinition) -> bool:
    """Write the default policy for one drug; False when the drug is user-locked or a new medical drug.

    Medical drugs already in the store are reset so stale scheduling does not survive.
    """
    if store.is_locked(drug.id):
        return False
    if drug.is_medical and drug.id not in store:
        return False
    store.upsert(policy_for_drug(drug, ctx))
    return True


def create_or_update_policy(
    ctx: AnalysisContext,
    store: PolicyStore,
    drugs: Iterable[DrugDefinition] | None = None,
) -> int:
    drugs = list(drugs if drugs is not None else ctx.database.drugs.values())
    show_progress = ctx.settings.get("runtime", {}).get("progress", True)
    updated = 0
    for drug in tqdm(drugs, desc="Deriving dose policies", disable=not show_progress):
        if register_discovered_drug(ctx, store, drug):
            updated += 1
    return updated


class AutoPolicyMaker:
    """Keeps the automatic policy in step with the host's known drugs."""

    def __init__(self, ctx: AnalysisContext, store: PolicyStore | None = None):
        self.ctx = ctx
        self.store = store or PolicyStore(label=ctx.policy.get("label", AUTO_POLICY_LABEL))
        self.known: set[str] = set()

    def finalize_init(self) -> int:
        updated = create_or_update_policy(self.ctx, self.store)
        self.known = set(self.ctx.database.drugs)
        console.print(f"[green]Policy '{self.store.label}' updated for {updated} drug(s).[/green]")
        return updated

    def drug_discovered(self, drug: DrugDefinition) -> bool:
        if drug.id in self.known:
            return False
        self.known.add(drug.id)
        return register_discovered_drug(self.ctx, self.store, drug)

    def sync(self) -> list[str]:
        added = []
        for drug in self.ctx.database.drugs.values():
            if drug.id not in self.known and self.drug_discovered(drug):
                added.append(drug.id)
        return added
