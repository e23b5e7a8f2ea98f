from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from drugstats.config import resolve_config
from drugstats.models import AfflictionDefinition, HostDatabase
from drugstats.utils.text import PeriodFormatter
from drugstats.utils.translation import Translator


@dataclass
class AnalysisContext:
    """Everything one analysis pass reads: host data, text lookup and engine settings."""

    database: HostDatabase
    translate: Translator
    settings: dict[str, Any] = field(default_factory=resolve_config)

    def __post_init__(self) -> None:
        self.periods = PeriodFormatter.from_engine_config(self.translate, self.engine)

    @property
    def engine(self) -> dict[str, Any]:
        return self.settings.get("engine", {})

    @property
    def policy(self) -> dict[str, Any]:
        return self.settings.get("policy", {})

    @property
    def never_mtb_days(self) -> float:
        return float(self.engine.get("never_mtb_days", 35000))

    @property
    def overdose_decay_per_day(self) -> float:
        return float(self.engine.get("overdose_decay_per_day", 1.0))

    @property
    def overdose_fall_per_day(self) -> float:
        """The overdose affliction's own fall rate, else the configured fallback."""
        overdose = self.overdose_affliction
        if overdose is not None and overdose.fall_per_day > 0:
            return overdose.fall_per_day
        return self.overdose_decay_per_day

    @property
    def overdose_affliction(self) -> AfflictionDefinition | None:
        return self.database.affliction(self.engine.get("overdose_affliction", "DrugOverdose"))

    def days_to_period(self, days: float) -> str:
        return self.periods.days_to_period(days)


def build_context(
    database: HostDatabase,
    config: dict[str, Any] | None = None,
    *,
    translate: Translator | None = None,
) -> AnalysisContext:
    resolved = resolve_config(config)
    report_cfg = resolved.get("report", {})
    if translate is None:
        translate = Translator.load(
            report_cfg.get("language", "english"),
            report_cfg.get("translations_path"),
        )
    return AnalysisContext(database=database, translate=translate, settings=resolved)
