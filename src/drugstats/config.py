from __future__ import annotations

from dataclasses import dataclass
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "engine": {
        "ticks_per_hour": 2500,
        "hours_per_day": 24,
        "days_per_quadrum": 15,
        "quadrums_per_year": 4,
        "never_mtb_days": 35000,
        "overdose_affliction": "DrugOverdose",
        # used only when the overdose affliction has no fall rate of its own
        "overdose_decay_per_day": 1.0,
    },
    "policy": {
        "label": "Responsible (Auto)",
        "only_if_mood_below": 0.35,
        "joy_below_min": 0.2,
        "joy_below_max": 0.5,
    },
    "report": {
        "language": "english",
        "translations_path": None,
        "category_order": [
            "Drug",
            "DrugTolerance",
            "DrugAddiction",
            "DrugOverdose",
            "CapacityEffects",
        ],
    },
    "runtime": {
        "progress": True,
    },
}


@dataclass
class ResolvedConfig:
    data: dict[str, Any]
    source_path: Path


def load_config(path: Path) -> ResolvedConfig:
    path = path.expanduser().resolve()
    with path.open("r", encoding="utf-8") as handle:
        user_cfg = yaml.safe_load(handle) or {}
    merged = _deep_merge(DEFAULT_CONFIG, user_cfg)
    return ResolvedConfig(data=merged, source_path=path)


def resolve_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """Resolve a config dict by applying overrides to defaults."""
    base = deepcopy(DEFAULT_CONFIG)
    if overrides:
        return _deep_merge(base, overrides)
    return base


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key in base.keys() | override.keys():
        if key in base and key in override:
            if isinstance(base[key], dict) and isinstance(override[key], dict):
                result[key] = _deep_merge(base[key], override[key])
            else:
                result[key] = override[key]
        elif key in base:
            result[key] = deepcopy(base[key])
        else:
            result[key] = override[key]
    return result
