from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from drugstats.schemas import SNAPSHOT_SCHEMA
from drugstats.utils.io import write_json


class SnapshotError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


def check_snapshot(payload: Any, overdose_affliction: str = "DrugOverdose") -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []

    validator = Draft202012Validator(SNAPSHOT_SCHEMA)
    for err in validator.iter_errors(payload):
        location = "/".join(str(part) for part in err.absolute_path) or "<root>"
        errors.append(f"{location}: {err.message}")
    if errors:
        return errors, warnings

    afflictions = payload.get("afflictions", [])
    chemicals = payload.get("chemicals", [])
    drugs = payload.get("drugs", [])

    for kind, items in (("affliction", afflictions), ("chemical", chemicals), ("drug", drugs)):
        counts = Counter(item["id"] for item in items)
        for item_id, count in counts.items():
            if count > 1:
                errors.append(f"Duplicate {kind} id: {item_id}")

    affliction_ids = {item["id"] for item in afflictions}
    chemical_ids = {item["id"] for item in chemicals}

    def _require_affliction(ref: str | None, where: str) -> None:
        if ref is not None and ref not in affliction_ids:
            errors.append(f"{where}: unknown affliction '{ref}'")

    for affliction in afflictions:
        where = f"Affliction {affliction['id']}"
        for trigger in affliction.get("triggers", []):
            _require_affliction(trigger["target"], where)
        stages = affliction.get("stages", [])
        for stage in stages:
            for trigger in stage.get("triggers", []):
                _require_affliction(trigger["target"], where)
        severities = [stage.get("min_severity", 0.0) for stage in stages]
        if severities != sorted(severities):
            warnings.append(f"{where}: stages are not ordered by min_severity")

    for chemical in chemicals:
        where = f"Chemical {chemical['id']}"
        _require_affliction(chemical.get("tolerance_affliction"), where)
        _require_affliction(chemical.get("addiction_affliction"), where)

    for reaction in payload.get("psych_reactions", []):
        _require_affliction(reaction["affliction"], f"Psych reaction {reaction['id']}")

    for drug in drugs:
        where = f"Drug {drug['id']}"
        for index, component in enumerate(drug.get("components", [])):
            chemical = component.get("chemical")
            if chemical is None:
                warnings.append(f"{where}: component {index} has no chemical and will not be reported")
            elif chemical not in chemical_ids:
                errors.append(f"{where}: unknown chemical '{chemical}'")
            for effect in component.get("dose_effects", []):
                _require_affliction(effect["target"], where)
            severity = component.get("overdose_severity", {})
            if severity.get("min", 0.0) > severity.get("max", 0.0):
                warnings.append(f"{where}: overdose severity min is above max")

    if drugs and overdose_affliction not in affliction_ids:
        warnings.append(f"Overdose affliction '{overdose_affliction}' is missing; overdose stats will be skipped")

    return errors, warnings


def validate_snapshot(payload: Any, out_dir: Path, overdose_affliction: str = "DrugOverdose") -> dict[str, Any]:
    errors, warnings = check_snapshot(payload, overdose_affliction)
    report = {
        "valid": len(errors) == 0,
        "error_count": len(errors),
        "errors": errors,
        "warning_count": len(warnings),
        "warnings": warnings,
    }
    write_json(out_dir / "validation" / "report.json", report)
    if errors:
        raise SnapshotError("Validation failed. See validation/report.json for details.", errors)
    return report
