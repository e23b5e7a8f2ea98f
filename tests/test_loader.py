from __future__ import annotations

import copy
import json
import tempfile
import unittest
from pathlib import Path

from drugstats.models import NO_LETHAL_SEVERITY, RandomCurveTrigger, RandomFixedTrigger
from drugstats.pipeline.loader import database_from_payload, load_snapshot
from drugstats.pipeline.validation import SnapshotError, check_snapshot, validate_snapshot
from drugstats.utils.io import read_json, read_yaml

EXAMPLE_SNAPSHOT = Path(__file__).resolve().parents[1] / "examples" / "data" / "vanilla.yaml"


class TestLoadSnapshot(unittest.TestCase):
    def setUp(self) -> None:
        self.db = load_snapshot(EXAMPLE_SNAPSHOT, quiet=True)

    def test_example_snapshot_loads(self) -> None:
        self.assertEqual(
            sorted(self.db.drugs),
            ["Beer", "CuproDrink", "GoJuice", "Luciferium", "SmokeleafJoint", "SweetTea", "Yayo"],
        )
        self.assertEqual(len(self.db.psych_reactions), 2)

    def test_references_resolve_to_shared_objects(self) -> None:
        alcohol = self.db.chemicals["Alcohol"]
        beer = self.db.drug("Beer")

        self.assertIs(beer.component.chemical, alcohol)
        self.assertIs(alcohol.tolerance_affliction, self.db.affliction("AlcoholTolerance"))
        self.assertIs(beer.component.tolerance_effect().target, alcohol.tolerance_affliction)

        trigger = self.db.affliction("AlcoholTolerance").triggers[0]
        self.assertIsInstance(trigger, RandomCurveTrigger)
        self.assertIs(trigger.target, self.db.affliction("Cirrhosis"))
        self.assertIsInstance(self.db.affliction("SmokeleafTolerance").triggers[0], RandomFixedTrigger)

    def test_defaults(self) -> None:
        self.assertEqual(self.db.affliction("ChemicalDamageModerate").lethal_severity, NO_LETHAL_SEVERITY)
        self.assertTrue(self.db.drug("Beer").is_addictive)
        self.assertFalse(self.db.drug("SweetTea").is_addictive)
        self.assertIsNone(self.db.drug("CuproDrink").component.chemical)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_snapshot(EXAMPLE_SNAPSHOT.with_name("missing.yaml"))


class TestSnapshotChecks(unittest.TestCase):
    def setUp(self) -> None:
        self.payload = read_yaml(EXAMPLE_SNAPSHOT)

    def test_example_has_only_warnings(self) -> None:
        errors, warnings = check_snapshot(self.payload)

        self.assertEqual(errors, [])
        self.assertIn("Drug CuproDrink: component 0 has no chemical and will not be reported", warnings)

    def test_self_referencing_trigger_is_allowed(self) -> None:
        payload = copy.deepcopy(self.payload)
        payload["afflictions"].append(
            {
                "id": "Spiral",
                "label": "spiral",
                "stages": [{"min_severity": 0.0}],
                "triggers": [{"kind": "other", "target": "Spiral"}],
            }
        )
        db = database_from_payload(payload, quiet=True)
        spiral = db.affliction("Spiral")

        self.assertIs(spiral.triggers[0].target, spiral)

    def test_unknown_reference_raises(self) -> None:
        payload = copy.deepcopy(self.payload)
        payload["chemicals"][0]["tolerance_affliction"] = "Nope"

        with self.assertRaises(SnapshotError) as caught:
            database_from_payload(payload, quiet=True)
        self.assertIn("Chemical Alcohol: unknown affliction 'Nope'", caught.exception.errors)

    def test_schema_violation_raises(self) -> None:
        payload = copy.deepcopy(self.payload)
        payload["drugs"][0]["components"][0]["addictiveness"] = "lots"

        with self.assertRaises(SnapshotError):
            database_from_payload(payload, quiet=True)

    def test_duplicate_ids(self) -> None:
        payload = copy.deepcopy(self.payload)
        payload["drugs"].append(copy.deepcopy(payload["drugs"][0]))

        errors, _ = check_snapshot(payload)
        self.assertIn("Duplicate drug id: Beer", errors)

    def test_validate_snapshot_writes_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            out_dir = Path(tmp_dir)
            report = validate_snapshot(self.payload, out_dir)
            written = read_json(out_dir / "validation" / "report.json")

        self.assertTrue(report["valid"])
        self.assertEqual(written, json.loads(json.dumps(report)))

    def test_validate_snapshot_raises_after_writing(self) -> None:
        payload = copy.deepcopy(self.payload)
        payload["drugs"][0]["components"][0]["chemical"] = "Nope"

        with tempfile.TemporaryDirectory() as tmp_dir:
            out_dir = Path(tmp_dir)
            with self.assertRaises(SnapshotError):
                validate_snapshot(payload, out_dir)
            written = read_json(out_dir / "validation" / "report.json")

        self.assertFalse(written["valid"])
        self.assertEqual(written["error_count"], 1)


if __name__ == "__main__":
    unittest.main()
