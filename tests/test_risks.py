from __future__ import annotations

import unittest

from drugstats.models import (
    OtherTrigger,
    PsychReaction,
    PsychReactionStage,
    RandomCurveTrigger,
    RandomFixedTrigger,
    Stage,
    StageStat,
    StatCategory,
)
from drugstats.pipeline.risks import aggregate_risk, describe_trigger
from tests.factories import make_affliction, make_context, make_database


class TestAggregateRisk(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = make_context()

    def test_incurable_and_fatal_keys_keep_their_order(self) -> None:
        affliction = make_affliction(
            "Addiction",
            curable=False,
            lethal_severity=0.92,
            stages=[Stage(min_severity=0.0)],
        )
        entry = aggregate_risk(affliction, "AddictionRisks", StatCategory.DRUG_ADDICTION, 2400, self.ctx)

        self.assertEqual(entry.value, "Incurable, Fatal")
        self.assertEqual(entry.label, "Addiction risks")
        self.assertEqual(entry.category, StatCategory.DRUG_ADDICTION)
        self.assertEqual(entry.priority, 2400)
        self.assertEqual(
            entry.description,
            "What happens when addicted to this drug and it is not taken regularly."
            "\n\nIncurable\n\nFatal at 92%",
        )

    def test_single_stage_is_reported_even_when_hidden(self) -> None:
        affliction = make_affliction(
            "Hangover",
            label="hangover",
            stages=[Stage(min_severity=0.0, label=None, visible=False, vomit_mtb_days=0.5)],
        )
        entry = aggregate_risk(affliction, "HighBenefitsRisks", StatCategory.DRUG, 2400, self.ctx)

        self.assertEqual(entry.value, "Hangover")
        self.assertIn("Hangover:\n    Mean time between vomiting: 12 hours", entry.description)

    def test_multi_stage_skips_unlabeled_and_hidden_stages(self) -> None:
        affliction = make_affliction(
            "Withdrawal",
            stages=[
                Stage(min_severity=0.0),
                Stage(min_severity=0.5, label="minor", visible=False, vomit_mtb_days=1.0),
                Stage(min_severity=0.8, label="major", death_mtb_days=2.0),
            ],
        )
        entry = aggregate_risk(affliction, "AddictionRisks", StatCategory.DRUG_ADDICTION, 2400, self.ctx)

        self.assertEqual(entry.value, "Major")
        self.assertIn("Major:\n    Mean time to death: 2 days", entry.description)
        self.assertNotIn("Minor", entry.description)

    def test_stage_without_anything_to_say_is_dropped(self) -> None:
        affliction = make_affliction(
            "Quiet",
            stages=[Stage(min_severity=0.0, label="calm"), Stage(min_severity=0.5, label="calmer")],
        )
        entry = aggregate_risk(affliction, "ToleranceRisks", StatCategory.DRUG_TOLERANCE, 2400, self.ctx)

        self.assertEqual(entry.value, "None")
        self.assertEqual(entry.description, "What happens as tolerance to this drug builds up.")

    def test_stage_stats_are_listed_by_ascending_priority(self) -> None:
        affliction = make_affliction(
            "High",
            stages=[
                Stage(
                    min_severity=0.0,
                    label="stoned",
                    stats=[
                        StageStat(label="moving", value="-20%", priority=4060),
                        StageStat(label="consciousness", value="-30%", priority=4050),
                    ],
                )
            ],
        )
        entry = aggregate_risk(affliction, "HighBenefitsRisks", StatCategory.DRUG, 2400, self.ctx)

        self.assertIn("Stoned:\n    Consciousness: -30%\n    Moving: -20%", entry.description)

    def test_top_level_triggers_add_keys_and_cross_references(self) -> None:
        asthma = make_affliction("Asthma", label="asthma")
        cirrhosis = make_affliction("Cirrhosis", label="cirrhosis")
        dementia = make_affliction("Dementia", label="dementia")
        tolerance = make_affliction(
            "Tolerance",
            stages=[Stage(min_severity=0.0, visible=False)],
            triggers=[
                RandomFixedTrigger(target=asthma, mtb_days=20),
                RandomCurveTrigger(target=cirrhosis, curve=[(0.45, 99999), (0.5, 75), (1.0, 0.5)]),
                OtherTrigger(target=dementia),
            ],
        )
        entry = aggregate_risk(tolerance, "ToleranceRisks", StatCategory.DRUG_TOLERANCE, 2400, self.ctx)

        self.assertEqual(entry.value, "Asthma, Cirrhosis, Dementia")
        self.assertEqual(entry.cross_references, ["Tolerance", "Asthma", "Cirrhosis", "Dementia"])
        self.assertIn(
            "Mean time to asthma: 1 quadrum, 5 days\n"
            "Mean time to cirrhosis:\n"
            "    45%: Never\n"
            "    50%: 1 year, 1 quadrum\n"
            "    100%: 12 hours\n"
            "Can cause dementia",
            entry.description,
        )

    def test_thoughts_tied_to_the_affliction(self) -> None:
        addiction = make_affliction("Addiction", stages=[Stage(min_severity=0.0)], curable=False)
        reaction = PsychReaction(
            id="Withdrawal",
            label="withdrawal",
            affliction=addiction,
            stages=[
                PsychReactionStage(label=None, mood=0, visible=False),
                PsychReactionStage(label="craving", mood=-25.7, opinion=-5),
            ],
        )
        ctx = make_context(make_database(addiction, psych_reactions=[reaction]))
        entry = aggregate_risk(addiction, "AddictionRisks", StatCategory.DRUG_ADDICTION, 2400, ctx)

        self.assertEqual(entry.value, "Incurable, Thoughts")
        self.assertIn("Thoughts:\n    Craving: Mood -25, Opinion -5", entry.description)

    def test_thoughts_for_other_afflictions_are_ignored(self) -> None:
        addiction = make_affliction("Addiction", stages=[Stage(min_severity=0.0)])
        other = make_affliction("Other")
        reaction = PsychReaction(
            id="Unrelated",
            label="unrelated",
            affliction=other,
            stages=[PsychReactionStage(label="sad", mood=-5)],
        )
        ctx = make_context(make_database(addiction, other, psych_reactions=[reaction]))
        entry = aggregate_risk(addiction, "AddictionRisks", StatCategory.DRUG_ADDICTION, 2400, ctx)

        self.assertEqual(entry.value, "None")

    def test_stage_triggers_are_indented_inside_their_stage(self) -> None:
        damage = make_affliction("Damage", label="brain damage")
        affliction = make_affliction(
            "Overdose",
            stages=[
                Stage(min_severity=0.0),
                Stage(min_severity=0.5, label="major", triggers=[RandomFixedTrigger(target=damage, mtb_days=1.5)]),
            ],
        )
        entry = aggregate_risk(affliction, "OverdoseRisks", StatCategory.DRUG_OVERDOSE, 2300, self.ctx)

        self.assertEqual(entry.value, "Major")
        self.assertIn("Major:\n    Mean time to brain damage: 1.5 days", entry.description)
        self.assertEqual(entry.cross_references, ["Overdose"])

    def test_risk_keys_cover_every_heading(self) -> None:
        target = make_affliction("Target")
        affliction = make_affliction(
            "Busy",
            curable=False,
            lethal_severity=1.0,
            stages=[
                Stage(min_severity=0.0),
                Stage(min_severity=0.3, label="one", vomit_mtb_days=1),
                Stage(min_severity=0.6, label="two", mental_break_mtb_days=3),
            ],
            triggers=[RandomFixedTrigger(target=target, mtb_days=4)],
        )
        entry = aggregate_risk(affliction, "OverdoseRisks", StatCategory.DRUG_OVERDOSE, 2300, self.ctx)

        keys = entry.value.split(", ")
        headings = entry.description.split("\n\n")[1:]
        self.assertGreaterEqual(len(keys), len(headings))
        self.assertEqual(keys, ["Incurable", "One", "Two", "Target", "Fatal"])

    def test_missing_affliction_fails_fast(self) -> None:
        with self.assertRaises(ValueError):
            aggregate_risk(None, "ToleranceRisks", StatCategory.DRUG_TOLERANCE, 2400, self.ctx)


class TestDescribeTrigger(unittest.TestCase):
    def test_curve_with_positive_base_uses_base(self) -> None:
        ctx = make_context()
        target = make_affliction("Target", label="heart attack")
        trigger = RandomCurveTrigger(target=target, base_mtb_days=1.0, curve=[(0.5, 10.0)])

        self.assertEqual(describe_trigger(trigger, ctx), ["Mean time to heart attack: 1 day"])

    def test_curve_never_boundaries(self) -> None:
        ctx = make_context()
        target = make_affliction("Target", label="heart attack")
        trigger = RandomCurveTrigger(target=target, curve=[(0.1, 35000), (0.2, 0), (0.3, 34999)])

        self.assertEqual(
            describe_trigger(trigger, ctx),
            [
                "Mean time to heart attack:",
                "    10%: Never",
                "    20%: Never",
                "    30%: 583 years, 1 quadrum",
            ],
        )

    def test_curve_without_points_falls_back(self) -> None:
        ctx = make_context()
        target = make_affliction("Target", label="heart attack")

        self.assertEqual(describe_trigger(RandomCurveTrigger(target=target), ctx), ["Can cause heart attack"])


if __name__ == "__main__":
    unittest.main()
