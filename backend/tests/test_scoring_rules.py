import itertools
import unittest

try:
    from interpretreflect.models.payloads import (
        CompassCheckAnswers,
        MentoringReflectionAnswers,
        TeamingReflectionAnswers,
        WellnessCheckInAnswers,
    )
    from interpretreflect.scoring import compass_check, mentoring_reflection, teaming_reflection, wellness_checkin
    from interpretreflect.scoring.bounds import round_half_up
    from interpretreflect.scoring.wellness_checkin import leading_int

    DEPENDENCIES_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - environment dependent
    DEPENDENCIES_AVAILABLE = False


def _assert_within(test: unittest.TestCase, scores: dict, bounds: dict[str, tuple[int, int]]) -> None:
    for key, (low, high) in bounds.items():
        if key not in scores:
            continue
        test.assertGreaterEqual(scores[key], low, f"{key} below range: {scores}")
        test.assertLessEqual(scores[key], high, f"{key} above range: {scores}")


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class CompassCheckScoringTests(unittest.TestCase):
    def test_crushing_weight_affecting_sleep(self) -> None:
        scores = compass_check.compute_compass_check_scores(
            CompassCheckAnswers(weightLevel="crushing", affecting="sleep")
        )
        self.assertEqual(scores["moralDistressLevel"], 10)
        self.assertEqual(scores["residueIntensity"], 8)

    def test_unknown_answers_fall_back_to_defaults(self) -> None:
        scores = compass_check.compute_compass_check_scores(
            CompassCheckAnswers(weightLevel="moderate", affecting="unsure", legitimatelyHard="perhaps")
        )
        self.assertEqual(scores["moralDistressLevel"], 5)
        self.assertEqual(scores["residueIntensity"], 5)
        self.assertEqual(scores["decisionDifficulty"], 5)
        self.assertEqual(scores["roleConfusionLevel"], 6)
        self.assertEqual(scores["clarityGained"], 3)

    def test_many_intact_values_stay_on_scale(self) -> None:
        scores = compass_check.compute_compass_check_scores(
            CompassCheckAnswers(
                biggerPicture="access matters",
                harmWithoutInterpreters="nobody would be heard",
                valuesIntact=["integrity", "accuracy", "respect", "confidentiality"],
                challengedValues=[f"value-{index}" for index in range(12)],
            )
        )
        self.assertEqual(scores["realignmentSuccess"], 10)
        self.assertEqual(scores["valuesAlignmentScore"], 1)
        self.assertEqual(scores["intactValuesCount"], 4)
        self.assertTrue(scores["perspectiveShift"])

    def test_self_compassion_bands(self) -> None:
        short = compass_check.compute_compass_check_scores(CompassCheckAnswers(selfForgiveness="I did my best"))
        long = compass_check.compute_compass_check_scores(
            CompassCheckAnswers(selfForgiveness="I did the best I could with what I knew in that moment, truly.")
        )
        empty = compass_check.compute_compass_check_scores(CompassCheckAnswers())
        self.assertEqual(short["selfCompassionLevel"], 6)
        self.assertFalse(short["forgivenessPracticed"])
        self.assertEqual(long["selfCompassionLevel"], 8)
        self.assertTrue(long["forgivenessPracticed"])
        self.assertEqual(empty["selfCompassionLevel"], 3)

    def test_every_categorical_combination_stays_in_range(self) -> None:
        weights = [*compass_check.MORAL_DISTRESS_BY_WEIGHT, "", "other"]
        affecting = [*compass_check.RESIDUE_INTENSITY_BY_AFFECTING, ""]
        reasons = [*compass_check.ROLE_CONFUSION_BY_REASON, ""]
        hard = [*compass_check.DECISION_DIFFICULTY_BY_ANSWER, ""]
        for weight, affects, reason, difficulty in itertools.product(weights, affecting, reasons, hard):
            scores = compass_check.compute_compass_check_scores(
                CompassCheckAnswers(
                    weightLevel=weight,
                    affecting=affects,
                    challengeReason=reason,
                    legitimatelyHard=difficulty,
                    professionalObligation="accuracy",
                    personalValues="care",
                    differentNext="pause earlier",
                )
            )
            _assert_within(self, scores, compass_check.SCORE_BOUNDS)


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class MentoringReflectionScoringTests(unittest.TestCase):
    FEELINGS = ["supported", "inspired", "neutral", "uncomfortable", "defensive", "", "curious"]

    def test_feeling_tables(self) -> None:
        self.assertEqual(mentoring_reflection.emotional_clarity_for("supported"), 8)
        self.assertEqual(mentoring_reflection.emotional_clarity_for("neutral"), 5)
        self.assertEqual(mentoring_reflection.emotional_clarity_for("defensive"), 6)
        self.assertEqual(mentoring_reflection.resistance_level_for("defensive"), 7)
        self.assertEqual(mentoring_reflection.resistance_level_for("inspired"), 1)
        self.assertEqual(mentoring_reflection.resistance_level_for("curious"), 4)

    def test_scores_stay_in_range_for_every_feeling(self) -> None:
        for feeling in self.FEELINGS:
            scores = mentoring_reflection.compute_mentoring_reflection_scores(
                MentoringReflectionAnswers(
                    sessionFeeling=feeling,
                    learnedWork="a",
                    learnedSelf="b",
                    learnedGrowth="c",
                    patternSeen="rushing and over-explaining",
                    assumptionQuestion="d",
                    workedWell=["listening", "examples", "pacing", "honesty", "follow-up", "humor"],
                    couldImprove=["time", "focus", "structure", "depth", "notes", "tone"],
                    followUp="monthly coffee chat",
                    stopDoing="x",
                    startDoing="y",
                    continueDoing="z",
                    growthIndicator="w",
                )
            )
            _assert_within(self, scores, mentoring_reflection.SCORE_BOUNDS)
            self.assertEqual(scores["patternsIdentified"], 2)
            self.assertEqual(scores["relationshipQuality"], 1)

    def test_mentoring_insights_fallback(self) -> None:
        empty = mentoring_reflection.compute_mentoring_reflection_scores(MentoringReflectionAnswers())
        heard = mentoring_reflection.compute_mentoring_reflection_scores(
            MentoringReflectionAnswers(valuableHeard="Pause before clarifying")
        )
        self.assertEqual(empty["mentoring_insights"], "Mentoring reflection completed")
        self.assertEqual(heard["mentoring_insights"], "Pause before clarifying")

    def test_conditional_prompts_follow_session_feeling(self) -> None:
        hidden = mentoring_reflection.hidden_mentoring_reflection_fields(
            MentoringReflectionAnswers(sessionFeeling="uncomfortable")
        )
        self.assertNotIn("difficultTrigger", hidden)
        self.assertIn("positiveCreated", hidden)

        hidden = mentoring_reflection.hidden_mentoring_reflection_fields(
            MentoringReflectionAnswers(sessionFeeling="supported")
        )
        self.assertIn("difficultTrigger", hidden)
        self.assertNotIn("positiveCreated", hidden)


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class TeamingReflectionScoringTests(unittest.TestCase):
    def test_every_categorical_combination_stays_in_range(self) -> None:
        combos = itertools.product(
            [*teaming_reflection.COORDINATION_BY_HANDOFFS, ""],
            [*teaming_reflection.RECOVERY_RATE_BY_OUTCOME, ""],
            [*teaming_reflection.TRUST_BY_PARTNER, ""],
            [*teaming_reflection.EFFECTIVENESS_BY_RATING, ""],
        )
        for handoffs, recovery, partner, rating in combos:
            scores = teaming_reflection.compute_teaming_reflection_scores(
                TeamingReflectionAnswers(
                    handoffs=handoffs,
                    recoverySuccess=recovery,
                    partnerSeemed=partner,
                    overallRating=rating,
                    comfortableWith=["a", "b", "c", "d", "e", "f", "g"],
                )
            )
            _assert_within(self, scores, teaming_reflection.SCORE_BOUNDS)

    def test_defaults_and_keep_doing_list(self) -> None:
        answers = TeamingReflectionAnswers(keepDoing1="signal early", actualLoad="50-50")
        scores = teaming_reflection.compute_teaming_reflection_scores(answers)
        self.assertEqual(scores["coordinationScore"], 7)
        self.assertEqual(scores["recoveryRate"], 50)
        self.assertEqual(scores["trustScore"], 7)
        self.assertEqual(scores["teamEffectivenessScore"], 5)
        self.assertTrue(scores["loadBalanceEffective"])
        self.assertEqual(scores["keepDoing"], ["signal early"])


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "pydantic is not installed")
class WellnessCheckInScoringTests(unittest.TestCase):
    def test_leading_int(self) -> None:
        self.assertEqual(leading_int("7 - mostly rested"), 7)
        self.assertEqual(leading_int("drained"), 5)
        self.assertEqual(leading_int("0"), 5)
        self.assertEqual(leading_int(""), 5)

    def test_scale_answers_stay_in_range(self) -> None:
        for raw in ["1", "5", "10", "42 - off the chart", "-3", "n/a"]:
            for intensity in [*wellness_checkin.EMOTIONAL_BALANCE_BY_INTENSITY, "high", ""]:
                scores = wellness_checkin.compute_wellness_checkin_scores(
                    WellnessCheckInAnswers(
                        overallEnergy=raw,
                        workingMemory=raw,
                        supportSystem=raw,
                        meaningPurpose=raw,
                        intensityLevel=intensity,
                        stressLevel=0,
                        energyLevel=15,
                    )
                )
                _assert_within(self, scores, wellness_checkin.SCORE_BOUNDS)

    def test_crisis_plan_and_conditional_fields(self) -> None:
        red = WellnessCheckInAnswers(wellnessLevel="red", emotionOrigin="specific")
        green = WellnessCheckInAnswers(wellnessLevel="green", emotionOrigin="general")
        self.assertTrue(wellness_checkin.compute_wellness_checkin_scores(red)["needsCrisisPlan"])
        self.assertEqual(wellness_checkin.hidden_wellness_checkin_fields(red), set())
        self.assertEqual(
            wellness_checkin.hidden_wellness_checkin_fields(green),
            {"crisisAction", "originDetail"},
        )

    def test_overall_wellbeing_rounds_half_up(self) -> None:
        scores = wellness_checkin.compute_wellness_checkin_scores(
            WellnessCheckInAnswers(stressLevel=6, energyLevel=7)
        )
        self.assertEqual(scores["overall_wellbeing"], 7)
        self.assertEqual(round_half_up(2.5), 3)


if __name__ == "__main__":
    unittest.main()
