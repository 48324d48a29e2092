from interpretreflect.models.payloads import TeamingReflectionAnswers
from interpretreflect.scoring.bounds import clamp_scores, count_filled

COORDINATION_BY_HANDOFFS = {
    "seamless": 10,
    "smooth": 8,
    "choppy": 5,
    "rough": 3,
}
ERROR_COUNT_BY_BAND = {
    "none": 0,
    "1-2-minor": 2,
    "3-5-minor": 4,
    "1-2-major": 2,
    "several-major": 5,
}
RECOVERY_RATE_BY_OUTCOME = {
    "smooth": 100,
    "adequate": 75,
    "struggled": 40,
    "failed": 0,
}
TRUST_BY_PARTNER = {
    "supportive": 10,
    "professional": 8,
    "critical": 5,
    "judgmental": 3,
    "unavailable": 1,
}
EFFECTIVENESS_BY_RATING = {
    "exceptional": 10,
    "strong": 8,
    "good": 6,
    "adequate": 4,
    "struggled": 2,
}

SCORE_BOUNDS: dict[str, tuple[int, int]] = {
    "coordinationScore": (1, 10),
    "recoveryRate": (0, 100),
    "trustScore": (1, 10),
    "psychologicalSafety": (0, 10),
    "teamEffectivenessScore": (1, 10),
    "team_effectiveness": (1, 10),
}


def compute_teaming_reflection_scores(answers: TeamingReflectionAnswers) -> dict:
    effectiveness = EFFECTIVENESS_BY_RATING.get(answers.overallRating, 5)
    scores = {
        "coordinationScore": COORDINATION_BY_HANDOFFS.get(answers.handoffs, 7),
        "loadBalanceEffective": answers.plannedLoad == answers.actualLoad or answers.actualLoad == "50-50",
        "errorCount": ERROR_COUNT_BY_BAND.get(answers.errorsCaught, 0),
        "recoveryRate": RECOVERY_RATE_BY_OUTCOME.get(answers.recoverySuccess, 50),
        "trustScore": TRUST_BY_PARTNER.get(answers.partnerSeemed, 7),
        "psychologicalSafety": min(10, len(answers.comfortableWith) * 2),
        "feedbackGiven": bool(answers.partnerHelped and answers.partnerStrength and answers.selfProud),
        "actionableItems": count_filled(answers.partnerIdea, answers.selfWorkOn, answers.selfPractice),
        "planMade": bool(answers.keepDoing1 and answers.tryDifferently and answers.prepareBetter),
        "improvementGoals": count_filled(
            answers.tryDifferently,
            answers.prepareBetter,
            answers.improvedSignal,
            answers.selfWorkOn,
            answers.selfPractice,
        ),
        "keepDoing": [item for item in (answers.keepDoing1, answers.keepDoing2) if item],
        "teamEffectivenessScore": effectiveness,
        "team_effectiveness": effectiveness,
    }
    return clamp_scores(scores, SCORE_BOUNDS)


def hidden_teaming_reflection_fields(answers: TeamingReflectionAnswers) -> set[str]:
    # keepDoing replaces the two single-line inputs.
    return {"keepDoing1", "keepDoing2"}
