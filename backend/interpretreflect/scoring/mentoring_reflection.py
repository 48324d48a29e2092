from interpretreflect.models.payloads import MentoringReflectionAnswers
from interpretreflect.scoring.bounds import clamp_scores, count_filled, round_half_up

POSITIVE_FEELINGS = ("supported", "inspired")
DIFFICULT_FEELINGS = ("uncomfortable", "defensive")

DIFFICULT_PROMPT_FIELDS = {"difficultTrigger", "difficultMeaning", "difficultProcess"}
POSITIVE_PROMPT_FIELDS = {"positiveCreated", "positiveCultivate"}

SCORE_BOUNDS: dict[str, tuple[int, int]] = {
    "wisdomScore": (0, 10),
    "emotionalClarity": (1, 10),
    "resistanceLevel": (1, 10),
    "planSpecificity": (1, 10),
    "commitmentLevel": (0, 10),
    "clarityGained": (0, 10),
    "mentorEffectiveness": (0, 10),
    "relationshipQuality": (1, 10),
    "sessionValue": (1, 10),
    "applicabilityScore": (0, 10),
}


def _feeling_matches(feeling: str, options: tuple[str, ...]) -> bool:
    return any(option in feeling for option in options)


def emotional_clarity_for(feeling: str) -> int:
    if _feeling_matches(feeling, POSITIVE_FEELINGS):
        return 8
    if "neutral" in feeling:
        return 5
    if _feeling_matches(feeling, DIFFICULT_FEELINGS):
        return 6
    return 7


def resistance_level_for(feeling: str) -> int:
    if "defensive" in feeling:
        return 7
    if "uncomfortable" in feeling:
        return 5
    if "neutral" in feeling:
        return 3
    if _feeling_matches(feeling, POSITIVE_FEELINGS):
        return 1
    return 4


def compute_mentoring_reflection_scores(answers: MentoringReflectionAnswers) -> dict:
    wisdom_score = count_filled(
        answers.learnedWork,
        answers.learnedSelf,
        answers.learnedGrowth,
        answers.patternSeen,
        answers.assumptionQuestion,
    ) * 2
    patterns_identified = 0
    if answers.patternSeen:
        patterns_identified = 1 + (1 if "and" in answers.patternSeen else 0)

    emotional_clarity = emotional_clarity_for(answers.sessionFeeling)
    resistance_level = resistance_level_for(answers.sessionFeeling)

    action_items_count = (
        count_filled(answers.immediateAction, answers.weekAction, answers.monthAction)
        + count_filled(answers.resource1, answers.resource2)
        + count_filled(answers.personToTalk)
    )
    plan_specificity = (
        (3 if answers.immediateWhen and answers.immediateBecause else 1)
        + (3 if answers.weekDay and answers.weekPractice else 1)
        + (2 if answers.monthAction else 0)
        + (2 if answers.checkInDate else 0)
    )
    commitment_level = min(
        10,
        (3 if answers.stopDoing else 0)
        + (3 if answers.startDoing else 0)
        + (2 if answers.continueDoing else 0)
        + (2 if answers.growthIndicator else 0),
    )
    clarity_gained = (
        (4 if answers.nowClear else 0)
        + (2 if answers.stillFuzzy else 0)
        + (1 if answers.mysterious else 0)
        + (3 if answers.nextEdge else 0)
    )
    commitments_made = count_filled(answers.stopDoing, answers.startDoing, answers.continueDoing)

    scores = {
        "insightsCaptured": count_filled(
            answers.valuableHeard,
            answers.surprisingAdvice,
            answers.challengedThinking,
            answers.neededValidation,
        ),
        "wisdomScore": wisdom_score,
        "patternsIdentified": patterns_identified,
        "emotionalClarity": emotional_clarity,
        "resistanceLevel": resistance_level,
        "actionItemsCount": action_items_count,
        "planSpecificity": plan_specificity,
        "commitmentLevel": commitment_level,
        "clarityGained": clarity_gained,
        "growthAreasIdentified": len(answers.needsFor) + (1 if answers.nextEdge else 0),
        "mentorEffectiveness": min(10, len(answers.workedWell) * 2 + (2 if answers.followUp else 0)),
        "relationshipQuality": max(1, 10 - len(answers.couldImprove) * 2),
        "followUpPlanned": bool(answers.followUp) and len(answers.followUp) > 10,
        "commitmentsMade": commitments_made,
        "accountabilitySet": bool(answers.checkInDate and answers.growthIndicator),
        "wisdomItems": count_filled(
            answers.quotableInsight,
            answers.storyExample,
            answers.mistakeAvoid,
            answers.successPattern,
        ),
        "sessionValue": round_half_up(
            (wisdom_score + emotional_clarity + plan_specificity + commitment_level + clarity_gained) / 5
        ),
        "applicabilityScore": min(10, action_items_count + commitments_made),
        "mentoring_insights": answers.learnedSelf or answers.valuableHeard or "Mentoring reflection completed",
    }
    return clamp_scores(scores, SCORE_BOUNDS)


def hidden_mentoring_reflection_fields(answers: MentoringReflectionAnswers) -> set[str]:
    hidden: set[str] = set()
    if not _feeling_matches(answers.sessionFeeling, DIFFICULT_FEELINGS):
        hidden |= DIFFICULT_PROMPT_FIELDS
    if not _feeling_matches(answers.sessionFeeling, POSITIVE_FEELINGS):
        hidden |= POSITIVE_PROMPT_FIELDS
    return hidden
