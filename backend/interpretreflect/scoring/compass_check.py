from interpretreflect.models.payloads import CompassCheckAnswers
from interpretreflect.scoring.bounds import clamp_scores, count_filled, round_half_up

MORAL_DISTRESS_BY_WEIGHT = {
    "light": 3,
    "heavy": 7,
    "crushing": 10,
}
RESIDUE_INTENSITY_BY_AFFECTING = {
    "sleep": 8,
    "relationships": 7,
    "decision-making": 6,
    "self-perception": 9,
    "all-of-above": 10,
}
ROLE_CONFUSION_BY_REASON = {
    "legal-standards": 3,
    "institutional-policies": 5,
    "professional-guidelines": 4,
    "lack-resources": 7,
    "interpreter-shortage": 8,
    "all-above": 9,
}
DECISION_DIFFICULTY_BY_ANSWER = {
    "yes": 8,
    "maybe": 6,
    "no": 3,
}

SCORE_BOUNDS: dict[str, tuple[int, int]] = {
    "moralDistressLevel": (1, 10),
    "residueIntensity": (1, 10),
    "valuesAlignmentScore": (1, 10),
    "roleConfusionLevel": (1, 10),
    "clarityGained": (1, 10),
    "complexityScore": (1, 10),
    "decisionDifficulty": (1, 10),
    "selfCompassionLevel": (1, 10),
    "realignmentSuccess": (1, 10),
    "planSpecificity": (1, 10),
    "overallResolution": (1, 10),
    "moralClarity": (1, 10),
}


def compute_compass_check_scores(answers: CompassCheckAnswers) -> dict:
    moral_distress = MORAL_DISTRESS_BY_WEIGHT.get(answers.weightLevel, 5)
    residue_intensity = RESIDUE_INTENSITY_BY_AFFECTING.get(answers.affecting, 5)

    values_conflict_count = len(answers.challengedValues)
    values_alignment = max(1, 10 - values_conflict_count)

    role_confusion = ROLE_CONFUSION_BY_REASON.get(answers.challengeReason, 6)
    clarity_gained = 7 if answers.challengeReason else 3

    if answers.professionalObligation and answers.personalValues and answers.legitimatelyHard == "yes":
        complexity = 9
    elif answers.professionalObligation and answers.personalValues:
        complexity = 7
    else:
        complexity = 5
    decision_difficulty = DECISION_DIFFICULTY_BY_ANSWER.get(answers.legitimatelyHard, 5)
    alternatives_considered = 2 if answers.alternativeCost else 1

    forgiveness = answers.selfForgiveness
    if not forgiveness:
        self_compassion = 3
    elif len(forgiveness) > 50:
        self_compassion = 8
    else:
        self_compassion = 6

    realignment_success = (
        (3 if answers.biggerPicture else 0)
        + (3 if answers.harmWithoutInterpreters else 0)
        + len(answers.valuesIntact) * 2
    )
    plan_specificity = (
        (4 if answers.differentNext else 0)
        + (3 if answers.supportNeeded else 0)
        + (3 if answers.honorAction else 0)
    )

    scores = {
        "moralDistressLevel": moral_distress,
        "residueIntensity": residue_intensity,
        "valuesConflictCount": values_conflict_count,
        "valuesAlignmentScore": values_alignment,
        "roleConfusionLevel": role_confusion,
        "clarityGained": clarity_gained,
        "complexityScore": complexity,
        "decisionDifficulty": decision_difficulty,
        "alternativesConsidered": alternatives_considered,
        "selfCompassionLevel": self_compassion,
        "forgivenessPracticed": bool(forgiveness) and len(forgiveness) > 20,
        "realignmentSuccess": realignment_success,
        "intactValuesCount": len(answers.valuesIntact),
        "perspectiveShift": bool(answers.biggerPicture and answers.harmWithoutInterpreters),
        "actionItemsIdentified": count_filled(
            answers.taught, answers.differentNext, answers.supportNeeded, answers.honorAction
        ),
        "supportSystemIdentified": bool(answers.supportNeeded) and len(answers.supportNeeded) > 10,
        "planSpecificity": plan_specificity,
    }
    scores = clamp_scores(scores, SCORE_BOUNDS)

    # Composite scores are built from the already clamped components.
    scores["overallResolution"] = round_half_up(
        (10 - scores["moralDistressLevel"] + scores["clarityGained"] + scores["realignmentSuccess"] + scores["planSpecificity"]) / 4
    )
    scores["moralClarity"] = round_half_up(
        (scores["clarityGained"] + scores["valuesAlignmentScore"] + (10 - scores["roleConfusionLevel"]) + scores["realignmentSuccess"]) / 4
    )
    return clamp_scores(scores, SCORE_BOUNDS)


def hidden_compass_check_fields(answers: CompassCheckAnswers) -> set[str]:
    return set()
