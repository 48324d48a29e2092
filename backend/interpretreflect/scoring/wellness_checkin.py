import re

from interpretreflect.models.payloads import WellnessCheckInAnswers
from interpretreflect.scoring.bounds import clamp_scores, round_half_up

EMOTIONAL_BALANCE_BY_INTENSITY = {
    "low": 8,
    "medium": 5,
}
CRISIS_TRIAGE_LEVELS = {"orange", "red"}

SCORE_BOUNDS: dict[str, tuple[int, int]] = {
    "physical_energy": (1, 10),
    "emotional_balance": (1, 10),
    "mental_clarity": (1, 10),
    "social_connection": (1, 10),
    "professional_satisfaction": (1, 10),
    "overall_wellbeing": (1, 10),
    "stress_level": (1, 10),
    "energy_level": (1, 10),
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def leading_int(value: str, default: int = 5) -> int:
    """Read the integer a scale answer starts with ("7 - mostly rested" -> 7)."""
    match = _LEADING_INT.match(value or "")
    if not match:
        return default
    parsed = int(match.group(1))
    return parsed or default


def compute_wellness_checkin_scores(answers: WellnessCheckInAnswers) -> dict:
    scores = {
        "physical_energy": leading_int(answers.overallEnergy),
        "emotional_balance": EMOTIONAL_BALANCE_BY_INTENSITY.get(answers.intensityLevel, 3),
        "mental_clarity": leading_int(answers.workingMemory),
        "social_connection": leading_int(answers.supportSystem),
        "professional_satisfaction": leading_int(answers.meaningPurpose),
        "overall_wellbeing": round_half_up((answers.stressLevel + answers.energyLevel) / 2),
        "stress_level": answers.stressLevel,
        "energy_level": answers.energyLevel,
        "needsCrisisPlan": answers.wellnessLevel in CRISIS_TRIAGE_LEVELS,
    }
    return clamp_scores(scores, SCORE_BOUNDS)


def hidden_wellness_checkin_fields(answers: WellnessCheckInAnswers) -> set[str]:
    hidden: set[str] = set()
    if answers.wellnessLevel not in CRISIS_TRIAGE_LEVELS:
        hidden.add("crisisAction")
    if answers.emotionOrigin != "specific":
        hidden.add("originDetail")
    return hidden
