from dataclasses import dataclass


@dataclass(frozen=True)
class ReflectionKind:
    entry_kind: str
    display_name: str
    short_name: str | None = None


COMPASS_CHECK = "compass_check"
MENTORING_REFLECTION = "mentoring_reflection"
TEAMING_REFLECTION = "teaming_reflection"
WELLNESS_CHECKIN = "wellness_checkin"
POST_ASSIGNMENT_DEBRIEF = "post_assignment_debrief"
VALUES_ALIGNMENT = "values_alignment"
STRESS_RESET = "stress_reset"

REFLECTION_KINDS: dict[str, ReflectionKind] = {
    kind.entry_kind: kind
    for kind in (
        ReflectionKind("pre_assignment_prep", "Pre-Assignment Prep", "Pre-Assignment"),
        ReflectionKind(POST_ASSIGNMENT_DEBRIEF, "Post-Assignment Debrief", "Post-Assignment"),
        ReflectionKind("teaming_prep", "Teaming Prep", "Team Prep"),
        ReflectionKind(TEAMING_REFLECTION, "Teaming Reflection", "Team Reflection"),
        ReflectionKind("mentoring_prep", "Mentoring Prep", "Mentoring Prep"),
        ReflectionKind(MENTORING_REFLECTION, "Mentoring Reflection", "Mentoring Review"),
        ReflectionKind(WELLNESS_CHECKIN, "Wellness Check-in", "Wellness"),
        ReflectionKind(VALUES_ALIGNMENT, "Values Alignment Check-In", "Values Check"),
        ReflectionKind("insession_selfcheck", "In-Session Self-Check", "Self-Check"),
        ReflectionKind("team_sync", "In-Session Team Sync", "Team Sync"),
        ReflectionKind("role_space_reflection", "Role-Space Reflection", "Role-Space"),
        ReflectionKind("direct_communication_reflection", "Supporting Direct Communication", "Direct Communication"),
        ReflectionKind("decide_framework", "Decide Framework", "DECIDE"),
        ReflectionKind("burnout_assessment", "Burnout Assessment"),
        ReflectionKind(COMPASS_CHECK, "Values Compass Check"),
        ReflectionKind("commitment", "Commitment Reflection"),
        ReflectionKind("gratitude", "Gratitude Practice"),
        ReflectionKind("affirmation", "Daily Affirmation"),
        ReflectionKind("personal_reflection", "Personal Reflection"),
        ReflectionKind("emotion-clarity", "Emotion Clarity Practice", "Emotion Clarity"),
        ReflectionKind(STRESS_RESET, "Stress Reset"),
    )
}

# Kinds the insights dashboard nudges users towards when they are missing.
CORE_PRACTICE_KINDS = (
    WELLNESS_CHECKIN,
    "insession_selfcheck",
    VALUES_ALIGNMENT,
    POST_ASSIGNMENT_DEBRIEF,
)


def display_name(entry_kind: str) -> str:
    known = REFLECTION_KINDS.get(entry_kind)
    if known is not None:
        return known.display_name
    return entry_kind.replace("_", " ").replace("-", " ").strip().title() or "Reflection"
