from interpretreflect.models.payloads import PostAssignmentDebriefAnswers, ValuesAlignmentAnswers

DEBRIEF_SCORE_BOUNDS: dict[str, tuple[int, int]] = {}
VALUES_SCORE_BOUNDS: dict[str, tuple[int, int]] = {}


def compute_post_assignment_debrief_scores(answers: PostAssignmentDebriefAnswers) -> dict:
    # The debrief stores its answers as given; terminology is kept under newLearning.
    return {"newLearning": answers.newTerminology}


def hidden_post_assignment_debrief_fields(answers: PostAssignmentDebriefAnswers) -> set[str]:
    return {"newTerminology"}


def compute_values_alignment_scores(answers: ValuesAlignmentAnswers) -> dict:
    return {
        "values_reflection": answers.values_check or answers.alignment_reflection or "Values alignment completed",
        "ethical_considerations": answers.ethical_tension or answers.decision_values or "Values check completed",
    }


def hidden_values_alignment_fields(answers: ValuesAlignmentAnswers) -> set[str]:
    return set()
