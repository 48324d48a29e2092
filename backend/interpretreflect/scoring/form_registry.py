from dataclasses import dataclass
from typing import Any, Callable

from interpretreflect.models import reflection_kinds
from interpretreflect.models.payloads import (
    CompassCheckAnswers,
    FormAnswers,
    MentoringReflectionAnswers,
    OpaqueAnswers,
    PostAssignmentDebriefAnswers,
    TeamingReflectionAnswers,
    ValuesAlignmentAnswers,
    WellnessCheckInAnswers,
)
from interpretreflect.scoring import compass_check, debrief_and_values, mentoring_reflection, teaming_reflection, wellness_checkin


@dataclass(frozen=True)
class FormScorer:
    kind: str
    answers_model: type[FormAnswers]
    compute: Callable[[Any], dict]
    hidden_fields: Callable[[Any], set[str]]
    score_bounds: dict[str, tuple[int, int]]

    def parse(self, data: dict[str, Any]) -> FormAnswers:
        return self.answers_model.model_validate(data or {})


def _no_scores(answers: FormAnswers) -> dict:
    return {}


def _no_hidden_fields(answers: FormAnswers) -> set[str]:
    return set()


OPAQUE_SCORER = FormScorer(
    kind="",
    answers_model=OpaqueAnswers,
    compute=_no_scores,
    hidden_fields=_no_hidden_fields,
    score_bounds={},
)

FORM_SCORERS: dict[str, FormScorer] = {
    scorer.kind: scorer
    for scorer in (
        FormScorer(
            kind=reflection_kinds.COMPASS_CHECK,
            answers_model=CompassCheckAnswers,
            compute=compass_check.compute_compass_check_scores,
            hidden_fields=compass_check.hidden_compass_check_fields,
            score_bounds=compass_check.SCORE_BOUNDS,
        ),
        FormScorer(
            kind=reflection_kinds.MENTORING_REFLECTION,
            answers_model=MentoringReflectionAnswers,
            compute=mentoring_reflection.compute_mentoring_reflection_scores,
            hidden_fields=mentoring_reflection.hidden_mentoring_reflection_fields,
            score_bounds=mentoring_reflection.SCORE_BOUNDS,
        ),
        FormScorer(
            kind=reflection_kinds.TEAMING_REFLECTION,
            answers_model=TeamingReflectionAnswers,
            compute=teaming_reflection.compute_teaming_reflection_scores,
            hidden_fields=teaming_reflection.hidden_teaming_reflection_fields,
            score_bounds=teaming_reflection.SCORE_BOUNDS,
        ),
        FormScorer(
            kind=reflection_kinds.WELLNESS_CHECKIN,
            answers_model=WellnessCheckInAnswers,
            compute=wellness_checkin.compute_wellness_checkin_scores,
            hidden_fields=wellness_checkin.hidden_wellness_checkin_fields,
            score_bounds=wellness_checkin.SCORE_BOUNDS,
        ),
        FormScorer(
            kind=reflection_kinds.POST_ASSIGNMENT_DEBRIEF,
            answers_model=PostAssignmentDebriefAnswers,
            compute=debrief_and_values.compute_post_assignment_debrief_scores,
            hidden_fields=debrief_and_values.hidden_post_assignment_debrief_fields,
            score_bounds=debrief_and_values.DEBRIEF_SCORE_BOUNDS,
        ),
        FormScorer(
            kind=reflection_kinds.VALUES_ALIGNMENT,
            answers_model=ValuesAlignmentAnswers,
            compute=debrief_and_values.compute_values_alignment_scores,
            hidden_fields=debrief_and_values.hidden_values_alignment_fields,
            score_bounds=debrief_and_values.VALUES_SCORE_BOUNDS,
        ),
    )
}


def get_form_scorer(kind: str) -> FormScorer:
    return FORM_SCORERS.get(kind, OPAQUE_SCORER)


def parse_answers(kind: str, data: dict[str, Any]) -> FormAnswers:
    return get_form_scorer(kind).parse(data)
