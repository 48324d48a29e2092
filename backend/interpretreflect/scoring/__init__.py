from interpretreflect.scoring.compass_check import compute_compass_check_scores
from interpretreflect.scoring.form_registry import FORM_SCORERS, FormScorer, get_form_scorer, parse_answers
from interpretreflect.scoring.mentoring_reflection import compute_mentoring_reflection_scores
from interpretreflect.scoring.teaming_reflection import compute_teaming_reflection_scores
from interpretreflect.scoring.text_signals import DEFAULT_CLASSIFIER, KeywordSignalClassifier, TextSignalClassifier, TextSignals
from interpretreflect.scoring.wellness_checkin import compute_wellness_checkin_scores

__all__ = [
    "DEFAULT_CLASSIFIER",
    "FORM_SCORERS",
    "FormScorer",
    "KeywordSignalClassifier",
    "TextSignalClassifier",
    "TextSignals",
    "compute_compass_check_scores",
    "compute_mentoring_reflection_scores",
    "compute_teaming_reflection_scores",
    "compute_wellness_checkin_scores",
    "get_form_scorer",
    "parse_answers",
]
