import json
from typing import Any

from interpretreflect.scoring.form_registry import get_form_scorer

ENTRY_KIND_KEY = "entry_kind"


def assemble_reflection(kind: str, answers: dict[str, Any]) -> dict[str, Any]:
    """Merge raw form answers and their derived scores into one flat record.

    Pure: no clock reads, no I/O. Conditional prompts that the form hides for
    the chosen branch are dropped, computed scores win over raw keys of the
    same name, and the record is stamped with its kind.
    """
    scorer = get_form_scorer(kind)
    parsed = scorer.parse(answers)
    hidden = scorer.hidden_fields(parsed)

    record = {key: value for key, value in parsed.model_dump().items() if key not in hidden}
    record.update(scorer.compute(parsed))
    record[ENTRY_KIND_KEY] = kind
    return record


def canonical_json(record: dict[str, Any]) -> str:
    return json.dumps(record, sort_keys=True, ensure_ascii=True, separators=(",", ":"), default=str)
