"""
Assessment schema normalisation and answer validation.

Assessments are stored as JSON: a list of sections, each holding a list of
question dicts with camelCase keys (``maxLength``, ``condition.questionId``,
``condition.equalsValue``). Everything in this module is pure: the same
sections and answers always produce the same error map.
"""

import math
import re
import uuid
from typing import Any, Iterator, Mapping, Optional, Sequence

from core.utils.formatting import format_number

QUESTION_TYPES: tuple[str, ...] = ("single", "multi", "short", "long", "number", "file")

TYPE_ALIASES = {"numeric": "number"}

# Pre-builder payload keys, folded into title/condition on normalisation
LEGACY_KEYS = ("label", "showIf")

CHOICE_TYPES = ("single", "multi")
TEXT_TYPES = ("short", "long")

REQUIRED_MESSAGE = "Required"
NOT_A_NUMBER_MESSAGE = "Must be a number"
INVALID_OPTION_MESSAGE = "Invalid option"

_MISSING = object()

_DECIMAL_LITERAL = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity')
_RADIX_LITERAL = re.compile(r'0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+')


# ==================== Normalisation ===================== #

def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def normalize_condition(raw: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    """
    Resolve a question's visibility condition.

    Accepts ``condition: {questionId, equalsValue}`` and the legacy
    ``showIf: {<questionId>: <value>}`` form. A condition without a question
    id means "always visible" and is dropped.
    """
    condition = raw.get("condition")
    if not condition and isinstance(raw.get("showIf"), Mapping) and raw["showIf"]:
        question_id, equals_value = next(iter(raw["showIf"].items()))
        condition = {"questionId": question_id, "equalsValue": equals_value}

    if not isinstance(condition, Mapping) or not condition.get("questionId"):
        return None

    normalized = {"questionId": str(condition["questionId"])}
    if "equalsValue" in condition:
        normalized["equalsValue"] = condition["equalsValue"]
    return normalized


def _as_bound(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    number = coerce_number(value)
    return number if math.isfinite(number) else None


def _as_length(value: Any) -> Optional[int]:
    bound = _as_bound(value)
    return int(bound) if bound is not None and bound > 0 else None


def normalize_question(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map a question payload onto the canonical question shape."""
    question_type = raw.get("type") or "short"
    question_type = TYPE_ALIASES.get(question_type, question_type)
    options = raw.get("options")

    return {
        **{key: value for key, value in raw.items() if key not in LEGACY_KEYS},
        "id": str(raw.get("id") or _new_id("q")),
        "type": question_type,
        "title": raw.get("title") or raw.get("label") or "Untitled question",
        "required": bool(raw.get("required", False)),
        "options": [str(option) for option in options] if isinstance(options, list) else [],
        "min": _as_bound(raw.get("min")),
        "max": _as_bound(raw.get("max")),
        "maxLength": _as_length(raw.get("maxLength")),
        "condition": normalize_condition(raw),
    }


def normalize_section(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map a section payload onto the canonical section shape."""
    questions = raw.get("questions")
    return {
        **raw,
        "id": str(raw.get("id") or _new_id("s")),
        "title": raw.get("title") or "Section",
        "description": raw.get("description") or "",
        "questions": [normalize_question(q) for q in questions or [] if isinstance(q, Mapping)],
    }


def iter_questions(sections: Sequence[Mapping[str, Any]]) -> Iterator[Mapping[str, Any]]:
    """Yield every question in section order."""
    for section in sections or []:
        for question in section.get("questions") or []:
            yield question


def question_count(sections: Sequence[Mapping[str, Any]]) -> int:
    return sum(1 for _ in iter_questions(sections))


# ==================== Visibility ===================== #

def strict_equals(left: Any, right: Any) -> bool:
    """
    Identity-style equality on JSON values.

    Numbers compare by value (``1 == 1.0``), booleans only equal booleans,
    strings only equal strings and containers never equal anything.
    """
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def is_visible(
    question: Mapping[str, Any],
    answers: Mapping[str, Any],
    known_ids: Optional[set[str]] = None,
) -> bool:
    """
    Whether a question is shown for the current answers.

    A question is visible iff it has no condition, or the referenced answer
    strictly equals the condition's literal. An unanswered reference counts
    as ``None``. Conditions pointing at a question id outside ``known_ids``
    hide the question.
    """
    condition = question.get("condition")
    if not condition:
        return True

    referenced = condition.get("questionId")
    if known_ids is not None and referenced not in known_ids:
        return False

    expected = condition.get("equalsValue", _MISSING)
    if expected is _MISSING:
        return False

    return strict_equals(answers.get(referenced), expected)


# ==================== Validation ===================== #

def _int_to_float(number: int) -> float:
    """Integers beyond float range become signed infinity."""
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


def coerce_number(value: Any) -> float:
    """
    Numeric value of an answer, NaN when it is not numeric.

    Strings are trimmed; blank strings are 0; decimal, exponent, ``Infinity``
    and ``0x``/``0o``/``0b`` literals are accepted.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int):
        return _int_to_float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _DECIMAL_LITERAL.fullmatch(text):
            return float(text)
        if _RADIX_LITERAL.fullmatch(text):
            return _int_to_float(int(text, 0))
        return math.nan
    if isinstance(value, list):
        if not value:
            return 0.0
        if len(value) == 1:
            return coerce_number(value[0])
    return math.nan


def is_empty_answer(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list) and not value)


def check_answer(question: Mapping[str, Any], value: Any) -> Optional[str]:
    """
    Error message for a single visible question, or None if the answer passes.

    When several checks fail the last one wins.
    """
    question_type = question.get("type")
    error = None
    present = not is_empty_answer(value)

    if question.get("required") and not present:
        error = REQUIRED_MESSAGE

    if question_type == "number" and value is not None and value != "":
        number = coerce_number(value)
        if not math.isfinite(number):
            error = NOT_A_NUMBER_MESSAGE
        else:
            minimum = question.get("min")
            maximum = question.get("max")
            if minimum is not None and number < minimum:
                error = f"Min {format_number(minimum)}"
            if maximum is not None and number > maximum:
                error = f"Max {format_number(maximum)}"

    max_length = question.get("maxLength")
    if question_type in TEXT_TYPES and max_length and isinstance(value, str):
        if len(value) > max_length:
            error = f"Max {format_number(max_length)} chars"

    options = question.get("options") or []
    if question_type in CHOICE_TYPES and options and present:
        chosen = value if isinstance(value, list) else [value]
        if question_type == "single" and isinstance(value, list):
            error = INVALID_OPTION_MESSAGE
        elif any(not isinstance(choice, str) or choice not in options for choice in chosen):
            error = INVALID_OPTION_MESSAGE

    return error


def validate_answers(
    sections: Sequence[Mapping[str, Any]],
    answers: Mapping[str, Any],
) -> dict[str, str]:
    """
    Validate answers against an assessment's sections.

    Args:
        sections: Assessment sections (canonical shape)
        answers: ``questionId -> answer``

    Returns:
        ``questionId -> message`` for visible questions that fail, in
        question order; empty when everything passes
    """
    answers = answers or {}
    questions = list(iter_questions(sections))
    known_ids = {str(q.get("id")) for q in questions}

    errors: dict[str, str] = {}
    for question in questions:
        if not is_visible(question, answers, known_ids):
            continue
        question_id = str(question.get("id"))
        error = check_answer(question, answers.get(question_id))
        if error:
            errors[question_id] = error
    return errors
