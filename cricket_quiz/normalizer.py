# cricket_quiz/normalizer.py
"""Turns raw generator text into a schema-valid ``Quiz``.

The generator is asked for JSON but offers no guarantee, so everything below
the top-level parse is repaired rather than rejected: missing ids are
synthesized, option lists are padded or truncated to four entries and an
unusable ``correctIndex`` falls back to the first option. The only hard
failure is text that does not parse at all.

With ``strict=True`` the same defects raise ``InvalidGeneratorOutput``
instead of being repaired.
"""
import json
import logging
import re
from typing import Any, List, Optional

from cricket_quiz.errors import InvalidGeneratorOutput
from cricket_quiz.schemas import (
    OPTIONS_PER_QUESTION,
    QUESTIONS_PER_QUIZ,
    Commentary,
    Question,
    Quiz,
)

logger = logging.getLogger(__name__)

# ```json ... ``` wrappers that chat models like to add around their answer
_CODE_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


def parse_generator_text(raw_text: Any) -> Any:
    """Parses the generator text as JSON, unwrapping a Markdown code fence first."""
    if not isinstance(raw_text, str):
        raise InvalidGeneratorOutput("AI returned invalid quiz data")

    cleaned = raw_text.strip()
    fenced = _CODE_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()

    # Deeply nested input overflows the decoder with RecursionError instead of a syntax error.
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError) as err:
        logger.error("Failed to parse quiz JSON from generator output: %r", raw_text[:500])
        raise InvalidGeneratorOutput("AI returned invalid quiz data") from err


def normalize_quiz(raw_text: Any, fallback_quiz_id: str, strict: bool = False) -> Quiz:
    data = parse_generator_text(raw_text)

    if not isinstance(data, dict):
        _defect(strict, "quiz is not a JSON object")
        data = {}

    quiz_id = data.get("quizId")
    quiz_id = str(quiz_id) if quiz_id else fallback_quiz_id

    raw_questions = data.get("questions")
    if not isinstance(raw_questions, list):
        _defect(strict, "questions is missing or not a list")
        raw_questions = []
    if len(raw_questions) != QUESTIONS_PER_QUIZ:
        _defect(strict, f"expected {QUESTIONS_PER_QUIZ} questions, got {len(raw_questions)}")

    questions = [normalize_question(raw, idx, strict) for idx, raw in enumerate(raw_questions)]
    return Quiz(quiz_id=quiz_id, questions=questions)


def normalize_question(raw: Any, idx: int, strict: bool = False) -> Question:
    position = idx + 1
    if not isinstance(raw, dict):
        _defect(strict, f"question {position} is not an object")
        raw = {}

    question_id = raw.get("id")
    question_id = str(question_id) if question_id else f"q{position}"

    options = raw.get("options")
    if not isinstance(options, list):
        options = []
    options = [_as_text(option) for option in options]
    if len(options) != OPTIONS_PER_QUESTION:
        _defect(strict, f"question {position} has {len(options)} options")
    options = _pad_options(options)

    correct_index = _as_index(raw.get("correctIndex"))
    if correct_index is None:
        _defect(strict, f"question {position} has invalid correctIndex {raw.get('correctIndex')!r}")
        correct_index = 0

    return Question(
        id=question_id,
        text=_as_text(raw.get("text")),
        options=options,
        correct_index=correct_index,
        commentary=_normalize_commentary(raw.get("commentary")),
    )


def _pad_options(options: List[str]) -> List[str]:
    padded = list(options)
    while len(padded) < OPTIONS_PER_QUESTION:
        padded.append(f"Option {len(padded) + 1}")
    return padded[:OPTIONS_PER_QUESTION]


def _as_index(value: Any) -> Optional[int]:
    """Returns the answer index as an int, or None if it is not a usable one.

    Integral floats such as ``2.0`` count, since JSON does not tell them apart
    from integers.
    """
    # bool is an int subclass but never a meaningful answer index
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or not 0 <= value < OPTIONS_PER_QUESTION:
        return None
    return value


def _normalize_commentary(raw: Any) -> Commentary:
    if not isinstance(raw, dict):
        return Commentary()
    return Commentary(
        intro=_as_text(raw.get("intro")),
        correct=_as_text(raw.get("correct")),
        wrong=_as_text(raw.get("wrong")),
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _defect(strict: bool, reason: str) -> None:
    if strict:
        raise InvalidGeneratorOutput(f"AI returned an incomplete quiz: {reason}")
    logger.debug("Repairing generator output: %s", reason)
