"""Automatic scoring for placement test answers.

Read Aloud answers (questions 1-3) are recordings and carry no automatic
score. Fill-in-the-blank answers (4-9) are scored blank by blank against the
stored correct answers, and dictation answers (10-12) by counting matching
words. Category membership depends only on the question number an answer is
stored under, never on the answer's own type field.

Every function here is pure: the same answers always produce the same
scores and nothing is read from or written to storage.
"""
from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

from models import Answer, Score, ScoreReport, count_blanks

logger = logging.getLogger(__name__)

CATEGORY_READ_ALOUD = "readAloud"
CATEGORY_RWFIB = "rwfib"
CATEGORY_RFIB = "rfib"
CATEGORY_WFD = "wfd"

CATEGORY_RANGES: dict[str, range] = {
    CATEGORY_READ_ALOUD: range(1, 4),
    CATEGORY_RWFIB: range(4, 7),
    CATEGORY_RFIB: range(7, 10),
    CATEGORY_WFD: range(10, 13),
}

SCORED_CATEGORIES = (CATEGORY_RWFIB, CATEGORY_RFIB, CATEGORY_WFD)

_PUNCTUATION_RE = re.compile(r"[.,!?;:'\"]")


def normalize_words(text: str | None) -> list[str]:
    """Lowercase, drop punctuation and split into words."""
    if not text:
        return []
    cleaned = _PUNCTUATION_RE.sub("", text.lower())
    return [word for word in cleaned.split() if word]


def match_words(reference: Sequence[str], candidate: Sequence[str]) -> Score:
    """Count candidate words that match an unused reference word.

    Each candidate word takes the first reference word that is equal and
    not yet consumed, so a repeated word can only score as often as it
    appears in the reference. Word order is ignored.
    """
    used_reference: set[int] = set()
    used_candidate: set[int] = set()
    correct = 0
    for i, word in enumerate(candidate):
        for j, expected in enumerate(reference):
            if i in used_candidate or j in used_reference:
                continue
            if word == expected:
                correct += 1
                used_reference.add(j)
                used_candidate.add(i)
    return Score(correct, len(reference))


def split_blank_answers(answer: str | None) -> list[str]:
    """Split a comma-joined blank answer into trimmed per-blank values."""
    return [part.strip() for part in (answer or "").split(",")]


def score_blanks(
    answer: str | None,
    correct_answers: Sequence[str] | None,
    content: str | None = None,
) -> Score:
    """Compare blank answers to the correct answers position by position.

    Comparison is exact and case-sensitive. Blanks the user left out at
    the end simply do not match. When no correct answers are stored the
    total falls back to the number of blank markers in ``content``.
    """
    expected = list(correct_answers or [])
    correct = 0
    for index, value in enumerate(split_blank_answers(answer)):
        if index < len(expected) and value == expected[index]:
            correct += 1
    total = len(expected) or count_blanks(content or "")
    return Score(correct, total)


def score_dictation(answer: str | None, reference_text: str | None) -> Score:
    return match_words(normalize_words(reference_text), normalize_words(answer))


def parse_question_number(key: object) -> int | None:
    """Read the question number an answer is stored under."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    match = re.match(r"\s*([+-]?\d+)", str(key))
    if match is None:
        return None
    return int(match.group(1))


def category_for(question_number: int | None) -> str | None:
    if question_number is None:
        return None
    for category, numbers in CATEGORY_RANGES.items():
        if question_number in numbers:
            return category
    return None


def score_answer(question_number: int | None, answer: Answer) -> Score | None:
    """Score one answer by the category of its question number.

    Returns ``None`` for answers that have no automatic score (Read Aloud or
    numbers outside 1-12).
    """
    category = category_for(question_number)
    if category in (CATEGORY_RWFIB, CATEGORY_RFIB):
        return score_blanks(answer.answer, answer.correct_answers, answer.content)
    if category == CATEGORY_WFD:
        return score_dictation(answer.answer, answer.text or answer.content)
    return None


def score_category(answers: Mapping[str, Answer], category: str) -> Score:
    """Sum the scores of all answers stored under ``category``'s numbers."""
    numbers = CATEGORY_RANGES[category]
    total = Score()
    for key, answer in answers.items():
        question_number = parse_question_number(key)
        if question_number is None:
            logger.debug("Skipping answer with non-numeric key %r", key)
            continue
        if question_number not in numbers:
            continue
        score = score_answer(question_number, answer)
        if score is not None:
            total += score
    return total


def score_submission(answers: Mapping[str, Answer]) -> ScoreReport:
    return ScoreReport(
        rwfib=score_category(answers, CATEGORY_RWFIB),
        rfib=score_category(answers, CATEGORY_RFIB),
        wfd=score_category(answers, CATEGORY_WFD),
    )


def format_score(score: Score) -> str:
    """Render a score as ``correct/total`` (``0/0`` stays ``0/0``)."""
    return f"{score.correct}/{score.total}"


def percent(score: Score) -> float:
    if score.total == 0:
        return 0.0
    return (score.correct / score.total) * 100
