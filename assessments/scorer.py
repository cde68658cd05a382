"""
assessments/scorer.py
=====================
Strict, all-or-nothing assessment scoring.

A question is correct only when the selected option set equals the
case's correct option set exactly.  Partial credit is a display
concern computed from a :class:`~aiie_engine.domain.ScoringResult`
(see :func:`aiie_engine.services.partial_credit`), never here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from aiie_engine.exceptions import AssessmentValidationError
from aiie_engine.numeric import percentage

from .domain import AssessmentAnswer, CaseRecord

logger: logging.Logger = logging.getLogger(__name__)

# (minimum score, grade), highest first
_LETTER_GRADES: tuple[tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def is_correct(selected: Iterable[str], correct_options: Iterable[str]) -> bool:
    """Return ``True`` when ``selected`` matches ``correct_options`` exactly.

    Same cardinality and every member present; duplicates in the
    selection count against it.
    """
    selected = list(selected)
    expected = list(correct_options)
    return len(selected) == len(expected) and set(selected) == set(expected)


def grade_answer(
    case: CaseRecord,
    selected: Iterable[str],
    time_spent: float = 0,
    question_id: str | None = None,
) -> AssessmentAnswer:
    """Build an :class:`AssessmentAnswer` with its correctness derived."""
    selected = tuple(selected)
    return AssessmentAnswer(
        question_id=question_id or case.id,
        case_id=case.id,
        selected_options=selected,
        correct=is_correct(selected, case.correct_options),
        time_spent=time_spent,
    )


def score(answers: Sequence[AssessmentAnswer], total_questions: int) -> int:
    """Percentage of ``total_questions`` answered correctly, 0-100.

    Args:
        answers: Graded answers of the attempt.
        total_questions: Number of questions in the assessment.
            Unanswered questions count as incorrect.

    Returns:
        Integer percentage rounded half-up; ``0`` when
        ``total_questions`` is ``0``.

    Raises:
        AssessmentValidationError: If ``total_questions`` is negative
            or not an integer.
    """
    if isinstance(total_questions, bool) or not isinstance(total_questions, int):
        raise AssessmentValidationError("total_questions", total_questions)
    if total_questions < 0:
        raise AssessmentValidationError("total_questions", total_questions)
    if total_questions == 0:
        return 0

    correct_count: int = sum(1 for answer in answers if answer.correct)
    if correct_count > total_questions:
        logger.warning(
            "%d correct answers for %d questions; capping score at 100",
            correct_count,
            total_questions,
        )
    return min(100, percentage(correct_count, total_questions))


def check_passed(score: int, passing_score: int) -> bool:
    """Return ``True`` when ``score`` meets the passing threshold."""
    return score >= passing_score


def letter_grade(score: int) -> str:
    for minimum, grade in _LETTER_GRADES:
        if score >= minimum:
            return grade
    return "F"


def format_duration(seconds: float) -> str:
    """Render seconds as ``m:ss``."""
    whole = max(0, int(seconds))
    minutes, secs = divmod(whole, 60)
    return f"{minutes}:{secs:02d}"
