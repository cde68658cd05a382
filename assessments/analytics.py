"""
assessments/analytics.py
========================
Results analytics for a scored assessment attempt.

Every function is pure and tolerates empty input: zero answers give
empty breakdowns, no weak areas and no recommendations.

Contains:
    - group_and_score(): The one grouping routine behind both breakdowns.
    - category_breakdown() / difficulty_breakdown()
    - missed_questions()
    - identify_weak_areas()
    - generate_recommendations()
    - time_analysis()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Iterable, Sequence, TypeVar, Union

from aiie_engine.conf import get_setting
from aiie_engine.numeric import percentage
from knowledge_base.modalities import Modality

from .domain import (
    UNKNOWN,
    AssessmentAnswer,
    CaseRecord,
    CategoryScore,
    DifficultyScore,
    MissedQuestion,
    Recommendation,
    TimeAnalysis,
)

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")

CasePool = Union[Mapping[str, CaseRecord], Iterable[CaseRecord]]
OptionLookup = Union[Mapping[str, Union[Modality, str]], Iterable[Modality], None]

NO_ANSWER: str = "No answer selected"


def humanize(slug: str) -> str:
    """``"abdominal-pain"`` -> ``"Abdominal Pain"``."""
    return " ".join(part.capitalize() for part in slug.replace("_", "-").split("-") if part)


def _index_cases(cases: CasePool) -> dict[str, CaseRecord]:
    if isinstance(cases, Mapping):
        return dict(cases)
    return {case.id: case for case in cases}


def _index_options(options: OptionLookup) -> dict[str, str]:
    if not options:
        return {}
    if isinstance(options, Mapping):
        return {
            key: (value.name if isinstance(value, Modality) else str(value))
            for key, value in options.items()
        }
    return {option.key: option.name for option in options}


# ─────────────────────────────────────────────────────────────────────
# Breakdowns
# ─────────────────────────────────────────────────────────────────────


def group_and_score(
    answers: Sequence[AssessmentAnswer],
    cases: CasePool,
    key: Callable[[CaseRecord], str],
    build: Callable[[str, int, int, int], T],
) -> list[T]:
    """Group answers by a case attribute and score each group.

    Answers whose case is unknown are skipped.  Groups keep the order in
    which their key is first seen.

    Args:
        answers: Graded answers.
        cases: Case metadata, as a sequence or an id-keyed mapping.
        key: Extracts the grouping key from a case.
        build: Builds one result from ``(key, correct, total, percentage)``.
    """
    index = _index_cases(cases)
    tallies: dict[str, list[int]] = {}

    for answer in answers:
        case = index.get(answer.case_id)
        if case is None:
            logger.warning("no case metadata for answer %s; skipped", answer.case_id)
            continue
        tally = tallies.setdefault(key(case), [0, 0])
        tally[0] += 1 if answer.correct else 0
        tally[1] += 1

    return [
        build(group, correct, total, percentage(correct, total))
        for group, (correct, total) in tallies.items()
    ]


def category_breakdown(
    answers: Sequence[AssessmentAnswer], cases: CasePool
) -> list[CategoryScore]:
    """Accuracy per case category."""
    return group_and_score(
        answers,
        cases,
        key=lambda case: case.category,
        build=lambda group, correct, total, pct: CategoryScore(
            category=group,
            correct=correct,
            total=total,
            percentage=pct,
            label=humanize(group),
        ),
    )


def difficulty_breakdown(
    answers: Sequence[AssessmentAnswer], cases: CasePool
) -> list[DifficultyScore]:
    """Accuracy per difficulty level."""
    return group_and_score(
        answers,
        cases,
        key=lambda case: case.difficulty,
        build=lambda group, correct, total, pct: DifficultyScore(
            difficulty=group,
            correct=correct,
            total=total,
            percentage=pct,
            label=humanize(group),
        ),
    )


# ─────────────────────────────────────────────────────────────────────
# Missed questions
# ─────────────────────────────────────────────────────────────────────


def missed_questions(
    answers: Sequence[AssessmentAnswer],
    cases: CasePool,
    options: OptionLookup = None,
) -> list[MissedQuestion]:
    """One review record per incorrect answer, in answer order.

    Option ids are rendered through ``options`` (falling back to the raw
    id).  A missing case still yields a record, titled by its id.
    """
    index = _index_cases(cases)
    names = _index_options(options)

    def render(option_ids: Iterable[str]) -> str:
        return ", ".join(names.get(option_id, option_id) for option_id in option_ids)

    missed: list[MissedQuestion] = []
    for answer in answers:
        if answer.correct:
            continue
        case = index.get(answer.case_id)
        if case is None:
            logger.warning("missed answer %s has no case metadata", answer.case_id)
            case = CaseRecord(id=answer.case_id, title=answer.case_id)

        missed.append(
            MissedQuestion(
                case_id=answer.case_id,
                case_title=case.title or case.id,
                category=case.category,
                difficulty=case.difficulty,
                user_answer=render(answer.selected_options) or NO_ANSWER,
                correct_answer=render(case.correct_options),
                explanation=case.explanation,
                time_spent=answer.time_spent,
            )
        )
    return missed


# ─────────────────────────────────────────────────────────────────────
# Weak areas & recommendations
# ─────────────────────────────────────────────────────────────────────


def identify_weak_areas(
    category_scores: Sequence[CategoryScore],
    difficulty_scores: Sequence[DifficultyScore],
    threshold: int | None = None,
) -> list[str]:
    """Label every bucket scoring below ``threshold`` percent.

    Categories come first in breakdown order, then difficulties.
    """
    limit: int = get_setting("WEAK_AREA_THRESHOLD") if threshold is None else threshold

    weak: list[str] = [
        f"{humanize(c.category).lower()} imaging"
        for c in category_scores
        if c.total > 0 and c.percentage < limit
    ]
    weak.extend(
        f"{d.difficulty} difficulty cases"
        for d in difficulty_scores
        if d.total > 0 and d.percentage < limit
    )
    return weak


def generate_recommendations(
    missed: Sequence[MissedQuestion],
    cases: CasePool,
    answers: Sequence[AssessmentAnswer],
    per_category: int | None = None,
) -> list[Recommendation]:
    """Suggest unattempted practice cases for every missed category.

    Categories are visited in the order they first appear in ``missed``.
    Any case id present in ``answers`` or ``missed`` is excluded, so a
    case the user already completed correctly is never recommended.
    ``answers`` is required for that reason: ``missed`` alone cannot
    tell which cases were answered correctly.

    Args:
        missed: Output of :func:`missed_questions`.
        cases: The case pool to recommend from.
        answers: The full answer list of the attempt.
        per_category: Maximum recommendations per category.
    """
    limit: int = (
        get_setting("RECOMMENDATIONS_PER_CATEGORY") if per_category is None else per_category
    )
    pool: list[CaseRecord] = list(_index_cases(cases).values())

    attempted: set[str] = {m.case_id for m in missed}
    attempted.update(a.case_id for a in answers)

    missed_counts: dict[str, int] = {}
    for question in missed:
        if question.category == UNKNOWN:
            continue
        missed_counts[question.category] = missed_counts.get(question.category, 0) + 1

    recommendations: list[Recommendation] = []
    for category, count in missed_counts.items():
        topic: str = humanize(category).lower()
        candidates = [
            case for case in pool if case.category == category and case.id not in attempted
        ]
        for case in candidates[:limit]:
            recommendations.append(
                Recommendation(
                    case_id=case.id,
                    title=case.title,
                    category=case.category,
                    difficulty=case.difficulty,
                    reason=(
                        f"Missed {count} {topic} question{'s' if count != 1 else ''}; "
                        f"practice more {topic} cases"
                    ),
                )
            )
    return recommendations


def time_analysis(answers: Sequence[AssessmentAnswer]) -> TimeAnalysis:
    """Total, average, fastest and slowest time per answer."""
    times: list[float] = [answer.time_spent for answer in answers]
    if not times:
        return TimeAnalysis()
    total: float = sum(times)
    return TimeAnalysis(
        total_time=total,
        average_per_case=total / len(times),
        fastest_case=min(times),
        slowest_case=max(times),
    )
