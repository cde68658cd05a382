"""
assessments/services.py
=======================
Orchestration service that turns a completed attempt into everything
a results page shows: score and verdict, breakdowns, missed-question
review, weak areas and practice recommendations.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Sequence

from aiie_engine.conf import get_setting

from . import analytics, scorer
from .analytics import CasePool, OptionLookup
from .domain import AssessmentAnswer, AssessmentResults

logger: logging.Logger = logging.getLogger(__name__)


class AssessmentResultsService:
    """High-level results orchestrator.

    Typical usage::

        from assessments.services import AssessmentResultsService

        svc = AssessmentResultsService()
        results = svc.build_results(answers, cases, options=catalog)
    """

    def __init__(
        self,
        passing_score: int | None = None,
        weak_area_threshold: int | None = None,
        recommendations_per_category: int | None = None,
    ) -> None:
        """Initialise; ``None`` arguments fall back to the ``AIIE`` setting."""
        self.passing_score: int = (
            get_setting("PASSING_SCORE") if passing_score is None else passing_score
        )
        self.weak_area_threshold: int = (
            get_setting("WEAK_AREA_THRESHOLD")
            if weak_area_threshold is None
            else weak_area_threshold
        )
        self.recommendations_per_category: int = (
            get_setting("RECOMMENDATIONS_PER_CATEGORY")
            if recommendations_per_category is None
            else recommendations_per_category
        )

    def build_results(
        self,
        answers: Sequence[AssessmentAnswer],
        cases: CasePool,
        options: OptionLookup = None,
        passing_score: int | None = None,
        total_questions: int | None = None,
    ) -> AssessmentResults:
        """Compute the full results of one attempt.

        Args:
            answers: Graded answers of the attempt.
            cases: Case metadata for the answered cases plus the pool
                used for recommendations.
            options: Option id to display name lookup.
            passing_score: Overrides the service threshold for this call.
            total_questions: Question count of the assessment; defaults
                to ``len(answers)``.

        Returns:
            The assembled :class:`AssessmentResults`.

        Raises:
            AssessmentValidationError: If ``total_questions`` is invalid.
        """
        threshold: int = self.passing_score if passing_score is None else passing_score
        total: int = len(answers) if total_questions is None else total_questions
        cases = list(cases.values()) if isinstance(cases, Mapping) else list(cases)
        correct_count: int = sum(1 for a in answers if a.correct)

        percent: int = scorer.score(answers, total)
        passed: bool = scorer.check_passed(percent, threshold)

        categories = analytics.category_breakdown(answers, cases)
        difficulties = analytics.difficulty_breakdown(answers, cases)
        missed = analytics.missed_questions(answers, cases, options)
        weak_areas = analytics.identify_weak_areas(
            categories, difficulties, threshold=self.weak_area_threshold
        )
        recommendations = analytics.generate_recommendations(
            missed,
            cases,
            answers=answers,
            per_category=self.recommendations_per_category,
        )

        logger.info(
            "assessment results: %d/%d correct, score %d%% (%s), %d weak areas",
            correct_count,
            total,
            percent,
            "passed" if passed else "failed",
            len(weak_areas),
        )

        return AssessmentResults(
            score=percent,
            total_questions=total,
            correct_count=correct_count,
            passed=passed,
            passing_score=threshold,
            letter_grade=scorer.letter_grade(percent),
            category_breakdown=tuple(categories),
            difficulty_breakdown=tuple(difficulties),
            missed_questions=tuple(missed),
            weak_areas=tuple(weak_areas),
            recommendations=tuple(recommendations),
            time_analysis=analytics.time_analysis(answers),
        )
