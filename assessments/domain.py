"""
assessments/domain.py
=====================
Value types for assessment scoring and results analytics.

Everything here is request-scoped: computed fresh from case, option
and answer data on each results pass and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from aiie_engine.exceptions import AssessmentValidationError

UNKNOWN: str = "unknown"


@dataclass(frozen=True)
class CaseRecord:
    """Case metadata supplied by the case store.

    Attributes:
        id: Case identifier.
        title: Display title.
        category: Case category slug (e.g. ``abdominal-pain``).
        difficulty: ``beginner``, ``intermediate`` or ``advanced``.
        correct_options: Option ids making up the optimal answer.
        explanation: Teaching explanation shown for missed questions.
        teaching_points: Short teaching bullets.
    """

    id: str
    title: str = ""
    category: str = UNKNOWN
    difficulty: str = UNKNOWN
    correct_options: tuple[str, ...] = ()
    explanation: str = ""
    teaching_points: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "correct_options", tuple(self.correct_options))
        object.__setattr__(self, "teaching_points", tuple(self.teaching_points))


@dataclass(frozen=True)
class AssessmentAnswer:
    """One response within an assessment attempt.

    ``correct`` is derived by :func:`assessments.scorer.grade_answer`
    and not stored anywhere else.
    """

    question_id: str
    case_id: str
    selected_options: tuple[str, ...] = ()
    correct: bool = False
    time_spent: float = 0

    def __post_init__(self) -> None:
        if isinstance(self.selected_options, str):
            raise AssessmentValidationError("selected_options", self.selected_options)
        object.__setattr__(self, "selected_options", tuple(self.selected_options))
        if self.time_spent is None or self.time_spent < 0:
            raise AssessmentValidationError("time_spent", self.time_spent)


@dataclass(frozen=True)
class CategoryScore:
    """Accuracy over the answers of one case category."""

    category: str
    correct: int
    total: int
    percentage: int
    label: str = ""


@dataclass(frozen=True)
class DifficultyScore:
    """Accuracy over the answers of one difficulty level."""

    difficulty: str
    correct: int
    total: int
    percentage: int
    label: str = ""


@dataclass(frozen=True)
class MissedQuestion:
    """Review record for one incorrect answer."""

    case_id: str
    case_title: str
    category: str
    difficulty: str
    user_answer: str
    correct_answer: str
    explanation: str
    time_spent: float = 0


@dataclass(frozen=True)
class Recommendation:
    """A suggested practice case tied back to a weak area."""

    case_id: str
    title: str
    category: str
    difficulty: str
    reason: str


@dataclass(frozen=True)
class TimeAnalysis:
    """Time spent across an attempt, in seconds."""

    total_time: float = 0
    average_per_case: float = 0
    fastest_case: float = 0
    slowest_case: float = 0


@dataclass(frozen=True)
class AssessmentResults:
    """Everything a results page renders for one attempt."""

    score: int
    total_questions: int
    correct_count: int
    passed: bool
    passing_score: int
    letter_grade: str
    category_breakdown: tuple[CategoryScore, ...] = ()
    difficulty_breakdown: tuple[DifficultyScore, ...] = ()
    missed_questions: tuple[MissedQuestion, ...] = ()
    weak_areas: tuple[str, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    time_analysis: TimeAnalysis = field(default_factory=TimeAnalysis)
