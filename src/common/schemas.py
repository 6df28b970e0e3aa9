# ABOUTME: Defines canonical record structures shared by the grading and progression engines.
# ABOUTME: Centralizes assessment, enrollment, derived-average, and academic-year schemas.

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from .config import ScoreRange
from .status import Classification


def _check_score(name: str, value: Optional[float]) -> None:
    if value is None:
        return
    if not ScoreRange.MIN <= value <= ScoreRange.MAX:
        raise ValueError(f"Score '{name}'={value} outside [{ScoreRange.MIN:g}, {ScoreRange.MAX:g}].")


@dataclass(frozen=True)
class AssessmentScore:
    """Raw scores for one (student, subject, academic year, period)."""

    student_id: str
    subject_id: str
    academic_year_id: str
    period: int
    as1: Optional[float] = None
    as2: Optional[float] = None
    as3: Optional[float] = None
    at: Optional[float] = None
    locked: bool = False

    def __post_init__(self) -> None:
        if self.period < 1:
            raise ValueError(f"Period must be a positive integer, got {self.period}.")
        for name in ("as1", "as2", "as3", "at"):
            _check_score(name, getattr(self, name))


@dataclass(frozen=True)
class PeriodAverage:
    """Sub-period average (MAS) and period average (MT) derived from one AssessmentScore."""

    student_id: str
    subject_id: str
    academic_year_id: str
    period: int
    sub_period_average: Optional[float] = None
    period_average: Optional[float] = None


@dataclass(frozen=True)
class SubjectAnnualAverage:
    """Annual average of one subject over its present period averages."""

    student_id: str
    subject_id: str
    academic_year_id: str
    period_averages: Tuple[PeriodAverage, ...] = ()
    average: Optional[float] = None


@dataclass(frozen=True)
class OverallAnnualAverage:
    """Equal-weighted mean of a student's subject annual averages for one year."""

    student_id: str
    academic_year_id: str
    subjects: Tuple[SubjectAnnualAverage, ...] = ()
    average: Optional[float] = None


@dataclass(frozen=True)
class EnrollmentRecord:
    student_id: str
    academic_year_id: str
    grade_level: int
    class_label: str
    year_start: Optional[date] = None

    def __post_init__(self) -> None:
        if self.grade_level < 1:
            raise ValueError(f"Grade level must be a positive integer, got {self.grade_level}.")


@dataclass(frozen=True)
class AcademicYearRecord:
    """One line of a student's academic history."""

    academic_year_id: str
    grade_level: int
    class_label: str
    subject_count: int
    grade_record_count: int
    period_count: int
    overall_average: Optional[float]
    classification: Classification
    progressed_to_grade_level: Optional[int] = None
    subject_averages: Tuple[SubjectAnnualAverage, ...] = field(default=(), compare=False, repr=False)
