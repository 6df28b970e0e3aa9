# ABOUTME: Folds period averages into per-subject annual averages and an overall annual average.
# ABOUTME: Every subject weighs the same in the overall figure, however many periods fed it.

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.common.schemas import OverallAnnualAverage, PeriodAverage, SubjectAnnualAverage

from .scores import is_present, mean_of_present


def subject_annual_average(period_averages: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the present period averages of one subject."""

    return mean_of_present(period_averages)


def overall_annual_average(subject_averages: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the present subject annual averages, one vote per subject."""

    return mean_of_present(subject_averages)


def count_present_periods(periods: Iterable[PeriodAverage]) -> int:
    return sum(1 for p in periods if is_present(p.period_average))


def build_subject_annual_averages(periods: Sequence[PeriodAverage]) -> List[SubjectAnnualAverage]:
    """
    Group one student's period averages for one year by subject.

    Subjects keep first-seen order and contributing periods are sorted by
    period number. Subjects without any present period average are returned
    with ``average=None``.
    """

    by_subject: Dict[Tuple[str, str, str], List[PeriodAverage]] = OrderedDict()
    for period in periods:
        key = (period.student_id, period.academic_year_id, period.subject_id)
        by_subject.setdefault(key, []).append(period)

    subjects = []
    for (student_id, year_id, subject_id), rows in by_subject.items():
        ordered = tuple(sorted(rows, key=lambda p: p.period))
        subjects.append(
            SubjectAnnualAverage(
                student_id=student_id,
                subject_id=subject_id,
                academic_year_id=year_id,
                period_averages=ordered,
                average=subject_annual_average(p.period_average for p in ordered),
            )
        )
    return subjects


def build_overall_annual_average(
    student_id: str,
    academic_year_id: str,
    periods: Sequence[PeriodAverage],
) -> OverallAnnualAverage:
    relevant = [
        p for p in periods if p.student_id == student_id and p.academic_year_id == academic_year_id
    ]
    subjects = tuple(s for s in build_subject_annual_averages(relevant) if s.average is not None)
    return OverallAnnualAverage(
        student_id=student_id,
        academic_year_id=academic_year_id,
        subjects=subjects,
        average=overall_annual_average(s.average for s in subjects),
    )
