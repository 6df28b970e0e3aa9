# ABOUTME: Folds a student's enrollments and period averages into a chronological academic record.
# ABOUTME: Every enrolled year appears once, classified, with progression annotated after approvals.

from __future__ import annotations

from collections import OrderedDict
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from src.common.config import EngineConfig
from src.common.rounding import RoundingPolicy, apply_rounding
from src.common.schemas import AcademicYearRecord, EnrollmentRecord, PeriodAverage
from src.common.status import Classification, status_color, status_label
from src.grading.classification import ClassificationEngine
from src.grading.periods import build_subject_annual_averages, count_present_periods, overall_annual_average


def group_by_year(period_averages: Iterable[PeriodAverage]) -> Dict[str, List[PeriodAverage]]:
    grouped: Dict[str, List[PeriodAverage]] = OrderedDict()
    for period in period_averages:
        grouped.setdefault(period.academic_year_id, []).append(period)
    return grouped


def build_history(
    enrollments: Iterable[EnrollmentRecord],
    scores_by_year: Mapping[str, Sequence[PeriodAverage]],
    active_year_id: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> List[AcademicYearRecord]:
    """
    Build one AcademicYearRecord per enrolled academic year, oldest first.

    Enrollment decides which years exist: years that only appear in
    ``scores_by_year`` are dropped, and enrolled years without grades are kept
    with no average. When a year is enrolled twice the first enrollment wins.
    """

    engine = ClassificationEngine(config)

    by_year: Dict[str, EnrollmentRecord] = OrderedDict()
    for enrollment in enrollments:
        by_year.setdefault(enrollment.academic_year_id, enrollment)

    records = []
    for enrollment in _chronological(list(by_year.values())):
        periods = list(scores_by_year.get(enrollment.academic_year_id, ()))
        subjects = tuple(s for s in build_subject_annual_averages(periods) if s.average is not None)
        average = overall_annual_average(s.average for s in subjects)
        period_count = count_present_periods(periods)
        classification = engine.classify_year(
            average,
            enrollment.grade_level,
            period_count=period_count,
            year_active=enrollment.academic_year_id == active_year_id,
        )
        records.append(
            AcademicYearRecord(
                academic_year_id=enrollment.academic_year_id,
                grade_level=enrollment.grade_level,
                class_label=enrollment.class_label,
                subject_count=len(subjects),
                grade_record_count=len(periods),
                period_count=period_count,
                overall_average=average,
                classification=classification,
                subject_averages=subjects,
            )
        )

    return annotate_progression(records)


def annotate_progression(records: Sequence[AcademicYearRecord]) -> List[AcademicYearRecord]:
    """Mark approved years with the grade level reached the following year."""

    annotated = []
    for index, record in enumerate(records):
        next_record = records[index + 1] if index + 1 < len(records) else None
        if next_record is not None and record.classification is Classification.APPROVED:
            record = replace(record, progressed_to_grade_level=next_record.grade_level)
        annotated.append(record)
    return annotated


def _chronological(enrollments: List[EnrollmentRecord]) -> List[EnrollmentRecord]:
    if enrollments and all(e.year_start is not None for e in enrollments):
        return sorted(enrollments, key=lambda e: (e.year_start, e.academic_year_id))
    return sorted(enrollments, key=lambda e: e.academic_year_id)


HISTORY_COLUMNS = [
    "student_id",
    "academic_year_id",
    "grade_level",
    "class_label",
    "subject_count",
    "grade_record_count",
    "period_count",
    "overall_average",
    "classification",
    "status_label",
    "status_color",
    "progressed_to_grade_level",
]


def history_frame(
    student_id: str,
    records: Sequence[AcademicYearRecord],
    rounding: RoundingPolicy = RoundingPolicy.NONE,
) -> pd.DataFrame:
    """Flatten a student's history for parquet/JSON exporters."""

    rows = []
    for record in records:
        rows.append(
            {
                "student_id": student_id,
                "academic_year_id": record.academic_year_id,
                "grade_level": record.grade_level,
                "class_label": record.class_label,
                "subject_count": record.subject_count,
                "grade_record_count": record.grade_record_count,
                "period_count": record.period_count,
                "overall_average": apply_rounding(record.overall_average, rounding),
                "classification": record.classification.value,
                "status_label": status_label(record.classification),
                "status_color": status_color(record.classification).value,
                "progressed_to_grade_level": record.progressed_to_grade_level,
            }
        )
    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)
    frame = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    frame["progressed_to_grade_level"] = frame["progressed_to_grade_level"].astype("Int64")
    return frame
