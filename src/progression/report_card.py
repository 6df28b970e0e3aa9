# ABOUTME: Shapes one student's year of scores into report-card rows ready for PDF or table rendering.
# ABOUTME: Applies the chosen rounding policy once, after all averages are computed unrounded.

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.common.config import EngineConfig
from src.common.rounding import RoundingPolicy, apply_rounding
from src.common.schemas import AssessmentScore
from src.common.status import Classification, StatusColor, status_color, status_label
from src.grading.classification import ClassificationEngine
from src.grading.periods import build_subject_annual_averages, count_present_periods, overall_annual_average
from src.grading.scores import compute_period_average, mean_of_present


@dataclass(frozen=True)
class ReportCardRow:
    subject_id: str
    period: int
    as1: Optional[float]
    as2: Optional[float]
    as3: Optional[float]
    at: Optional[float]
    sub_period_average: Optional[float]
    period_average: Optional[float]


@dataclass(frozen=True)
class ReportCard:
    student_id: str
    academic_year_id: str
    grade_level: int
    rounding: RoundingPolicy
    rows: List[ReportCardRow]
    period_means: Dict[int, Optional[float]]
    subject_averages: Dict[str, Optional[float]]
    overall_average: Optional[float]
    classification: Classification
    status_label: str = field(default="")
    status_color: Optional[StatusColor] = None


def build_report_card(
    student_id: str,
    academic_year_id: str,
    scores: Iterable[AssessmentScore],
    grade_level: int,
    year_active: bool = False,
    config: Optional[EngineConfig] = None,
    rounding: Optional[RoundingPolicy] = None,
) -> ReportCard:
    """
    Build the report card for ``student_id`` in ``academic_year_id``.

    Scores belonging to other students or years are ignored. Rows are ordered
    by period then by first appearance of the subject. The classification is
    computed from the unrounded overall average.
    """

    config = config or EngineConfig()
    policy = RoundingPolicy.parse(rounding) if rounding is not None else config.rounding

    own = [s for s in scores if s.student_id == student_id and s.academic_year_id == academic_year_id]
    subject_order = {subject: i for i, subject in enumerate(OrderedDict.fromkeys(s.subject_id for s in own))}
    own.sort(key=lambda s: (s.period, subject_order[s.subject_id]))
    periods = [compute_period_average(s) for s in own]

    rows = [
        ReportCardRow(
            subject_id=score.subject_id,
            period=score.period,
            as1=score.as1,
            as2=score.as2,
            as3=score.as3,
            at=score.at,
            sub_period_average=apply_rounding(period.sub_period_average, policy),
            period_average=apply_rounding(period.period_average, policy),
        )
        for score, period in zip(own, periods)
    ]

    by_period: Dict[int, List[Optional[float]]] = OrderedDict()
    for period in periods:
        by_period.setdefault(period.period, []).append(period.period_average)
    period_means = {number: apply_rounding(mean_of_present(values), policy) for number, values in by_period.items()}

    subjects = build_subject_annual_averages(periods)
    subject_averages = {s.subject_id: apply_rounding(s.average, policy) for s in subjects}
    overall = overall_annual_average(s.average for s in subjects)

    classification = ClassificationEngine(config).classify_year(
        overall,
        grade_level,
        period_count=count_present_periods(periods),
        year_active=year_active,
    )

    return ReportCard(
        student_id=student_id,
        academic_year_id=academic_year_id,
        grade_level=grade_level,
        rounding=policy,
        rows=rows,
        period_means=period_means,
        subject_averages=subject_averages,
        overall_average=apply_rounding(overall, policy),
        classification=classification,
        status_label=status_label(classification),
        status_color=status_color(classification),
    )


def report_card_frame(card: ReportCard) -> pd.DataFrame:
    columns = ["subject_id", "period", "as1", "as2", "as3", "at", "sub_period_average", "period_average"]
    if not card.rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([{column: getattr(row, column) for column in columns} for row in card.rows])
