# ABOUTME: Computes sub-period (MAS) and period (MT) averages from raw assessment scores.
# ABOUTME: Absent scores propagate as None and are never counted as zero.

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from src.common.config import ScoreWeights
from src.common.schemas import AssessmentScore, PeriodAverage


def is_present(value: Optional[float]) -> bool:
    """True for a real number; None and NaN both mean "no data"."""
    if value is None:
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def mean_of_present(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [float(v) for v in values if is_present(v)]
    if not present:
        return None
    return sum(present) / len(present)


def sub_period_average(
    as1: Optional[float],
    as2: Optional[float],
    as3: Optional[float],
) -> Optional[float]:
    """Mean of the formative scores that were actually recorded."""

    return mean_of_present((as1, as2, as3))


def period_average(sub_avg: Optional[float], summative: Optional[float]) -> Optional[float]:
    """MT = MAS * 0.4 + AT * 0.6; both components are required."""

    if not is_present(sub_avg) or not is_present(summative):
        return None
    return sub_avg * ScoreWeights.FORMATIVE + summative * ScoreWeights.SUMMATIVE


def compute_period_average(score: AssessmentScore) -> PeriodAverage:
    mas = sub_period_average(score.as1, score.as2, score.as3)
    return PeriodAverage(
        student_id=score.student_id,
        subject_id=score.subject_id,
        academic_year_id=score.academic_year_id,
        period=score.period,
        sub_period_average=mas,
        period_average=period_average(mas, score.at),
    )


def compute_period_averages(scores: Iterable[AssessmentScore]) -> List[PeriodAverage]:
    return [compute_period_average(score) for score in scores]
