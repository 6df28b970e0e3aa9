# ABOUTME: Maps an average and grade level onto a student classification.
# ABOUTME: Applies the active-year, minimum-evaluation, and exam-track rules in a fixed order.

from __future__ import annotations

from typing import Optional

from src.common.config import EngineConfig, GradeThresholds
from src.common.status import Classification

from .scores import is_present


def classify(
    average: Optional[float],
    grade_level: int,
    *,
    year_active: bool = False,
    period_count: int,
    config: Optional[EngineConfig] = None,
) -> Classification:
    """
    Classify a student for one academic year (first match wins).

    1. active year -> IN_PROGRESS
    2. fewer than ``config.min_periods`` present period averages -> PENDING
    3. no average -> PENDING
    4. average >= 10 -> APPROVED
    5. average >= 7 -> EXAM_TRACK on exam-bearing levels, otherwise PROGRESSES
    6. below 7 -> FAILED on exam-bearing levels, otherwise RETAINED
    """

    config = config or EngineConfig()

    if year_active:
        return Classification.IN_PROGRESS
    if period_count < config.min_periods:
        return Classification.PENDING
    if not is_present(average):
        return Classification.PENDING
    if average >= GradeThresholds.APPROVAL:
        return Classification.APPROVED

    exam_level = config.is_exam_level(grade_level)
    if average >= GradeThresholds.EXAM:
        return Classification.EXAM_TRACK if exam_level else Classification.PROGRESSES
    return Classification.FAILED if exam_level else Classification.RETAINED


class ClassificationEngine:
    """Binds a config so callers classify many students under the same rules."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def classify_year(
        self,
        average: Optional[float],
        grade_level: int,
        period_count: int,
        year_active: bool = False,
    ) -> Classification:
        return classify(
            average,
            grade_level,
            year_active=year_active,
            period_count=period_count,
            config=self.config,
        )

    def classify_period(
        self,
        period_average: Optional[float],
        grade_level: int,
        year_active: bool = False,
    ) -> Classification:
        """Classify a single period average on its own (one contributing period)."""

        single = EngineConfig(exam_levels=self.config.exam_levels, min_periods=1, rounding=self.config.rounding)
        return classify(
            period_average,
            grade_level,
            year_active=year_active,
            period_count=1 if is_present(period_average) else 0,
            config=single,
        )
