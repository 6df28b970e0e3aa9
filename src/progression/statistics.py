# ABOUTME: Cohort-level evaluation summaries: per-subject grade bands and class approval counts.
# ABOUTME: Feeds pedagogical reports and class dashboards from period-average frames.

from __future__ import annotations

from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from src.common.config import EngineConfig, GradeThresholds
from src.common.data_loading import normalize_enrollment_frame
from src.common.status import Classification, status_label
from src.grading.classification import ClassificationEngine
from src.grading.frames import overall_annual_frame


class GradeBands:
    LOWER = GradeThresholds.APPROVAL
    UPPER = 14.0


SUBJECT_STATISTICS_COLUMNS = [
    "subject_id",
    "evaluated",
    "positive",
    "positive_pct",
    "band_0_9",
    "band_10_13",
    "band_14_20",
    "total",
    "mean",
]
COHORT_COLUMNS = [
    "student_id",
    "class_label",
    "grade_level",
    "overall_annual_average",
    "period_count",
    "classification",
    "status_label",
]


def subject_statistics(period_df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize period averages per subject.

    Bands are half-open: [0, 10), [10, 14) and [14, 20]. Subjects that appear
    with no present period average report zero counts and a NaN mean.
    """

    if period_df is None or period_df.empty:
        return pd.DataFrame(columns=SUBJECT_STATISTICS_COLUMNS)

    mt = period_df["period_average"].astype("float64")
    flags = pd.DataFrame(
        {
            "subject_id": period_df["subject_id"],
            "period_average": mt,
            "evaluated": mt.notna(),
            "positive": mt >= GradeThresholds.APPROVAL,
            "band_0_9": mt < GradeBands.LOWER,
            "band_10_13": (mt >= GradeBands.LOWER) & (mt < GradeBands.UPPER),
            "band_14_20": mt >= GradeBands.UPPER,
        }
    )

    grouped = (
        flags.groupby("subject_id", sort=True)
        .agg(
            evaluated=("evaluated", "sum"),
            positive=("positive", "sum"),
            band_0_9=("band_0_9", "sum"),
            band_10_13=("band_10_13", "sum"),
            band_14_20=("band_14_20", "sum"),
            total=("period_average", "sum"),
            mean=("period_average", "mean"),
        )
        .reset_index()
    )
    for column in ("evaluated", "positive", "band_0_9", "band_10_13", "band_14_20"):
        grouped[column] = grouped[column].astype("int64")
    evaluated = grouped["evaluated"].to_numpy()
    grouped["positive_pct"] = np.where(
        evaluated > 0,
        grouped["positive"].to_numpy() / np.maximum(evaluated, 1) * 100.0,
        0.0,
    )
    return grouped[SUBJECT_STATISTICS_COLUMNS]


def classify_cohort(
    period_df: pd.DataFrame,
    enrollments_df: pd.DataFrame,
    academic_year_id: str,
    active_year_id: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> pd.DataFrame:
    """Classify every student enrolled in ``academic_year_id``, graded or not."""

    enrollments = normalize_enrollment_frame(enrollments_df)
    enrolled = (
        enrollments[enrollments["academic_year_id"] == academic_year_id]
        .drop_duplicates(subset=["student_id"], keep="first")
        [["student_id", "class_label", "grade_level"]]
    )
    if enrolled.empty:
        return pd.DataFrame(columns=COHORT_COLUMNS)

    if period_df is not None and not period_df.empty:
        year_periods = period_df[period_df["academic_year_id"] == academic_year_id]
    else:
        year_periods = None
    overall = overall_annual_frame(year_periods)[["student_id", "overall_annual_average", "period_count"]].astype(
        {"student_id": "string"}
    )

    cohort = enrolled.merge(overall, on="student_id", how="left", validate="one_to_one")
    cohort["overall_annual_average"] = cohort["overall_annual_average"].astype("float64")
    cohort["period_count"] = cohort["period_count"].fillna(0).astype("int64")

    engine = ClassificationEngine(config)
    year_active = academic_year_id == active_year_id
    classifications = [
        engine.classify_year(
            None if pd.isna(average) else float(average),
            int(level),
            period_count=int(count),
            year_active=year_active,
        )
        for average, level, count in zip(
            cohort["overall_annual_average"], cohort["grade_level"], cohort["period_count"]
        )
    ]
    # object dtype keeps Classification members intact
    cohort["classification"] = pd.Series(classifications, index=cohort.index, dtype=object)
    cohort["status_label"] = cohort["classification"].map(status_label)
    return cohort[COHORT_COLUMNS].reset_index(drop=True)


def approval_summary(classifications: Iterable[Classification]) -> Dict[Classification, int]:
    counts = {member: 0 for member in Classification}
    for classification in classifications:
        counts[Classification(classification)] += 1
    return counts
