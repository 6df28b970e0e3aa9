# ABOUTME: Vectorized score and average computations over whole-cohort pandas frames.
# ABOUTME: Mirrors the record-level aggregators so dashboards can work class-wide.

from __future__ import annotations

import pandas as pd

from src.common.config import ScoreWeights
from src.common.data_loading import normalize_score_frame

PERIOD_COLUMNS = [
    "student_id",
    "subject_id",
    "academic_year_id",
    "period",
    "sub_period_average",
    "period_average",
]
SUBJECT_ANNUAL_COLUMNS = ["student_id", "academic_year_id", "subject_id", "subject_annual_average", "period_count"]
OVERALL_ANNUAL_COLUMNS = [
    "student_id",
    "academic_year_id",
    "overall_annual_average",
    "subject_count",
    "period_count",
    "grade_record_count",
]


def compute_period_frame(scores_df: pd.DataFrame) -> pd.DataFrame:
    """
    Add ``sub_period_average`` and ``period_average`` columns to a score frame.

    Row-wise mean skips NaN formative scores, and the weighted MT stays NaN
    whenever either component is missing.
    """

    if scores_df is None or scores_df.empty:
        return pd.DataFrame(columns=PERIOD_COLUMNS)

    scores = normalize_score_frame(scores_df)
    scores["sub_period_average"] = scores[["as1", "as2", "as3"]].mean(axis=1, skipna=True)
    scores["period_average"] = (
        scores["sub_period_average"] * ScoreWeights.FORMATIVE + scores["at"] * ScoreWeights.SUMMATIVE
    )
    return scores


def subject_annual_frame(period_df: pd.DataFrame) -> pd.DataFrame:
    if period_df is None or period_df.empty:
        return pd.DataFrame(columns=SUBJECT_ANNUAL_COLUMNS)

    present = period_df.dropna(subset=["period_average"])
    if present.empty:
        return pd.DataFrame(columns=SUBJECT_ANNUAL_COLUMNS)

    grouped = (
        present.groupby(["student_id", "academic_year_id", "subject_id"], sort=True)
        .agg(
            subject_annual_average=("period_average", "mean"),
            period_count=("period_average", "count"),
        )
        .reset_index()
    )
    return grouped[SUBJECT_ANNUAL_COLUMNS]


def overall_annual_frame(period_df: pd.DataFrame) -> pd.DataFrame:
    if period_df is None or period_df.empty:
        return pd.DataFrame(columns=OVERALL_ANNUAL_COLUMNS)

    record_counts = (
        period_df.groupby(["student_id", "academic_year_id"], sort=True)
        .size()
        .rename("grade_record_count")
        .reset_index()
    )
    subjects = subject_annual_frame(period_df)
    if subjects.empty:
        overall = record_counts.assign(overall_annual_average=float("nan"), subject_count=0, period_count=0)
        return overall[OVERALL_ANNUAL_COLUMNS]

    overall = (
        subjects.groupby(["student_id", "academic_year_id"], sort=True)
        .agg(
            overall_annual_average=("subject_annual_average", "mean"),
            subject_count=("subject_id", "nunique"),
            period_count=("period_count", "sum"),
        )
        .reset_index()
    )
    overall = record_counts.merge(overall, on=["student_id", "academic_year_id"], how="left", validate="one_to_one")
    overall["subject_count"] = overall["subject_count"].fillna(0).astype("int64")
    overall["period_count"] = overall["period_count"].fillna(0).astype("int64")
    return overall[OVERALL_ANNUAL_COLUMNS]
