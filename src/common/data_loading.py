# ABOUTME: Reads pre-shaped score and enrollment tables exported by the data-access layer.
# ABOUTME: Normalizes column types and converts frame rows into canonical schema records.

from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .config import ScoreRange
from .schemas import AssessmentScore, EnrollmentRecord

SCORE_REQUIRED_COLUMNS = ["student_id", "subject_id", "academic_year_id", "period"]
SCORE_VALUE_COLUMNS = ["as1", "as2", "as3", "at"]
ENROLLMENT_REQUIRED_COLUMNS = ["student_id", "academic_year_id", "grade_level", "class_label"]
ID_COLUMNS = ["student_id", "subject_id", "academic_year_id"]
TRUE_VALUES = ["true", "1", "yes"]


def read_table(path: Path) -> pd.DataFrame:
    """Read a CSV or parquet table, chosen by file suffix."""

    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype="string")
    if suffix in (".parquet", ".pq"):
        return pd.read_parquet(path)
    raise ValueError(f"Unsupported table format '{suffix}' for {path}. Expected .csv or .parquet.")


def load_assessment_scores(path: Path) -> pd.DataFrame:
    return normalize_score_frame(read_table(path))


def load_enrollments(path: Path) -> pd.DataFrame:
    return normalize_enrollment_frame(read_table(path))


def normalize_score_frame(df: pd.DataFrame) -> pd.DataFrame:
    _require_columns(df, SCORE_REQUIRED_COLUMNS, "assessment scores")
    scores = df.copy()
    for column in ID_COLUMNS:
        scores[column] = scores[column].astype("string")
    scores["period"] = pd.to_numeric(scores["period"], errors="coerce").astype("Int64")
    scores = scores.dropna(subset=["period"])
    if (scores["period"] < 1).any():
        raise ValueError("Assessment score periods must be 1 or greater.")
    for column in SCORE_VALUE_COLUMNS:
        if column not in scores.columns:
            scores[column] = float("nan")
        scores[column] = pd.to_numeric(scores[column], errors="coerce").astype("float64")
    _check_score_range(scores)
    if "locked" not in scores.columns:
        scores["locked"] = False
    scores["locked"] = _as_flag(scores["locked"])
    return scores.reset_index(drop=True)


def normalize_enrollment_frame(df: pd.DataFrame) -> pd.DataFrame:
    _require_columns(df, ENROLLMENT_REQUIRED_COLUMNS, "enrollments")
    enrollments = df.copy()
    enrollments["student_id"] = enrollments["student_id"].astype("string")
    enrollments["academic_year_id"] = enrollments["academic_year_id"].astype("string")
    enrollments["class_label"] = enrollments["class_label"].astype("string").fillna("")
    enrollments["grade_level"] = pd.to_numeric(enrollments["grade_level"], errors="coerce").astype("Int64")
    enrollments = enrollments.dropna(subset=["grade_level"])
    if "year_start" in enrollments.columns:
        enrollments["year_start"] = pd.to_datetime(enrollments["year_start"], errors="coerce").dt.date
    else:
        enrollments["year_start"] = None
    return enrollments.reset_index(drop=True)


def frame_to_assessment_scores(df: pd.DataFrame) -> List[AssessmentScore]:
    scores = normalize_score_frame(df)
    records = []
    for row in scores.itertuples(index=False):
        records.append(
            AssessmentScore(
                student_id=str(row.student_id),
                subject_id=str(row.subject_id),
                academic_year_id=str(row.academic_year_id),
                period=int(row.period),
                as1=_optional_float(row.as1),
                as2=_optional_float(row.as2),
                as3=_optional_float(row.as3),
                at=_optional_float(row.at),
                locked=bool(row.locked),
            )
        )
    return records


def frame_to_enrollments(df: pd.DataFrame) -> List[EnrollmentRecord]:
    enrollments = normalize_enrollment_frame(df)
    records = []
    for row in enrollments.itertuples(index=False):
        year_start = row.year_start
        if year_start is None or pd.isna(year_start):
            year_start = None
        records.append(
            EnrollmentRecord(
                student_id=str(row.student_id),
                academic_year_id=str(row.academic_year_id),
                grade_level=int(row.grade_level),
                class_label=str(row.class_label),
                year_start=year_start,
            )
        )
    return records


def _require_columns(df: pd.DataFrame, required: Sequence[str], what: str) -> None:
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise ValueError(f"Missing required {what} columns: {', '.join(missing)}.")


def _check_score_range(scores: pd.DataFrame) -> None:
    values = scores[SCORE_VALUE_COLUMNS]
    out_of_range = (values < ScoreRange.MIN) | (values > ScoreRange.MAX)
    if not out_of_range.to_numpy().any():
        return
    row_idx, col_idx = out_of_range.to_numpy().nonzero()
    row = scores.iloc[row_idx[0]]
    column = SCORE_VALUE_COLUMNS[col_idx[0]]
    raise ValueError(
        f"Score '{column}'={row[column]:g} outside [{ScoreRange.MIN:g}, {ScoreRange.MAX:g}] "
        f"for student='{row['student_id']}' subject='{row['subject_id']}' period={row['period']} "
        f"({len(row_idx)} out-of-range value(s))."
    )


def _as_flag(values: pd.Series) -> pd.Series:
    if pd.api.types.is_bool_dtype(values):
        return values.fillna(False).astype(bool)
    normalized = values.astype("string").str.strip().str.lower()
    return normalized.isin(TRUE_VALUES).fillna(False).astype(bool)


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)
