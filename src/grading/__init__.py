# ABOUTME: Exposes the grading engine: score, period, and classification rules.
# ABOUTME: Groups record-level aggregators with their vectorized cohort counterparts.

from .scores import sub_period_average, period_average, compute_period_average, compute_period_averages
from .periods import (
    subject_annual_average,
    overall_annual_average,
    build_subject_annual_averages,
    build_overall_annual_average,
)
from .classification import classify, ClassificationEngine
from .frames import compute_period_frame, subject_annual_frame, overall_annual_frame

__all__ = [
    "sub_period_average",
    "period_average",
    "compute_period_average",
    "compute_period_averages",
    "subject_annual_average",
    "overall_annual_average",
    "build_subject_annual_averages",
    "build_overall_annual_average",
    "classify",
    "ClassificationEngine",
    "compute_period_frame",
    "subject_annual_frame",
    "overall_annual_frame",
]
