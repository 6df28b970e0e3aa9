# ABOUTME: Makes the shared common package importable across engines.
# ABOUTME: Re-exports schema types, configuration, rounding, and status display helpers.

from .schemas import (
    AcademicYearRecord,
    AssessmentScore,
    EnrollmentRecord,
    OverallAnnualAverage,
    PeriodAverage,
    SubjectAnnualAverage,
)
from .config import EngineConfig, load_config
from .rounding import RoundingPolicy, apply_rounding
from .status import Classification, STATUS_DISPLAY

__all__ = [
    "AcademicYearRecord",
    "AssessmentScore",
    "EnrollmentRecord",
    "OverallAnnualAverage",
    "PeriodAverage",
    "SubjectAnnualAverage",
    "EngineConfig",
    "load_config",
    "RoundingPolicy",
    "apply_rounding",
    "Classification",
    "STATUS_DISPLAY",
]
