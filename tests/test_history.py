# ABOUTME: Tests multi-year academic history construction and progression annotation.
# ABOUTME: Ensures every enrolled year appears in order and score-only years are dropped.

from datetime import date

import pytest

from src.common.config import EngineConfig
from src.common.rounding import RoundingPolicy
from src.common.schemas import AssessmentScore, EnrollmentRecord
from src.common.status import Classification
from src.grading.scores import compute_period_averages
from src.progression.history import build_history, group_by_year, history_frame


def _enroll(year, level, label="A", start=None):
    return EnrollmentRecord("s1", year, level, label, year_start=start)


def _full_year(year, subjects, at):
    scores = []
    for subject in subjects:
        for period in (1, 2, 3):
            scores.append(AssessmentScore("s1", subject, year, period, as1=at, as2=at, at=at))
    return compute_period_averages(scores)


def test_years_without_grades_are_kept():
    enrollments = [_enroll("2022", 7), _enroll("2023", 8), _enroll("2024", 9)]
    by_year = group_by_year(_full_year("2023", ["math", "history"], 12.0))

    records = build_history(enrollments, by_year, active_year_id="2024")

    assert [r.academic_year_id for r in records] == ["2022", "2023", "2024"]
    assert records[0].overall_average is None
    assert records[0].classification is Classification.PENDING
    assert records[0].grade_record_count == 0
    assert records[1].overall_average == pytest.approx(12.0)
    assert records[1].classification is Classification.APPROVED
    assert records[1].subject_count == 2
    assert records[1].grade_record_count == 6
    assert records[1].period_count == 6
    assert records[2].overall_average is None
    assert records[2].classification is Classification.IN_PROGRESS


def test_years_only_in_scores_are_dropped():
    enrollments = [_enroll("2023", 8)]
    periods = _full_year("2023", ["math"], 11.0) + _full_year("2021", ["math"], 15.0)

    records = build_history(enrollments, group_by_year(periods))

    assert [r.academic_year_id for r in records] == ["2023"]


def test_progression_annotated_only_after_approval():
    enrollments = [_enroll("2021", 7), _enroll("2022", 8), _enroll("2023", 8)]
    periods = _full_year("2021", ["math"], 14.0) + _full_year("2022", ["math"], 5.0)

    records = build_history(enrollments, group_by_year(periods), active_year_id="2023")

    assert records[0].classification is Classification.APPROVED
    assert records[0].progressed_to_grade_level == 8
    assert records[1].classification is Classification.RETAINED
    assert records[1].progressed_to_grade_level is None
    assert records[2].progressed_to_grade_level is None


def test_exam_levels_drive_history_classification():
    enrollments = [_enroll("2023", 9)]
    by_year = group_by_year(_full_year("2023", ["math"], 8.0))

    default = build_history(enrollments, by_year)
    custom = build_history(enrollments, by_year, config=EngineConfig(exam_levels={12}))

    assert default[0].classification is Classification.EXAM_TRACK
    assert custom[0].classification is Classification.PROGRESSES


def test_partial_year_is_pending():
    enrollments = [_enroll("2023", 8)]
    scores = [AssessmentScore("s1", "math", "2023", 1, as1=19, at=19)]
    records = build_history(enrollments, group_by_year(compute_period_averages(scores)))

    assert records[0].overall_average == pytest.approx(19.0)
    assert records[0].classification is Classification.PENDING


def test_sorts_by_year_start_when_available():
    enrollments = [
        _enroll("B-year", 8, start=date(2023, 9, 1)),
        _enroll("A-year", 9, start=date(2024, 9, 1)),
    ]
    records = build_history(enrollments, {})
    assert [r.academic_year_id for r in records] == ["B-year", "A-year"]


def test_sorts_by_identifier_otherwise():
    enrollments = [_enroll("2024/2025", 9), _enroll("2022/2023", 7), _enroll("2023/2024", 8)]
    records = build_history(enrollments, {})
    assert [r.academic_year_id for r in records] == ["2022/2023", "2023/2024", "2024/2025"]


def test_duplicate_enrollment_keeps_first():
    enrollments = [_enroll("2023", 8, label="A"), _enroll("2023", 8, label="B")]
    records = build_history(enrollments, {})
    assert len(records) == 1
    assert records[0].class_label == "A"


def test_history_is_deterministic():
    enrollments = [_enroll("2022", 7), _enroll("2023", 8)]
    by_year = group_by_year(_full_year("2022", ["math", "art"], 9.5))
    assert build_history(enrollments, by_year) == build_history(enrollments, by_year)


def test_history_frame_flattens_records():
    enrollments = [_enroll("2022", 7), _enroll("2023", 8)]
    by_year = group_by_year(_full_year("2022", ["math"], 12.34))
    records = build_history(enrollments, by_year)

    frame = history_frame("s1", records, RoundingPolicy.ONE_DECIMAL)

    assert list(frame["academic_year_id"]) == ["2022", "2023"]
    assert frame.iloc[0]["overall_average"] == pytest.approx(12.3)
    assert frame.iloc[0]["classification"] == "approved"
    assert frame.iloc[0]["status_color"] == "green"
    assert frame.iloc[0]["progressed_to_grade_level"] == 8
    assert frame.iloc[1]["status_label"] == "Pendente"


def test_history_frame_empty():
    frame = history_frame("s1", [])
    assert frame.empty
    assert "classification" in frame.columns
