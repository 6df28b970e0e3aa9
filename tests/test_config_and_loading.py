# ABOUTME: Validates YAML engine configuration and score/enrollment table loading.
# ABOUTME: Ensures column normalization, NaN-to-None conversion, and boundary validation.

import tempfile
import unittest
from datetime import date
from pathlib import Path

import pandas as pd

from src.common.config import DEFAULT_EXAM_LEVELS, EngineConfig, load_config
from src.common.data_loading import (
    frame_to_assessment_scores,
    frame_to_enrollments,
    load_assessment_scores,
    load_enrollments,
    normalize_score_frame,
    read_table,
)
from src.common.rounding import RoundingPolicy


class EngineConfigTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, name: str, data: str) -> Path:
        path = self.root / name
        path.write_text(data.strip() + "\n", encoding="utf-8")
        return path

    def test_defaults_without_path(self) -> None:
        config = load_config(None)
        self.assertEqual(DEFAULT_EXAM_LEVELS, config.exam_levels)
        self.assertEqual(3, config.min_periods)
        self.assertIs(RoundingPolicy.NONE, config.rounding)
        self.assertTrue(config.is_exam_level(12))
        self.assertFalse(config.is_exam_level(11))

    def test_load_yaml_config(self) -> None:
        path = self._write(
            "engine.yaml",
            """
exam_levels: [6, 9]
min_periods: 2
rounding: ceiling
""",
        )
        config = load_config(path)
        self.assertEqual(frozenset({6, 9}), config.exam_levels)
        self.assertEqual(2, config.min_periods)
        self.assertIs(RoundingPolicy.CEILING, config.rounding)

    def test_unknown_keys_rejected(self) -> None:
        path = self._write("engine.yaml", "passing_grade: 12")
        with self.assertRaises(ValueError):
            load_config(path)

    def test_bad_rounding_rejected(self) -> None:
        path = self._write("engine.yaml", "rounding: truncate")
        with self.assertRaises(ValueError):
            load_config(path)

    def test_repository_config_matches_defaults(self) -> None:
        repo_config = Path(__file__).resolve().parents[1] / "configs" / "engine.yaml"
        self.assertEqual(EngineConfig(), load_config(repo_config))

    def test_with_rounding_returns_new_config(self) -> None:
        config = EngineConfig()
        rounded = config.with_rounding("one_decimal")
        self.assertIs(RoundingPolicy.NONE, config.rounding)
        self.assertIs(RoundingPolicy.ONE_DECIMAL, rounded.rounding)
        self.assertEqual(config.exam_levels, rounded.exam_levels)


class DataLoadingTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        self.scores_path = self._write(
            "scores.csv",
            """student_id,subject_id,academic_year_id,period,as1,as2,as3,at,locked
S1,MAT,2023,1,12,,16,10,True
S1,MAT,2023,2,,,,14,False
S2,POR,2023,1,8.5,9,,11,
""",
        )
        self.enrollments_path = self._write(
            "enrollments.csv",
            """student_id,academic_year_id,grade_level,class_label,year_start
S1,2023,9,9A,2023-09-01
S1,2022,8,8B,2022-09-01
S2,2023,7,7A,
""",
        )

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, name: str, data: str) -> Path:
        path = self.root / name
        path.write_text(data.strip() + "\n", encoding="utf-8")
        return path

    def test_load_assessment_scores_normalizes_types(self) -> None:
        df = load_assessment_scores(self.scores_path)
        self.assertEqual(3, len(df))
        self.assertEqual("MAT", df.iloc[0]["subject_id"])
        self.assertEqual("2023", df.iloc[0]["academic_year_id"])
        self.assertTrue(pd.isna(df.iloc[0]["as2"]))
        self.assertTrue(bool(df.iloc[0]["locked"]))
        self.assertFalse(bool(df.iloc[2]["locked"]))

    def test_frame_to_assessment_scores_maps_nan_to_none(self) -> None:
        records = frame_to_assessment_scores(load_assessment_scores(self.scores_path))
        first = records[0]
        self.assertEqual(12.0, first.as1)
        self.assertIsNone(first.as2)
        self.assertEqual(16.0, first.as3)
        self.assertEqual(10.0, first.at)
        self.assertTrue(first.locked)
        self.assertIsNone(records[1].as1)
        self.assertEqual(2, records[1].period)

    def test_missing_score_columns_are_added(self) -> None:
        df = pd.DataFrame({"student_id": ["S1"], "subject_id": ["MAT"], "academic_year_id": ["2023"], "period": [1], "at": [12]})
        records = frame_to_assessment_scores(df)
        self.assertIsNone(records[0].as1)
        self.assertEqual(12.0, records[0].at)
        self.assertFalse(records[0].locked)

    def test_missing_required_columns_raise(self) -> None:
        df = pd.DataFrame({"student_id": ["S1"], "period": [1]})
        with self.assertRaises(ValueError):
            frame_to_assessment_scores(df)

    def test_out_of_range_scores_rejected(self) -> None:
        df = pd.DataFrame(
            {"student_id": ["S1"], "subject_id": ["MAT"], "academic_year_id": ["2023"], "period": [1], "as1": [25]}
        )
        with self.assertRaises(ValueError):
            frame_to_assessment_scores(df)

    def test_load_rejects_out_of_range_scores(self) -> None:
        path = self._write(
            "bad_scores.csv",
            """student_id,subject_id,academic_year_id,period,as1,as2,as3,at
S1,MAT,2023,1,12,,,10
S2,MAT,2023,1,25,,,12
""",
        )
        with self.assertRaisesRegex(ValueError, "as1"):
            load_assessment_scores(path)

    def test_negative_scores_and_zero_period_rejected(self) -> None:
        base = {"student_id": ["S1"], "subject_id": ["MAT"], "academic_year_id": ["2023"]}
        with self.assertRaises(ValueError):
            normalize_score_frame(pd.DataFrame({**base, "period": [1], "at": [-0.5]}))
        with self.assertRaises(ValueError):
            normalize_score_frame(pd.DataFrame({**base, "period": [0], "at": [10]}))

    def test_boundary_scores_accepted(self) -> None:
        df = pd.DataFrame(
            {
                "student_id": ["S1", "S1"],
                "subject_id": ["MAT", "POR"],
                "academic_year_id": ["2023", "2023"],
                "period": [1, 1],
                "as1": [0, 20],
                "at": [20, 0],
            }
        )
        self.assertEqual(2, len(normalize_score_frame(df)))

    def test_load_enrollments(self) -> None:
        records = frame_to_enrollments(load_enrollments(self.enrollments_path))
        self.assertEqual(3, len(records))
        self.assertEqual(9, records[0].grade_level)
        self.assertEqual("9A", records[0].class_label)
        self.assertEqual(date(2023, 9, 1), records[0].year_start)
        self.assertIsNone(records[2].year_start)

    def test_parquet_roundtrip_and_unsupported_suffix(self) -> None:
        parquet_path = self.root / "scores.parquet"
        load_assessment_scores(self.scores_path).to_parquet(parquet_path, index=False)
        self.assertEqual(3, len(read_table(parquet_path)))
        with self.assertRaises(ValueError):
            read_table(self.root / "scores.xlsx")


if __name__ == "__main__":
    unittest.main()
