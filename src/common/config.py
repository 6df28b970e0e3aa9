# ABOUTME: Loads engine configuration (exam-bearing levels, evaluation threshold, rounding) from YAML.
# ABOUTME: Holds the fixed grading weights and band thresholds shared by all engines.

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

import yaml

from .rounding import RoundingPolicy

DEFAULT_EXAM_LEVELS: FrozenSet[int] = frozenset({9, 10, 12})


class ScoreRange:
    MIN = 0.0
    MAX = 20.0


class ScoreWeights:
    FORMATIVE = 0.4
    SUMMATIVE = 0.6


class GradeThresholds:
    APPROVAL = 10.0
    EXAM = 7.0
    MIN_PERIODS = 3


@dataclass(frozen=True)
class EngineConfig:
    """School/region-specific rules fed explicitly into the engines."""

    exam_levels: FrozenSet[int] = DEFAULT_EXAM_LEVELS
    min_periods: int = GradeThresholds.MIN_PERIODS
    rounding: RoundingPolicy = RoundingPolicy.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "exam_levels", frozenset(int(level) for level in self.exam_levels))
        object.__setattr__(self, "rounding", RoundingPolicy.parse(self.rounding))
        if self.min_periods < 0:
            raise ValueError(f"min_periods must be >= 0, got {self.min_periods}.")

    def is_exam_level(self, grade_level: int) -> bool:
        return grade_level in self.exam_levels

    def with_rounding(self, rounding) -> "EngineConfig":
        return EngineConfig(exam_levels=self.exam_levels, min_periods=self.min_periods, rounding=rounding)


def load_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Read an engine YAML config; no path means the defaults."""

    if config_path is None:
        return EngineConfig()

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(cfg).__name__}.")

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}.")

    if "exam_levels" in cfg:
        cfg["exam_levels"] = _as_levels(cfg["exam_levels"] or [])
    return EngineConfig(**cfg)


def _as_levels(values: Iterable) -> FrozenSet[int]:
    return frozenset(int(v) for v in values)
