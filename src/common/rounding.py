# ABOUTME: Centralizes the presentation rounding applied to averages at output boundaries.
# ABOUTME: Engines never round; report cards, exports, and the CLI pick a named policy here.

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

# Float noise such as 12.000000000000002 must not ceil to 13.
_NOISE_DIGITS = 9


class RoundingPolicy(str, Enum):
    NONE = "none"
    CEILING = "ceiling"
    ONE_DECIMAL = "one_decimal"

    @classmethod
    def parse(cls, value) -> "RoundingPolicy":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == normalized:
                return policy
        expected = ", ".join(p.value for p in cls)
        raise ValueError(f"Unsupported rounding policy '{value}'. Expected one of: {expected}.")


def apply_rounding(value: Optional[float], policy: RoundingPolicy) -> Optional[float]:
    """
    Round an average for display.

    Absent values stay absent. CEILING matches the printed report card (whole
    numbers, always up); ONE_DECIMAL matches dashboards (half-up to one place).
    """

    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    if policy is RoundingPolicy.NONE:
        return value
    if policy is RoundingPolicy.CEILING:
        return float(math.ceil(round(value, _NOISE_DIGITS)))
    if policy is RoundingPolicy.ONE_DECIMAL:
        quantized = Decimal(repr(round(value, _NOISE_DIGITS))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return float(quantized)
    raise ValueError(f"Unsupported rounding policy '{policy}'.")


def format_average(value: Optional[float], policy: RoundingPolicy, missing: str = "-") -> str:
    rounded = apply_rounding(value, policy)
    if rounded is None:
        return missing
    if policy is RoundingPolicy.CEILING:
        return f"{rounded:.0f}"
    if policy is RoundingPolicy.ONE_DECIMAL:
        return f"{rounded:.1f}"
    return f"{rounded:.2f}"
