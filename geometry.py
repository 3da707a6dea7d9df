from __future__ import annotations
import math
import re

DP_UNIT = "dp"

number_pattern = re.compile(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)$')

def parse_number_with_unit(value: str) -> tuple[float, str] | None:
    if not value or not isinstance(value, str):
        return None

    match = number_pattern.match(value.strip())
    if not match:
        return None

    return (float(match.group(1)), match.group(2).lower())

def parse_dp(value: str) -> int | None:
    parsed = parse_number_with_unit(value)
    if parsed is None:
        return None

    num_value, unit = parsed
    if unit != DP_UNIT or not math.isfinite(num_value):
        return None
    return int(num_value)

def dp_to_px(dp: int, density: float) -> int:
    return max(1, int(dp * density + 0.5))

def parse_float(value: str) -> float | None:
    if value is None:
        return None
    try:
        result = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(result):
        return None
    return result

