from __future__ import annotations

import math


def to_float(value, default=0.0) -> float:
    if value is None:
        return float(default)
    if isinstance(value, bool):
        return float(default)
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return float(default)
        try:
            numeric = float(value_text)
        except ValueError:
            return float(default)
    else:
        try:
            numeric = float(value)
        except (TypeError, ValueError, OverflowError):
            return float(default)
    if math.isnan(numeric) or math.isinf(numeric):
        return float(default)
    return numeric


def safe_ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
