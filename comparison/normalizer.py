"""
comparison/normalizer.py

Deterministic min-max normalization for indicator axes.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from comparison.consolidation import is_finite_number

# Value imputed for a missing measurement.
NEUTRAL_VALUE: float = 0.5

# Value given to every present measurement on a zero-variance axis.
ZERO_VARIANCE_VALUE: float = 1.0


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero.

    Values too large to scale by 100 (and non-finite input) are returned as-is.
    """
    shifted = abs(value) * 100.0 + 0.5
    if not math.isfinite(shifted):
        return value
    scaled = math.floor(shifted)
    return math.copysign(scaled, value) / 100.0 if scaled else 0.0


class AxisNormalizer:
    """Provides stateless min-max scaling for one axis across a batch.

    All methods are deterministic and produce outputs in [0, 1].
    No external dependencies, state, or side effects.
    """

    def scale(self, values: Sequence[Any], higher_is_better: bool = True) -> list[float]:
        """Min-max scale a batch of raw values to [0, 1].

        Rules:
            - Non-finite entries (None, NaN, inf, non-numbers) count as missing.
            - No present value at all: every output is 0.5.
            - Zero variance (min == max): present values map to 1.0 and
              missing values to 0.5.
            - Otherwise (v - min) / (max - min), inverted when
              ``higher_is_better`` is False; missing values map to 0.5.

        Args:
            values: Raw axis values, one per country.
            higher_is_better: Direction of the indicator.

        Returns:
            A list the same length as ``values``.
        """
        present: list[float | None] = [
            float(value) if is_finite_number(value) else None for value in values
        ]
        valid = [value for value in present if value is not None]
        if not valid:
            return [NEUTRAL_VALUE for _ in present]

        low, high = min(valid), max(valid)
        if low == high:
            return [ZERO_VARIANCE_VALUE if value is not None else NEUTRAL_VALUE for value in present]

        span = high - low
        # Halve the operands when the span overflows (extreme doubles).
        halve = not math.isfinite(span)
        if halve:
            span = high / 2.0 - low / 2.0
        scaled: list[float] = []
        for value in present:
            if value is None:
                scaled.append(NEUTRAL_VALUE)
                continue
            offset = value / 2.0 - low / 2.0 if halve else value - low
            norm = min(1.0, max(0.0, offset / span))
            scaled.append(norm if higher_is_better else 1.0 - norm)
        return scaled

    def has_data(self, values: Sequence[Any]) -> bool:
        """Return True when at least one entry is a finite number."""
        return any(is_finite_number(value) for value in values)
