"""Per-email rate configuration and running cost estimate."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

DEFAULT_CLASSIFY_RATE = 0.001
DEFAULT_GENERATE_RATE = 0.002

_FOUR_PLACES = Decimal("0.0001")

# Finite floats span roughly 1e-324..1e308, so this many digits keeps sums exact.
_FLOAT_DIGITS = 700


def coerce_rate(value: Any) -> float:
    """Coerce operator input to a finite, non-negative float.

    Anything that cannot be read as such (blank, text, NaN, infinities,
    negatives) becomes ``0.0``.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(rate) or rate < 0:
        return 0.0
    return rate


@dataclass
class RateConfig:
    """Operator-editable cost per email for each service stage."""

    classify_per_email: float = DEFAULT_CLASSIFY_RATE
    generate_per_email: float = DEFAULT_GENERATE_RATE

    def __post_init__(self):
        self.classify_per_email = coerce_rate(self.classify_per_email)
        self.generate_per_email = coerce_rate(self.generate_per_email)

    @classmethod
    def coerce(cls, classify_per_email: Any = None, generate_per_email: Any = None) -> RateConfig:
        """Build a config from raw input; ``None`` keeps the default rate."""
        return cls(
            classify_per_email=DEFAULT_CLASSIFY_RATE if classify_per_email is None else classify_per_email,
            generate_per_email=DEFAULT_GENERATE_RATE if generate_per_email is None else generate_per_email,
        )

    @property
    def per_email(self) -> float:
        return self.classify_per_email + self.generate_per_email


def estimate_cost(result_count: int, rates: RateConfig) -> str:
    """Estimated spend for ``result_count`` emails, with exactly 4 decimals."""
    count = max(int(result_count), 0)
    with localcontext() as ctx:
        ctx.prec = _FLOAT_DIGITS + len(str(count))
        per_email = Decimal(repr(rates.classify_per_email)) + Decimal(repr(rates.generate_per_email))
        total = (per_email * count).quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP)
    return f"{total:.4f}"
