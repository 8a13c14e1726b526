"""Standard normal distribution primitives shared by pricing and Greeks."""

import math

from scipy.special import ndtr

_NORMALIZATION: float = 1.0 / math.sqrt(2.0 * math.pi)


def cdf(x: float) -> float:
    """Cumulative probability of a standard normal variable at ``x``."""
    return float(ndtr(x))


def density(x: float) -> float:
    """Standard normal density: exp(-x^2 / 2) / sqrt(2 pi)."""
    return _NORMALIZATION * math.exp(-0.5 * x * x)
