"""Finite-difference differentiation and floating-point tolerance checks."""

from collections.abc import Callable

# Central-difference step, in the units of the perturbed argument
DIFFERENTIATION_STEP: float = 1e-3

# Relative slack accepted by close_enough()
CLOSE_ENOUGH_REL: float = 1e-3


def differentiate(
    func: Callable[[float], float],
    x: float,
    step: float = DIFFERENTIATION_STEP,
) -> float:
    """Approximate f'(x) with a central difference.

    f'(x) ~ (f(x + h) - f(x - h)) / (2h)

    Raises:
        ValueError: If ``step`` is not positive.
    """
    if not step > 0:
        msg = f"differentiation step must be positive, got {step}"
        raise ValueError(msg)
    upper = func(x + step)
    lower = func(x - step)
    return (upper - lower) / (2.0 * step)


def is_within(a: float, b: float, threshold: float) -> bool:
    """True when a and b differ by at most ``threshold`` (either order)."""
    if a > b:
        return b + threshold >= a
    return a + threshold >= b


def close_enough(a: float, b: float, rel: float = CLOSE_ENOUGH_REL) -> bool:
    """Relative comparison: a / b within ``rel`` of 1.

    Falls back to an absolute comparison when b is zero.
    """
    if b == 0:
        return abs(a) < rel
    ratio = a / b
    return abs(ratio - 1.0) < rel
