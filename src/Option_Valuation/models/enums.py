"""StrEnum types for the valuation domain.

All enums use StrEnum (Python 3.11+). Values are lowercase strings.
Use enum members in business logic, never raw strings.
"""

from enum import StrEnum


class OptionType(StrEnum):
    """Type of option contract."""

    CALL = "call"
    PUT = "put"


class GreeksMethod(StrEnum):
    """How a set of Greeks was computed."""

    ANALYTIC = "analytic"
    FINITE_DIFFERENCE = "finite_difference"


class SolverMethod(StrEnum):
    """Root-finding strategy used to solve implied volatility."""

    LINEAR = "linear"
    BISECTION = "bisection"
    NEWTON_RAPHSON = "newton_raphson"


class SolverStatus(StrEnum):
    """Outcome of an implied volatility solve."""

    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"
    BRACKET_INVALID = "bracket_invalid"
    DIVERGED = "diverged"
