"""Custom exception hierarchy for the Option Valuation engine.

All domain-specific exceptions inherit from ValuationError, which carries
the name of the operation that failed.
"""


class ValuationError(Exception):
    """Base exception for all valuation and calibration failures.

    Attributes:
        operation: The engine operation that failed (e.g., "price", "solve").
    """

    def __init__(self, message: str, *, operation: str) -> None:
        self.operation = operation
        super().__init__(message)


class DomainError(ValuationError, ValueError):
    """Raised when an input lies outside the mathematical domain of the model.

    Zero volatility, zero maturity, or a non-positive spot or strike would
    divide by zero or take the log of a non-positive number in d1.

    Attributes:
        parameter: Name of the offending input.
        value: The rejected value.
    """

    def __init__(
        self,
        message: str,
        *,
        parameter: str,
        value: float,
        operation: str = "price",
    ) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(message, operation=operation)


class SolverError(ValuationError):
    """Base exception for implied volatility solves that produced no root.

    Attributes:
        method: The solver strategy that failed (e.g., "bisection").
        iterations: Number of iterations performed before giving up.
        last_estimate: The final volatility candidate, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str,
        iterations: int,
        last_estimate: float | None = None,
    ) -> None:
        self.method = method
        self.iterations = iterations
        self.last_estimate = last_estimate
        super().__init__(message, operation="solve")


class ConvergenceError(SolverError):
    """Raised when a solver exhausts its iteration cap without meeting tolerance."""


class BracketError(SolverError):
    """Raised when the bisection bracket does not straddle the root."""


class DivergenceError(SolverError):
    """Raised when Newton-Raphson steps away from the root or stalls."""
