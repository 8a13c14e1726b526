"""Solver configuration and the tagged outcome of an implied volatility solve.

ToleranceConfig replaces process-wide constants: each solver receives one at
construction, so tests can run with tighter or looser settings.
ImpliedVolResult distinguishes a converged root from every failure mode, so a
legitimately tiny volatility is never confused with a failed solve.
"""

import math
import os
from typing import Self

from pydantic import BaseModel, ConfigDict, ValidationInfo, computed_field, field_validator

from Option_Valuation.models.enums import SolverMethod, SolverStatus
from Option_Valuation.utils.exceptions import (
    BracketError,
    ConvergenceError,
    DivergenceError,
    SolverError,
)

# --- Solver defaults ---
DEFAULT_MAX_ITERATIONS: int = 1_000_000
DEFAULT_TOLERANCE: float = 1e-4
DEFAULT_NEWTON_MAX_ITERATIONS: int = 100
DEFAULT_DIFFERENTIATION_STEP: float = 1e-3
DEFAULT_SEARCH_INCREMENT: float = 1e-4  # one basis point of volatility
DEFAULT_BISECTION_BOUNDS: tuple[float, float] = (0.0, 1.0)
DEFAULT_NEWTON_INITIAL_GUESS: float = 0.15
DEFAULT_MIN_DERIVATIVE: float = 1e-10

_STATUS_ERRORS: dict[SolverStatus, type[SolverError]] = {
    SolverStatus.NOT_CONVERGED: ConvergenceError,
    SolverStatus.BRACKET_INVALID: BracketError,
    SolverStatus.DIVERGED: DivergenceError,
}


class ToleranceConfig(BaseModel):
    """Convergence settings shared by all implied volatility strategies."""

    model_config = ConfigDict(frozen=True)

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE
    newton_max_iterations: int = DEFAULT_NEWTON_MAX_ITERATIONS
    differentiation_step: float = DEFAULT_DIFFERENTIATION_STEP
    search_increment: float = DEFAULT_SEARCH_INCREMENT
    bisection_bounds: tuple[float, float] = DEFAULT_BISECTION_BOUNDS
    newton_initial_guess: float = DEFAULT_NEWTON_INITIAL_GUESS
    min_derivative: float = DEFAULT_MIN_DERIVATIVE

    @field_validator("max_iterations", "newton_max_iterations")
    @classmethod
    def validate_iteration_cap(cls, value: int) -> int:
        """Iteration caps must allow at least one iteration."""
        if value < 1:
            msg = f"iteration cap must be >= 1, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("tolerance", "differentiation_step", "search_increment", "min_derivative")
    @classmethod
    def validate_positive(cls, value: float, info: ValidationInfo) -> float:
        """Tolerances and step sizes must be positive and finite."""
        if not math.isfinite(value) or value <= 0:
            msg = f"{info.field_name} must be positive, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("bisection_bounds")
    @classmethod
    def validate_bisection_bounds(cls, value: tuple[float, float]) -> tuple[float, float]:
        """The bracket must satisfy 0 <= low < high."""
        low, high = value
        if not 0.0 <= low < high:
            msg = f"bisection_bounds must satisfy 0 <= low < high, got {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> Self:
        """Build a config, letting BSM_* environment variables override defaults.

        Reads BSM_MAX_ITERATIONS, BSM_TOLERANCE and BSM_NEWTON_MAX_ITERATIONS.
        """
        overrides: dict[str, int | float] = {}
        if max_iterations := os.environ.get("BSM_MAX_ITERATIONS"):
            overrides["max_iterations"] = int(max_iterations)
        if tolerance := os.environ.get("BSM_TOLERANCE"):
            overrides["tolerance"] = float(tolerance)
        if newton_max := os.environ.get("BSM_NEWTON_MAX_ITERATIONS"):
            overrides["newton_max_iterations"] = int(newton_max)
        return cls(**overrides)


class ImpliedVolResult(BaseModel):
    """Tagged outcome of one implied volatility solve.

    ``volatility`` is set only when ``status`` is CONVERGED. On failure,
    ``last_estimate`` keeps the final candidate the solver priced, if any.
    """

    model_config = ConfigDict(frozen=True)

    method: SolverMethod
    status: SolverStatus
    volatility: float | None = None
    iterations: int
    residual: float | None = None
    last_estimate: float | None = None
    message: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def converged(self) -> bool:
        """True when the solver found a root within tolerance."""
        return self.status == SolverStatus.CONVERGED

    def unwrap(self) -> float:
        """Return the solved volatility, or raise the matching SolverError."""
        if self.status == SolverStatus.CONVERGED and self.volatility is not None:
            return self.volatility
        error_cls = _STATUS_ERRORS.get(self.status, SolverError)
        raise error_cls(
            self.message or f"{self.method} solver finished with status {self.status}",
            method=str(self.method),
            iterations=self.iterations,
            last_estimate=self.last_estimate,
        )


DEFAULT_CONFIG = ToleranceConfig()
