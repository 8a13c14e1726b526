"""Implied volatility: invert a pricing function against an observed price.

Three interchangeable strategies share one contract,
``solve(pricing_function, fixed, observed_price) -> ImpliedVolResult``:
- LinearSearchSolver: walk volatility up one basis point at a time
- BisectionSolver: halve a [0%, 100%] volatility bracket
- NewtonRaphsonSolver: Newton steps from 15% using a finite-difference vega

Solvers always price without dividends, even when the observed price comes
from a dividend-paying underlying.

Failures are returned as tagged results (never a sentinel zero) and logged
as warnings. ``ImpliedVolResult.unwrap()`` turns them into SolverError
subclasses. No strategy falls back to another automatically.
"""

import logging
import math
from typing import Protocol

from Option_Valuation.models.contract import FixedParameters
from Option_Valuation.models.enums import SolverMethod, SolverStatus
from Option_Valuation.models.solver import DEFAULT_CONFIG, ImpliedVolResult, ToleranceConfig
from Option_Valuation.pricing.bsm import PricingFunction
from Option_Valuation.utils.exceptions import DomainError
from Option_Valuation.utils.numeric import differentiate, is_within

logger = logging.getLogger(__name__)

# Stand-in for a zero-volatility bracket end, where d1 is undefined
ZERO_VOLATILITY_FLOOR: float = 1e-8


class ImpliedVolatilitySolver(Protocol):
    """Common contract of every implied volatility strategy."""

    method: SolverMethod

    def solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult: ...


class _BaseSolver:
    """Shared plumbing: config injection, input checks, and result tagging."""

    method: SolverMethod

    def __init__(self, config: ToleranceConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult:
        """Solve for the volatility that reproduces ``observed_price``.

        Raises:
            DomainError: If the fixed inputs or the observed price are invalid.
        """
        _validate_solver_inputs(fixed, observed_price)
        return self._solve(pricing_function, fixed, observed_price)

    def _solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult:
        raise NotImplementedError

    @staticmethod
    def _price(pricing_function: PricingFunction, fixed: FixedParameters, vol: float) -> float:
        return pricing_function(
            fixed.spot, fixed.strike, fixed.risk_free_rate, vol, fixed.maturity, 0.0, ()
        )

    def _converged(self, volatility: float, iterations: int, residual: float) -> ImpliedVolResult:
        logger.debug(
            "%s converged to %.6f after %d iterations (residual %.3g)",
            self.method,
            volatility,
            iterations,
            residual,
        )
        return ImpliedVolResult(
            method=self.method,
            status=SolverStatus.CONVERGED,
            volatility=volatility,
            iterations=iterations,
            residual=residual,
        )

    def _failed(
        self,
        status: SolverStatus,
        iterations: int,
        message: str,
        residual: float | None = None,
        last_estimate: float | None = None,
    ) -> ImpliedVolResult:
        logger.warning("Implied volatility not calculated (%s): %s", self.method, message)
        return ImpliedVolResult(
            method=self.method,
            status=status,
            iterations=iterations,
            residual=residual,
            last_estimate=last_estimate,
            message=message,
        )


class LinearSearchSolver(_BaseSolver):
    """Scan volatility upward in fixed increments until the price matches.

    Candidates are ``i * search_increment`` for ``i = 1 .. max_iterations``;
    the zero grid point is skipped because d1 is undefined there. The first
    candidate priced within ``tolerance`` of the target wins, so the result
    lands on the increment grid.
    """

    method = SolverMethod.LINEAR

    def _solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult:
        increment = self.config.search_increment
        tolerance = self.config.tolerance

        for step in range(1, self.config.max_iterations + 1):
            candidate = step * increment
            value = self._price(pricing_function, fixed, candidate)
            if is_within(observed_price, value, tolerance):
                return self._converged(candidate, step, value - observed_price)

        msg = (
            f"linear search exhausted {self.config.max_iterations} steps "
            f"up to volatility {self.config.max_iterations * increment:g}"
        )
        return self._failed(
            SolverStatus.NOT_CONVERGED,
            self.config.max_iterations,
            msg,
            last_estimate=self.config.max_iterations * increment,
        )


class BisectionSolver(_BaseSolver):
    """Halve a volatility bracket that straddles the root.

    The bracket (default [0, 1]) is checked before iterating. A zero lower
    end is priced at ZERO_VOLATILITY_FLOOR, which reproduces the
    zero-volatility limit of the price.
    """

    method = SolverMethod.BISECTION

    def _solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult:
        low, high = self.config.bisection_bounds
        tolerance = self.config.tolerance

        residual_low = (
            self._price(pricing_function, fixed, max(low, ZERO_VOLATILITY_FLOOR))
            - observed_price
        )
        residual_high = self._price(pricing_function, fixed, high) - observed_price
        if residual_low * residual_high > 0:
            msg = (
                f"bracket [{low}, {high}] does not straddle the root: prices span "
                f"[{residual_low + observed_price:.6f}, {residual_high + observed_price:.6f}], "
                f"target {observed_price}"
            )
            return self._failed(SolverStatus.BRACKET_INVALID, 0, msg)

        for iteration in range(1, self.config.max_iterations + 1):
            mid = 0.5 * (low + high)
            residual = self._price(pricing_function, fixed, mid) - observed_price

            if abs(residual) < tolerance or 0.5 * (high - low) < tolerance:
                return self._converged(mid, iteration, residual)

            if residual * residual_high > 0:
                high = mid
                residual_high = residual
            else:
                low = mid

        msg = f"bisection did not converge after {self.config.max_iterations} iterations"
        return self._failed(
            SolverStatus.NOT_CONVERGED, self.config.max_iterations, msg, residual, mid
        )


class NewtonRaphsonSolver(_BaseSolver):
    """Newton-Raphson on volatility with a central-difference vega.

    v <- v + (c - f(v)) / f'(v), starting from ``newton_initial_guess``.
    Capped at ``newton_max_iterations``; a vanishing slope, a non-finite
    iterate, or an iterate outside the pricing domain reports DIVERGED.
    """

    method = SolverMethod.NEWTON_RAPHSON

    def _solve(
        self,
        pricing_function: PricingFunction,
        fixed: FixedParameters,
        observed_price: float,
    ) -> ImpliedVolResult:
        tolerance = self.config.tolerance
        cap = self.config.newton_max_iterations

        def option(vol: float) -> float:
            return self._price(pricing_function, fixed, vol)

        vol = self.config.newton_initial_guess
        iterations = 0
        try:
            value = option(vol)
            while abs(value - observed_price) >= tolerance:
                if iterations >= cap:
                    msg = f"Newton-Raphson did not converge within {cap} iterations"
                    return self._failed(
                        SolverStatus.DIVERGED, iterations, msg, value - observed_price, vol
                    )

                slope = differentiate(option, vol, self.config.differentiation_step)
                if not math.isfinite(slope) or abs(slope) < self.config.min_derivative:
                    msg = f"vega estimate {slope:.3g} too small at volatility {vol:.6g}"
                    return self._failed(
                        SolverStatus.DIVERGED, iterations, msg, value - observed_price, vol
                    )

                vol += (observed_price - value) / slope
                iterations += 1
                value = option(vol)
                if not math.isfinite(vol) or not math.isfinite(value):
                    msg = f"iterate became non-finite after {iterations} iterations"
                    return self._failed(SolverStatus.DIVERGED, iterations, msg, last_estimate=vol)
        except DomainError as exc:
            msg = f"iterate left the pricing domain at volatility {vol:.6g}: {exc}"
            return self._failed(SolverStatus.DIVERGED, iterations, msg, last_estimate=vol)

        return self._converged(vol, iterations, value - observed_price)


SOLVERS: dict[SolverMethod, type[_BaseSolver]] = {
    SolverMethod.LINEAR: LinearSearchSolver,
    SolverMethod.BISECTION: BisectionSolver,
    SolverMethod.NEWTON_RAPHSON: NewtonRaphsonSolver,
}


def get_solver(
    method: SolverMethod,
    config: ToleranceConfig | None = None,
) -> ImpliedVolatilitySolver:
    """Build the registered solver for ``method`` with the given config."""
    return SOLVERS[SolverMethod(method)](config)


def implied_volatility(
    method: SolverMethod,
    pricing_function: PricingFunction,
    spot: float,
    strike: float,
    risk_free_rate: float,
    maturity: float,
    observed_price: float,
    *,
    config: ToleranceConfig | None = None,
) -> ImpliedVolResult:
    """Solve for the volatility at which ``pricing_function`` hits ``observed_price``.

    Args:
        method: LINEAR, BISECTION or NEWTON_RAPHSON.
        pricing_function: Positional pricer, e.g. ``call_price``.
        spot: Current underlying price (S).
        strike: Option strike price (K).
        risk_free_rate: Continuously compounded risk-free rate (r).
        maturity: Time to expiry in years (T).
        observed_price: Market price to match.
        config: Convergence settings; defaults to DEFAULT_CONFIG.

    Returns:
        ImpliedVolResult tagged CONVERGED, NOT_CONVERGED, BRACKET_INVALID or
        DIVERGED.

    Raises:
        DomainError: If the fixed inputs or the observed price are invalid.
    """
    fixed = FixedParameters(
        spot=spot, strike=strike, risk_free_rate=risk_free_rate, maturity=maturity
    )
    return get_solver(method, config).solve(pricing_function, fixed, observed_price)


def _validate_solver_inputs(fixed: FixedParameters, observed_price: float) -> None:
    """Reject inputs no volatility could fix.

    Raises:
        DomainError: If spot, strike, maturity or the observed price is not
            positive and finite.
    """
    checks = {
        "spot": fixed.spot,
        "strike": fixed.strike,
        "maturity": fixed.maturity,
        "observed_price": observed_price,
    }
    for name, value in checks.items():
        if not math.isfinite(value) or value <= 0:
            msg = f"{name} must be positive, got {value}"
            raise DomainError(msg, parameter=name, value=value, operation="solve")
