"""BSM Greeks: closed-form expressions and finite-difference cross-checks.

Every sensitivity is available through two independent routes that must
agree within tolerance:
- Analytic: closed-form derivatives of the BSM formula, built on d1/d2
- Finite difference: central difference of the pricing engine with the
  relevant input bumped by ``epsilon`` (0.001 in that input's units).
  Spot, volatility and maturity bumps never exceed half the input itself.

Theta sign convention: analytic theta is the conventional time decay
(dV/dt), while ``theta_numeric`` is the raw derivative with respect to
maturity (dV/dT), so the two have opposite signs.

Gamma and vega are identical for calls and puts.
"""

import logging
import math

from Option_Valuation.models.contract import ContractParameters
from Option_Valuation.models.enums import GreeksMethod, OptionType
from Option_Valuation.models.greeks import (
    DELTA_MAX,
    DELTA_MIN,
    GAMMA_MIN,
    VEGA_MIN,
    OptionGreeks,
)
from Option_Valuation.pricing.bsm import d1, d2, price, validate_inputs
from Option_Valuation.pricing.normal import cdf, density
from Option_Valuation.utils.numeric import DIFFERENTIATION_STEP, differentiate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Analytic Greeks
# ---------------------------------------------------------------------------


def delta(params: ContractParameters, option_type: OptionType = OptionType.CALL) -> float:
    """Delta: N(d1) for a call, N(d1) - 1 for a put."""
    return _delta(d1(params), option_type)


def gamma(params: ContractParameters) -> float:
    """Gamma: phi(d1) / (S * sigma * sqrt(T))."""
    return _gamma(params, d1(params))


def vega(params: ContractParameters) -> float:
    """Vega per 1.0 change in volatility: S * sqrt(T) * phi(d1)."""
    return _vega(params, d1(params))


def theta(params: ContractParameters, option_type: OptionType = OptionType.CALL) -> float:
    """Annual theta (time decay).

    Call: -(S phi(d1) sigma) / (2 sqrt(T)) - r K e^(-rT) N(d2)
    Put:  -(S phi(d1) sigma) / (2 sqrt(T)) + r K e^(-rT) N(-d2)
    """
    return _theta(params, d1(params), option_type)


def rho(params: ContractParameters, option_type: OptionType = OptionType.CALL) -> float:
    """Rho: K T e^(-rT) N(d2) for a call, -K T e^(-rT) N(-d2) for a put."""
    return _rho(params, d1(params), option_type)


def _delta(d1_val: float, option_type: OptionType) -> float:
    if option_type == OptionType.CALL:
        return cdf(d1_val)
    return cdf(d1_val) - 1.0


def _gamma(params: ContractParameters, d1_val: float) -> float:
    return density(d1_val) / (params.spot * params.volatility * math.sqrt(params.maturity))


def _vega(params: ContractParameters, d1_val: float) -> float:
    return params.spot * math.sqrt(params.maturity) * density(d1_val)


def _theta(params: ContractParameters, d1_val: float, option_type: OptionType) -> float:
    d2_val = d2(params, d1_val)
    decay = -(params.spot * density(d1_val) * params.volatility) / (
        2.0 * math.sqrt(params.maturity)
    )
    carry = params.risk_free_rate * params.strike * _discount_factor(params)
    if option_type == OptionType.CALL:
        return decay - carry * cdf(d2_val)
    return decay + carry * cdf(-d2_val)


def _rho(params: ContractParameters, d1_val: float, option_type: OptionType) -> float:
    d2_val = d2(params, d1_val)
    scale = params.strike * params.maturity * _discount_factor(params)
    if option_type == OptionType.CALL:
        return scale * cdf(d2_val)
    return -scale * cdf(-d2_val)


def _discount_factor(params: ContractParameters) -> float:
    return math.exp(-params.risk_free_rate * params.maturity)


# ---------------------------------------------------------------------------
# Finite-difference Greeks
# ---------------------------------------------------------------------------


def delta_numeric(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    epsilon: float = DIFFERENTIATION_STEP,
) -> float:
    """Delta by bumping spot."""
    validate_inputs(params)
    return differentiate(
        lambda spot: price(option_type, params.with_(spot=spot)),
        params.spot,
        _step_within_domain(params.spot, epsilon),
    )


def gamma_numeric(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    epsilon: float = DIFFERENTIATION_STEP,
) -> float:
    """Gamma by differentiating the finite-difference delta with respect to spot."""
    validate_inputs(params)
    return differentiate(
        lambda spot: delta_numeric(params.with_(spot=spot), option_type, epsilon),
        params.spot,
        _step_within_domain(params.spot, epsilon),
    )


def vega_numeric(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    epsilon: float = DIFFERENTIATION_STEP,
) -> float:
    """Vega by bumping volatility."""
    validate_inputs(params)
    return differentiate(
        lambda vol: price(option_type, params.with_(volatility=vol)),
        params.volatility,
        _step_within_domain(params.volatility, epsilon),
    )


def theta_numeric(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    epsilon: float = DIFFERENTIATION_STEP,
) -> float:
    """dV/dT by bumping maturity; opposite in sign to analytic theta."""
    validate_inputs(params)
    return differentiate(
        lambda maturity: price(option_type, params.with_(maturity=maturity)),
        params.maturity,
        _step_within_domain(params.maturity, epsilon),
    )


def rho_numeric(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    epsilon: float = DIFFERENTIATION_STEP,
) -> float:
    """Rho by bumping the risk-free rate."""
    validate_inputs(params)
    return differentiate(
        lambda rate: price(option_type, params.with_(risk_free_rate=rate)),
        params.risk_free_rate,
        epsilon,
    )


def _step_within_domain(value: float, epsilon: float) -> float:
    """Central-difference step for an input that must stay positive.

    Shrinks ``epsilon`` to half of ``value`` so ``value - step`` is still
    priceable for very short maturities and very low volatilities.
    """
    return min(epsilon, value / 2.0)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


def bsm_greeks(
    params: ContractParameters,
    option_type: OptionType = OptionType.CALL,
    method: GreeksMethod = GreeksMethod.ANALYTIC,
    epsilon: float = DIFFERENTIATION_STEP,
) -> OptionGreeks:
    """Compute all five Greeks for one option through the chosen route.

    Args:
        params: Contract inputs at which the sensitivities are taken.
        option_type: CALL or PUT.
        method: ANALYTIC (closed form) or FINITE_DIFFERENCE.
        epsilon: Bump size for the finite-difference route.

    Returns:
        OptionGreeks with delta, gamma, theta (annual), vega, and rho.

    Raises:
        DomainError: If any input lies outside the model's domain.
    """
    if method == GreeksMethod.ANALYTIC:
        d1_val = d1(params)
        return OptionGreeks(
            delta=_delta(d1_val, option_type),
            gamma=_gamma(params, d1_val),
            theta=_theta(params, d1_val, option_type),
            vega=_vega(params, d1_val),
            rho=_rho(params, d1_val, option_type),
            method=method,
        )

    logger.debug("Finite-difference Greeks with epsilon=%s for %s", epsilon, option_type)
    # Round-off can push deep in/out-of-the-money values just past their bounds
    raw_delta = delta_numeric(params, option_type, epsilon)
    raw_gamma = gamma_numeric(params, option_type, epsilon)
    return OptionGreeks(
        delta=min(max(raw_delta, DELTA_MIN), DELTA_MAX),
        gamma=max(raw_gamma, GAMMA_MIN),
        theta=theta_numeric(params, option_type, epsilon),
        vega=max(vega_numeric(params, option_type, epsilon), VEGA_MIN),
        rho=rho_numeric(params, option_type, epsilon),
        method=method,
    )
