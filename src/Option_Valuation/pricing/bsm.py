"""Black-Scholes-Merton pricing of European options.

Implements the closed-form BSM valuation for European-style options:
- d1 / d2 standardized distance terms
- Call and put present values
- Discrete dividends approximated by reducing the spot price by the
  present value of every scheduled payment

Degenerate inputs (zero volatility, zero maturity, non-positive spot or
strike) raise DomainError instead of propagating inf/NaN.

References:
    Hull, J.C. "Options, Futures, and Other Derivatives" (8th ed.)
    Chapter 14: The Black-Scholes-Merton Model
"""

import logging
import math
from collections.abc import Sequence
from typing import Protocol

from Option_Valuation.models.contract import ContractParameters, DividendSchedule
from Option_Valuation.models.enums import OptionType
from Option_Valuation.pricing.normal import cdf
from Option_Valuation.utils.exceptions import DomainError

logger = logging.getLogger(__name__)


class PricingFunction(Protocol):
    """Positional pricing signature inverted by the implied volatility solvers."""

    def __call__(
        self,
        spot: float,
        strike: float,
        risk_free_rate: float,
        volatility: float,
        maturity: float,
        dividend_amount: float = 0.0,
        dividend_times: Sequence[float] = (),
    ) -> float: ...


def d1(params: ContractParameters) -> float:
    """Compute d1 in the BSM formula.

    d1 = (ln(S/K) + (r + sigma^2/2) * T) / (sigma * sqrt(T))

    Raises:
        DomainError: If spot, strike, volatility or maturity is not positive.
    """
    validate_inputs(params)
    return _d1(params.spot, params)


def d2(params: ContractParameters, d1_value: float | None = None) -> float:
    """Compute d2 = d1 - sigma * sqrt(T).

    Pass an already computed ``d1_value`` to reuse it bit-for-bit.
    """
    if d1_value is None:
        d1_value = d1(params)
    return d1_value - params.volatility * math.sqrt(params.maturity)


def adjusted_spot(params: ContractParameters, dividends: DividendSchedule) -> float:
    """Spot price net of the present value of scheduled dividends.

    Returns ``params.spot`` unchanged when the schedule is empty.

    Raises:
        DomainError: If a payment time falls outside [0, maturity] or the
            dividends consume the whole spot price.
    """
    if dividends.is_empty:
        return params.spot

    for payment_time in dividends.times:
        if not 0.0 <= payment_time <= params.maturity:
            msg = (
                f"dividend time must lie within [0, {params.maturity}], "
                f"got {payment_time}"
            )
            raise DomainError(msg, parameter="dividend_times", value=payment_time)

    spot = params.spot - dividends.present_value(params.risk_free_rate)
    if spot <= 0:
        msg = f"dividend-adjusted spot must be positive, got {spot}"
        raise DomainError(msg, parameter="spot", value=spot)
    logger.debug("Dividend adjustment moved spot from %s to %s", params.spot, spot)
    return spot


def price(
    option_type: OptionType,
    params: ContractParameters,
    dividend_amount: float = 0.0,
    dividend_times: Sequence[float] = (),
) -> float:
    """Compute the Black-Scholes-Merton price of a European option.

    Args:
        option_type: CALL or PUT.
        params: Spot, strike, rate, volatility and maturity.
        dividend_amount: Flat cash amount paid at each dividend time.
        dividend_times: Payment times in years; empty means no dividends.

    Returns:
        The theoretical option price.

    Raises:
        DomainError: If any input lies outside the model's domain.
    """
    validate_inputs(params)
    dividends = DividendSchedule(amount=dividend_amount, times=tuple(dividend_times))
    spot = adjusted_spot(params, dividends)

    d1_val = _d1(spot, params)
    d2_val = d1_val - params.volatility * math.sqrt(params.maturity)
    discount_factor = math.exp(-params.risk_free_rate * params.maturity)

    if option_type == OptionType.CALL:
        return spot * cdf(d1_val) - params.strike * discount_factor * cdf(d2_val)
    return params.strike * discount_factor * cdf(-d2_val) - spot * cdf(-d1_val)


def call_price(
    spot: float,
    strike: float,
    risk_free_rate: float,
    volatility: float,
    maturity: float,
    dividend_amount: float = 0.0,
    dividend_times: Sequence[float] = (),
) -> float:
    """European call price from positional inputs (a PricingFunction)."""
    params = ContractParameters(
        spot=spot,
        strike=strike,
        risk_free_rate=risk_free_rate,
        volatility=volatility,
        maturity=maturity,
    )
    return price(OptionType.CALL, params, dividend_amount, dividend_times)


def put_price(
    spot: float,
    strike: float,
    risk_free_rate: float,
    volatility: float,
    maturity: float,
    dividend_amount: float = 0.0,
    dividend_times: Sequence[float] = (),
) -> float:
    """European put price from positional inputs (a PricingFunction)."""
    params = ContractParameters(
        spot=spot,
        strike=strike,
        risk_free_rate=risk_free_rate,
        volatility=volatility,
        maturity=maturity,
    )
    return price(OptionType.PUT, params, dividend_amount, dividend_times)


def european_lower_bound(
    option_type: OptionType,
    spot: float,
    strike: float,
    risk_free_rate: float,
    maturity: float,
) -> float:
    """Compute the European option lower bound (no-arbitrage).

    This is also the limit of the BSM price as volatility goes to zero:
      Call: max(S - K * e^(-rT), 0)
      Put:  max(K * e^(-rT) - S, 0)
    """
    discount_factor = math.exp(-risk_free_rate * maturity)
    if option_type == OptionType.CALL:
        return max(spot - strike * discount_factor, 0.0)
    return max(strike * discount_factor - spot, 0.0)


def _d1(spot: float, params: ContractParameters) -> float:
    numerator = (
        math.log(spot / params.strike)
        + (params.risk_free_rate + params.volatility * params.volatility / 2.0) * params.maturity
    )
    return numerator / (params.volatility * math.sqrt(params.maturity))


def validate_inputs(params: ContractParameters) -> None:
    """Validate common BSM inputs.

    Raises:
        DomainError: If any input is out of valid range.
    """
    for name in ("spot", "strike", "volatility", "maturity"):
        value = getattr(params, name)
        if not math.isfinite(value) or value <= 0:
            msg = f"{name} must be positive, got {value}"
            raise DomainError(msg, parameter=name, value=value)
    if not math.isfinite(params.risk_free_rate):
        msg = f"risk_free_rate must be finite, got {params.risk_free_rate}"
        raise DomainError(msg, parameter="risk_free_rate", value=params.risk_free_rate)
