"""Contract and dividend models: the inputs of a BSM valuation.

Models are frozen point-in-time values. They deliberately accept degenerate
numbers (zero volatility, zero maturity); the pricing engine owns domain
validation so finite-difference bumps can build perturbed copies freely.
"""

import math

from pydantic import BaseModel, ConfigDict


class ContractParameters(BaseModel):
    """The five scalars that fully determine a BSM valuation.

    Attributes:
        spot: Current underlying price (S).
        strike: Option strike price (K).
        risk_free_rate: Continuously compounded risk-free rate (r).
        volatility: Annualized volatility (sigma).
        maturity: Time to expiry in years (T).
    """

    model_config = ConfigDict(frozen=True)

    spot: float
    strike: float
    risk_free_rate: float
    volatility: float
    maturity: float

    def with_(self, **changes: float) -> "ContractParameters":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=changes)


class DividendSchedule(BaseModel):
    """Discrete dividends: one flat amount paid at each listed time.

    An empty ``times`` tuple means "no dividends", not "zero-valued dividends".
    """

    model_config = ConfigDict(frozen=True)

    amount: float = 0.0
    times: tuple[float, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.times

    def present_value(self, risk_free_rate: float) -> float:
        """Sum of every payment discounted at the risk-free rate."""
        return sum(self.amount * math.exp(-risk_free_rate * t) for t in self.times)


class FixedParameters(BaseModel):
    """Contract inputs held constant while a solver varies volatility."""

    model_config = ConfigDict(frozen=True)

    spot: float
    strike: float
    risk_free_rate: float
    maturity: float

    def with_volatility(self, volatility: float) -> ContractParameters:
        """Complete these inputs into a priceable contract."""
        return ContractParameters(
            spot=self.spot,
            strike=self.strike,
            risk_free_rate=self.risk_free_rate,
            volatility=volatility,
            maturity=self.maturity,
        )
