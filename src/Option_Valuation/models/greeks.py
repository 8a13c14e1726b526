"""Greeks model with range validation at the boundary."""

from pydantic import BaseModel, ConfigDict, field_validator

from Option_Valuation.models.enums import GreeksMethod

# --- Validation boundaries for Greeks ---
DELTA_MIN: float = -1.0
DELTA_MAX: float = 1.0
GAMMA_MIN: float = 0.0
VEGA_MIN: float = 0.0


class OptionGreeks(BaseModel):
    """Sensitivity measures of one option at a fixed contract point.

    Validates ranges on construction so a broken computation fails loudly:
    - delta must be in [-1.0, 1.0]
    - gamma must be >= 0
    - vega must be >= 0

    Theta from the analytic route is the conventional time decay (per year);
    from the finite-difference route it is the raw derivative with respect to
    maturity, so the two carry opposite signs.
    """

    model_config = ConfigDict(frozen=True)

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float
    method: GreeksMethod = GreeksMethod.ANALYTIC

    @field_validator("delta")
    @classmethod
    def validate_delta(cls, value: float) -> float:
        """Delta must be between -1.0 and 1.0."""
        if not DELTA_MIN <= value <= DELTA_MAX:
            msg = f"delta must be between {DELTA_MIN} and {DELTA_MAX}, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("gamma")
    @classmethod
    def validate_gamma(cls, value: float) -> float:
        """Gamma must be non-negative."""
        if value < GAMMA_MIN:
            msg = f"gamma must be >= {GAMMA_MIN}, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("vega")
    @classmethod
    def validate_vega(cls, value: float) -> float:
        """Vega must be non-negative."""
        if value < VEGA_MIN:
            msg = f"vega must be >= {VEGA_MIN}, got {value}"
            raise ValueError(msg)
        return value
