"""Valuation and calibration engine.

Re-exports all public functions so consumers can import directly:
    from Option_Valuation.pricing import price, bsm_greeks, implied_volatility
"""

from Option_Valuation.pricing.bsm import (
    PricingFunction,
    adjusted_spot,
    call_price,
    d1,
    d2,
    european_lower_bound,
    price,
    put_price,
    validate_inputs,
)
from Option_Valuation.pricing.greeks import (
    bsm_greeks,
    delta,
    delta_numeric,
    gamma,
    gamma_numeric,
    rho,
    rho_numeric,
    theta,
    theta_numeric,
    vega,
    vega_numeric,
)
from Option_Valuation.pricing.implied_vol import (
    SOLVERS,
    BisectionSolver,
    ImpliedVolatilitySolver,
    LinearSearchSolver,
    NewtonRaphsonSolver,
    get_solver,
    implied_volatility,
)
from Option_Valuation.pricing.normal import cdf, density

__all__ = [
    # Normal distribution
    "cdf",
    "density",
    # BSM
    "PricingFunction",
    "adjusted_spot",
    "call_price",
    "d1",
    "d2",
    "european_lower_bound",
    "price",
    "put_price",
    "validate_inputs",
    # Greeks
    "bsm_greeks",
    "delta",
    "delta_numeric",
    "gamma",
    "gamma_numeric",
    "rho",
    "rho_numeric",
    "theta",
    "theta_numeric",
    "vega",
    "vega_numeric",
    # Implied volatility
    "SOLVERS",
    "BisectionSolver",
    "ImpliedVolatilitySolver",
    "LinearSearchSolver",
    "NewtonRaphsonSolver",
    "get_solver",
    "implied_volatility",
]
