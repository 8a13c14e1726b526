"""Shared test fixtures for the Option Valuation test suite.

Reference contracts come from Hull, "Options, Futures, and Other
Derivatives" (8th ed.), chapters 14 and 18, so tests don't need to inline
construction blocks.
"""

import pytest

from Option_Valuation.models import ContractParameters, FixedParameters, ToleranceConfig


@pytest.fixture()
def hull_contract() -> ContractParameters:
    """Non-dividend example: call ~ 4.759, put ~ 0.8086."""
    return ContractParameters(
        spot=42.0,
        strike=40.0,
        risk_free_rate=0.1,
        volatility=0.2,
        maturity=0.5,
    )


@pytest.fixture()
def greeks_contract() -> ContractParameters:
    """Greeks example: delta ~ 0.5216, gamma ~ 0.0655, vega ~ 12.1."""
    return ContractParameters(
        spot=49.0,
        strike=50.0,
        risk_free_rate=0.05,
        volatility=0.2,
        maturity=0.3846,
    )


@pytest.fixture()
def dividend_contract() -> ContractParameters:
    """Dividend example: 0.5 paid at 2 and 5 months, call ~ 3.671."""
    return ContractParameters(
        spot=40.0,
        strike=40.0,
        risk_free_rate=0.09,
        volatility=0.3,
        maturity=0.5,
    )


@pytest.fixture()
def iv_inputs() -> FixedParameters:
    """Implied volatility example: a 1.875 call solves to ~ 0.2345."""
    return FixedParameters(spot=21.0, strike=20.0, risk_free_rate=0.1, maturity=0.25)


@pytest.fixture()
def short_config() -> ToleranceConfig:
    """Small iteration caps so failure paths finish quickly."""
    return ToleranceConfig(max_iterations=500, newton_max_iterations=20)
