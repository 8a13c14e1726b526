"""Tests for analytic and finite-difference BSM Greeks.

Reference values sourced from:
    Hull, J.C. "Options, Futures, and Other Derivatives" (8th ed.)
    Chapter 18, Examples 18.1-18.6.

    S=49, K=50, r=0.05, sigma=0.20, T=0.3846
    - Call delta ~ 0.522
    - Gamma      ~ 0.066
    - Vega       ~ 12.1 (per 1.0 change in vol)
    - Call theta ~ -4.31 (annual)
    - Call rho   ~ 8.91
"""

import math

import pytest
from pydantic import ValidationError

from Option_Valuation.models import ContractParameters, GreeksMethod, OptionGreeks, OptionType
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
from Option_Valuation.utils.exceptions import DomainError


class TestAnalyticGreeks:
    """Closed-form Greeks against textbook values."""

    def test_call_delta(self, greeks_contract: ContractParameters) -> None:
        assert delta(greeks_contract) == pytest.approx(0.521602, abs=1e-5)

    def test_put_delta_is_call_delta_minus_one(
        self, greeks_contract: ContractParameters
    ) -> None:
        call_delta = delta(greeks_contract, OptionType.CALL)
        assert delta(greeks_contract, OptionType.PUT) == pytest.approx(call_delta - 1.0)

    def test_gamma(self, greeks_contract: ContractParameters) -> None:
        assert gamma(greeks_contract) == pytest.approx(0.065545, abs=1e-5)

    def test_vega(self, greeks_contract: ContractParameters) -> None:
        assert vega(greeks_contract) == pytest.approx(12.105243, abs=1e-4)

    def test_call_theta(self, greeks_contract: ContractParameters) -> None:
        assert theta(greeks_contract) == pytest.approx(-4.305390, abs=1e-4)

    def test_put_theta(self, greeks_contract: ContractParameters) -> None:
        assert theta(greeks_contract, OptionType.PUT) == pytest.approx(-1.853006, abs=1e-4)

    def test_call_rho(self, greeks_contract: ContractParameters) -> None:
        assert rho(greeks_contract) == pytest.approx(8.906574, abs=1e-4)

    def test_theta_put_call_identity(self, greeks_contract: ContractParameters) -> None:
        """theta_put - theta_call = r * K * e^(-rT)."""
        p = greeks_contract
        expected = p.risk_free_rate * p.strike * math.exp(-p.risk_free_rate * p.maturity)
        diff = theta(p, OptionType.PUT) - theta(p, OptionType.CALL)
        assert diff == pytest.approx(expected, rel=1e-12)

    def test_rho_put_call_identity(self, greeks_contract: ContractParameters) -> None:
        """rho_call - rho_put = K * T * e^(-rT)."""
        p = greeks_contract
        expected = p.strike * p.maturity * math.exp(-p.risk_free_rate * p.maturity)
        diff = rho(p, OptionType.CALL) - rho(p, OptionType.PUT)
        assert diff == pytest.approx(expected, rel=1e-12)

    def test_zero_volatility_raises(self, greeks_contract: ContractParameters) -> None:
        with pytest.raises(DomainError):
            gamma(greeks_contract.with_(volatility=0.0))


class TestFiniteDifferenceGreeks:
    """Finite-difference routes agree with the closed forms."""

    @pytest.mark.parametrize("option_type", list(OptionType), ids=["call", "put"])
    def test_delta_agrees(
        self, greeks_contract: ContractParameters, option_type: OptionType
    ) -> None:
        assert delta_numeric(greeks_contract, option_type) == pytest.approx(
            delta(greeks_contract, option_type), abs=1e-4
        )

    @pytest.mark.parametrize("option_type", list(OptionType), ids=["call", "put"])
    def test_gamma_agrees(
        self, greeks_contract: ContractParameters, option_type: OptionType
    ) -> None:
        assert gamma_numeric(greeks_contract, option_type) == pytest.approx(
            gamma(greeks_contract), abs=1e-4
        )

    @pytest.mark.parametrize("option_type", list(OptionType), ids=["call", "put"])
    def test_vega_agrees(
        self, greeks_contract: ContractParameters, option_type: OptionType
    ) -> None:
        assert vega_numeric(greeks_contract, option_type) == pytest.approx(
            vega(greeks_contract), rel=1e-4
        )

    @pytest.mark.parametrize("option_type", list(OptionType), ids=["call", "put"])
    def test_rho_agrees(
        self, greeks_contract: ContractParameters, option_type: OptionType
    ) -> None:
        assert rho_numeric(greeks_contract, option_type) == pytest.approx(
            rho(greeks_contract, option_type), rel=1e-4
        )

    @pytest.mark.parametrize("option_type", list(OptionType), ids=["call", "put"])
    def test_theta_has_opposite_sign(
        self, greeks_contract: ContractParameters, option_type: OptionType
    ) -> None:
        """Numeric theta is dV/dT; analytic theta is time decay."""
        assert theta_numeric(greeks_contract, option_type) == pytest.approx(
            -theta(greeks_contract, option_type), rel=1e-4
        )

    def test_custom_epsilon(self, greeks_contract: ContractParameters) -> None:
        assert delta_numeric(greeks_contract, epsilon=0.01) == pytest.approx(
            delta(greeks_contract), abs=1e-4
        )


class TestBsmGreeks:
    """Tests for the bsm_greeks() aggregate."""

    def test_analytic_returns_model(self, greeks_contract: ContractParameters) -> None:
        result = bsm_greeks(greeks_contract)
        assert isinstance(result, OptionGreeks)
        assert result.method == GreeksMethod.ANALYTIC
        assert result.delta == pytest.approx(0.521602, abs=1e-5)
        assert result.gamma == pytest.approx(0.065545, abs=1e-5)
        assert result.vega == pytest.approx(12.105243, abs=1e-4)
        assert result.theta == pytest.approx(-4.305390, abs=1e-4)
        assert result.rho == pytest.approx(8.906574, abs=1e-4)

    def test_analytic_matches_individual_functions(
        self, greeks_contract: ContractParameters
    ) -> None:
        result = bsm_greeks(greeks_contract, OptionType.PUT)
        assert result.delta == delta(greeks_contract, OptionType.PUT)
        assert result.theta == theta(greeks_contract, OptionType.PUT)
        assert result.rho == rho(greeks_contract, OptionType.PUT)

    def test_finite_difference_route(self, greeks_contract: ContractParameters) -> None:
        analytic = bsm_greeks(greeks_contract, OptionType.CALL, GreeksMethod.ANALYTIC)
        numeric = bsm_greeks(greeks_contract, OptionType.CALL, GreeksMethod.FINITE_DIFFERENCE)
        assert numeric.method == GreeksMethod.FINITE_DIFFERENCE
        assert numeric.delta == pytest.approx(analytic.delta, abs=1e-4)
        assert numeric.gamma == pytest.approx(analytic.gamma, abs=1e-4)
        assert numeric.vega == pytest.approx(analytic.vega, rel=1e-4)
        assert numeric.theta == pytest.approx(-analytic.theta, rel=1e-4)

    def test_deep_in_the_money_delta_stays_in_range(self) -> None:
        params = ContractParameters(
            spot=500.0, strike=10.0, risk_free_rate=0.05, volatility=0.1, maturity=0.25
        )
        result = bsm_greeks(params, OptionType.CALL, GreeksMethod.FINITE_DIFFERENCE)
        assert -1.0 <= result.delta <= 1.0
        assert result.gamma >= 0.0
        assert result.vega >= 0.0

    def test_put_delta_negative(self, hull_contract: ContractParameters) -> None:
        result = bsm_greeks(hull_contract, OptionType.PUT)
        assert -1.0 <= result.delta < 0.0


class TestOptionGreeksValidation:
    """Model validators reject impossible sensitivities."""

    def test_delta_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="delta must be between"):
            OptionGreeks(delta=1.5, gamma=0.1, theta=-1.0, vega=1.0, rho=1.0)

    def test_negative_gamma(self) -> None:
        with pytest.raises(ValidationError, match="gamma must be >="):
            OptionGreeks(delta=0.5, gamma=-0.1, theta=-1.0, vega=1.0, rho=1.0)

    def test_negative_vega(self) -> None:
        with pytest.raises(ValidationError, match="vega must be >="):
            OptionGreeks(delta=0.5, gamma=0.1, theta=-1.0, vega=-1.0, rho=1.0)

    def test_frozen(self) -> None:
        greeks = OptionGreeks(delta=0.5, gamma=0.1, theta=-1.0, vega=1.0, rho=1.0)
        with pytest.raises(ValidationError):
            greeks.delta = 0.6  # type: ignore[misc]


class TestFiniteDifferenceNearDomainEdge:
    """Bumps shrink so short maturities and tiny volatilities stay priceable."""

    def test_theta_numeric_short_maturity(self) -> None:
        params = ContractParameters(
            spot=100.0, strike=100.0, risk_free_rate=0.05, volatility=0.2, maturity=0.0005
        )
        numeric = theta_numeric(params)
        assert numeric > 0.0
        assert numeric == pytest.approx(-theta(params), rel=0.05)

    def test_vega_numeric_tiny_volatility(self) -> None:
        params = ContractParameters(
            spot=100.0, strike=100.0, risk_free_rate=0.0, volatility=0.0008, maturity=0.25
        )
        assert vega_numeric(params) == pytest.approx(vega(params), rel=1e-3)

    def test_vega_numeric_tiny_volatility_with_rate(self) -> None:
        params = ContractParameters(
            spot=100.0, strike=100.0, risk_free_rate=0.05, volatility=0.0008, maturity=0.25
        )
        assert vega_numeric(params) == pytest.approx(vega(params), abs=1e-6)

    def test_bsm_greeks_short_maturity(self) -> None:
        params = ContractParameters(
            spot=100.0, strike=100.0, risk_free_rate=0.05, volatility=0.2, maturity=0.0005
        )
        result = bsm_greeks(params, OptionType.CALL, GreeksMethod.FINITE_DIFFERENCE)
        assert result.method == GreeksMethod.FINITE_DIFFERENCE
        assert result.delta == pytest.approx(delta(params), abs=1e-3)

    def test_invalid_input_reports_the_given_value(
        self, greeks_contract: ContractParameters
    ) -> None:
        with pytest.raises(DomainError, match="maturity must be positive, got 0.0"):
            theta_numeric(greeks_contract.with_(maturity=0.0))

    def test_non_positive_epsilon_raises(self, greeks_contract: ContractParameters) -> None:
        with pytest.raises(ValueError, match="differentiation step must be positive"):
            delta_numeric(greeks_contract, epsilon=0.0)
