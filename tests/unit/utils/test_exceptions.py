"""Tests for custom exception hierarchy.

Covers:
- Inheritance: every exception derives from ValuationError -> Exception
- DomainError is also a ValueError
- Attributes: parameter, value, method, iterations, operation accessible
- Each exception can be caught by its own type and by parent type
"""

import pytest

from Option_Valuation.utils.exceptions import (
    BracketError,
    ConvergenceError,
    DivergenceError,
    DomainError,
    SolverError,
    ValuationError,
)


class TestValuationErrorBase:
    """Tests for the base ValuationError exception."""

    def test_is_subclass_of_exception(self) -> None:
        assert issubclass(ValuationError, Exception)

    def test_operation_accessible(self) -> None:
        exc = ValuationError("Pricing failed", operation="price")
        assert exc.operation == "price"
        assert str(exc) == "Pricing failed"


class TestDomainError:
    """Tests for DomainError."""

    def test_is_value_error(self) -> None:
        assert issubclass(DomainError, ValueError)
        assert issubclass(DomainError, ValuationError)

    def test_attributes_accessible(self) -> None:
        exc = DomainError("volatility must be positive", parameter="volatility", value=0.0)
        assert exc.parameter == "volatility"
        assert exc.value == 0.0
        assert exc.operation == "price"

    def test_operation_override(self) -> None:
        exc = DomainError(
            "observed_price must be positive",
            parameter="observed_price",
            value=-1.0,
            operation="solve",
        )
        assert exc.operation == "solve"

    def test_caught_as_value_error(self) -> None:
        with pytest.raises(ValueError, match="strike"):
            raise DomainError("strike must be positive", parameter="strike", value=-5.0)


class TestSolverErrors:
    """Tests for SolverError and its subclasses."""

    def test_attributes_accessible(self) -> None:
        exc = SolverError("no root", method="bisection", iterations=12, last_estimate=0.31)
        assert exc.method == "bisection"
        assert exc.iterations == 12
        assert exc.last_estimate == 0.31
        assert exc.operation == "solve"

    def test_last_estimate_defaults_to_none(self) -> None:
        exc = SolverError("no root", method="linear", iterations=10)
        assert exc.last_estimate is None

    @pytest.mark.parametrize(
        "error_cls",
        [ConvergenceError, BracketError, DivergenceError],
        ids=["convergence", "bracket", "divergence"],
    )
    def test_subclass_caught_by_parents(self, error_cls: type[SolverError]) -> None:
        with pytest.raises(SolverError):
            raise error_cls("failed", method="newton_raphson", iterations=100)
        with pytest.raises(ValuationError):
            raise error_cls("failed", method="newton_raphson", iterations=100)

    def test_solver_error_is_not_value_error(self) -> None:
        assert not issubclass(SolverError, ValueError)
