"""Pydantic v2 models, enums, and type definitions.

Re-exports all public models so consumers can import directly:
    from Option_Valuation.models import ContractParameters, OptionType
"""

from Option_Valuation.models.contract import (
    ContractParameters,
    DividendSchedule,
    FixedParameters,
)
from Option_Valuation.models.enums import (
    GreeksMethod,
    OptionType,
    SolverMethod,
    SolverStatus,
)
from Option_Valuation.models.greeks import OptionGreeks
from Option_Valuation.models.solver import DEFAULT_CONFIG, ImpliedVolResult, ToleranceConfig

__all__ = [
    # Enums
    "GreeksMethod",
    "OptionType",
    "SolverMethod",
    "SolverStatus",
    # Contract
    "ContractParameters",
    "DividendSchedule",
    "FixedParameters",
    # Greeks
    "OptionGreeks",
    # Solver
    "DEFAULT_CONFIG",
    "ImpliedVolResult",
    "ToleranceConfig",
]
