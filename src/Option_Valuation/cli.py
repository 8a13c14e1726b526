"""CLI entry point for Option Valuation: BSM pricing, Greeks, and implied volatility.

Provides the ``option-valuation`` command with subcommands for pricing a
European option, tabulating its Greeks, solving implied volatility from a
market price, and running the reference demo report.

This is the ONLY module where console output is allowed. All other modules
use ``logging``.
"""

from __future__ import annotations

import logging
import time
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from Option_Valuation.logging_config import configure_logging
from Option_Valuation.models import (
    ContractParameters,
    GreeksMethod,
    ImpliedVolResult,
    OptionGreeks,
    OptionType,
    SolverMethod,
    ToleranceConfig,
)
from Option_Valuation.pricing import (
    bsm_greeks,
    call_price,
    european_lower_bound,
    implied_volatility,
    price,
    put_price,
)
from Option_Valuation.utils.exceptions import DomainError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="option-valuation",
    help="Black-Scholes-Merton pricing, Greeks, and implied volatility",
)

# Rich console for formatted output
console = Console()

# ---------------------------------------------------------------------------
# Default constants
# ---------------------------------------------------------------------------

METHOD_ALL: str = "all"
MS_PER_SECOND: float = 1000.0

# Reference scenarios (Hull, "Options, Futures, and Other Derivatives", ch. 14)
DEMO_CONTRACT = ContractParameters(
    spot=42.0, strike=40.0, risk_free_rate=0.1, volatility=0.2, maturity=0.5
)
DEMO_DIVIDEND_CONTRACT = ContractParameters(
    spot=40.0, strike=40.0, risk_free_rate=0.09, volatility=0.3, maturity=0.5
)
DEMO_DIVIDEND_AMOUNT: float = 0.5
DEMO_DIVIDEND_TIMES: tuple[float, ...] = (1.0 / 6.0, 5.0 / 12.0)
DEMO_IV_INPUTS: dict[str, float] = {
    "spot": 21.0,
    "strike": 20.0,
    "risk_free_rate": 0.1,
    "maturity": 0.25,
    "observed_price": 1.875,
}

VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress info logging")]
SpotOption = Annotated[float, typer.Option(help="Current underlying price")]
StrikeOption = Annotated[float, typer.Option(help="Option strike price")]
RateOption = Annotated[float, typer.Option(help="Continuously compounded risk-free rate")]
VolatilityOption = Annotated[float, typer.Option(help="Annualized volatility (0.2 = 20%)")]
MaturityOption = Annotated[float, typer.Option(help="Time to expiry in years")]
OptionTypeOption = Annotated[OptionType, typer.Option("--option-type", help="call or put")]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * MS_PER_SECOND


# ---------------------------------------------------------------------------
# price command
# ---------------------------------------------------------------------------


@app.command("price")
def price_command(
    spot: SpotOption,
    strike: StrikeOption,
    rate: RateOption,
    volatility: VolatilityOption,
    maturity: MaturityOption,
    option_type: OptionTypeOption = OptionType.CALL,
    dividend: Annotated[float, typer.Option(help="Cash dividend paid at each time")] = 0.0,
    dividend_time: Annotated[
        list[float] | None,
        typer.Option("--dividend-time", help="Dividend payment time in years (repeatable)"),
    ] = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Price a European option under Black-Scholes-Merton."""
    configure_logging(verbose=verbose, quiet=quiet)
    params = ContractParameters(
        spot=spot, strike=strike, risk_free_rate=rate, volatility=volatility, maturity=maturity
    )
    times = tuple(dividend_time or ())

    start = time.perf_counter()
    try:
        value = price(option_type, params, dividend, times)
    except DomainError as exc:
        console.print(f"[red]Cannot price option: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    elapsed = _elapsed_ms(start)

    _render_contract(params)
    label = "Dividend paying" if times else "Non-dividend paying"
    console.print(f"{label} {option_type.value} option valued at: [bold]{value:.6f}[/bold]")
    console.print(f"[dim]Valuation took {elapsed:.4f} milliseconds.[/dim]")


# ---------------------------------------------------------------------------
# greeks command
# ---------------------------------------------------------------------------


@app.command("greeks")
def greeks_command(
    spot: SpotOption,
    strike: StrikeOption,
    rate: RateOption,
    volatility: VolatilityOption,
    maturity: MaturityOption,
    option_type: OptionTypeOption = OptionType.CALL,
    epsilon: Annotated[float, typer.Option(help="Finite-difference bump size")] = 1e-3,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Tabulate analytic and finite-difference Greeks side by side."""
    configure_logging(verbose=verbose, quiet=quiet)
    params = ContractParameters(
        spot=spot, strike=strike, risk_free_rate=rate, volatility=volatility, maturity=maturity
    )

    try:
        analytic = bsm_greeks(params, option_type, GreeksMethod.ANALYTIC)
    except DomainError as exc:
        console.print(f"[red]Cannot compute Greeks: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    numeric: OptionGreeks | None = None
    numeric_error = ""
    try:
        numeric = bsm_greeks(params, option_type, GreeksMethod.FINITE_DIFFERENCE, epsilon)
    except ValueError as exc:
        logger.warning("Finite-difference Greeks failed: %s", exc)
        numeric_error = str(exc)

    table = Table(title=f"Greeks ({option_type.value})")
    table.add_column("Greek", style="bold")
    table.add_column("Analytic", justify="right")
    table.add_column("Finite difference", justify="right")
    for name in ("delta", "gamma", "vega", "theta", "rho"):
        numeric_cell = f"{getattr(numeric, name):.6f}" if numeric is not None else "-"
        table.add_row(name, f"{getattr(analytic, name):.6f}", numeric_cell)

    _render_contract(params)
    console.print(table)
    if numeric_error:
        console.print(f"[yellow]Finite difference unavailable: {numeric_error}[/yellow]")
    console.print("[dim]Finite-difference theta is dV/dT, opposite in sign to time decay.[/dim]")


# ---------------------------------------------------------------------------
# implied-vol command
# ---------------------------------------------------------------------------


@app.command("implied-vol")
def implied_vol_command(
    spot: SpotOption,
    strike: StrikeOption,
    rate: RateOption,
    maturity: MaturityOption,
    market_price: Annotated[float, typer.Option("--price", help="Observed option price")],
    method: Annotated[
        str, typer.Option(help="linear, bisection, newton_raphson, or all")
    ] = METHOD_ALL,
    option_type: OptionTypeOption = OptionType.CALL,
    max_iterations: Annotated[
        int | None, typer.Option(help="Iteration cap for linear search and bisection")
    ] = None,
    tolerance: Annotated[float | None, typer.Option(help="Accepted price error")] = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Solve implied volatility from an observed option price."""
    configure_logging(verbose=verbose, quiet=quiet)

    try:
        methods = _resolve_methods(method)
    except ValueError as exc:
        console.print(f"[red]Unknown solver method: {method}[/red]")
        raise typer.Exit(code=1) from exc

    lower_bound = european_lower_bound(option_type, spot, strike, rate, maturity)
    if market_price < lower_bound:
        console.print(
            f"[red]Price {market_price} is below the European lower bound "
            f"{lower_bound:.6f}; no volatility reproduces it.[/red]"
        )
        raise typer.Exit(code=1)

    try:
        config = _solver_config(max_iterations, tolerance)
    except ValueError as exc:
        console.print(f"[red]Invalid solver settings: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    pricing_function = call_price if option_type == OptionType.CALL else put_price

    results: list[tuple[ImpliedVolResult, float]] = []
    for solver_method in methods:
        start = time.perf_counter()
        try:
            result = implied_volatility(
                solver_method,
                pricing_function,
                spot,
                strike,
                rate,
                maturity,
                market_price,
                config=config,
            )
        except DomainError as exc:
            console.print(f"[red]Cannot solve implied volatility: {exc}[/red]")
            raise typer.Exit(code=1) from exc
        results.append((result, _elapsed_ms(start)))

    _render_solver_results(results)
    if not all(result.converged for result, _ in results):
        raise typer.Exit(code=1)


def _resolve_methods(method: str) -> list[SolverMethod]:
    """Expand the --method option into solver methods.

    Raises:
        ValueError: If ``method`` names no registered solver.
    """
    if method == METHOD_ALL:
        return list(SolverMethod)
    return [SolverMethod(method)]


def _solver_config(max_iterations: int | None, tolerance: float | None) -> ToleranceConfig:
    """Environment defaults, overridden by explicit CLI flags.

    Raises:
        ValueError: If the resulting settings fail validation.
    """
    config = ToleranceConfig.from_env()
    overrides: dict[str, int | float] = {}
    if max_iterations is not None:
        overrides["max_iterations"] = max_iterations
    if tolerance is not None:
        overrides["tolerance"] = tolerance
    if overrides:
        config = ToleranceConfig.model_validate(config.model_dump() | overrides)
    logger.debug("Solver config: %s", config)
    return config


# ---------------------------------------------------------------------------
# demo command
# ---------------------------------------------------------------------------


@app.command("demo")
def demo_command(
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Run the reference pricing and implied volatility examples with timings."""
    configure_logging(verbose=verbose, quiet=quiet)
    console.print("[bold]Welcome to the financial modeling program![/bold]\n")
    console.print("[bold underline]Black-Scholes-Merton Option Pricing[/bold underline]\n")

    start = time.perf_counter()
    call_value = price(OptionType.CALL, DEMO_CONTRACT)
    put_value = price(OptionType.PUT, DEMO_CONTRACT)
    elapsed = _elapsed_ms(start)

    _render_contract(DEMO_CONTRACT)
    console.print(f"Non-dividend paying call option valued at: {call_value:.6f}")
    console.print(f"Non-dividend paying put option valued at: {put_value:.6f}")
    console.print(f"[dim]Valuation took {elapsed:.4f} milliseconds.[/dim]\n")

    start = time.perf_counter()
    dividend_call = price(
        OptionType.CALL, DEMO_DIVIDEND_CONTRACT, DEMO_DIVIDEND_AMOUNT, DEMO_DIVIDEND_TIMES
    )
    dividend_put = price(
        OptionType.PUT, DEMO_DIVIDEND_CONTRACT, DEMO_DIVIDEND_AMOUNT, DEMO_DIVIDEND_TIMES
    )
    elapsed = _elapsed_ms(start)

    _render_contract(DEMO_DIVIDEND_CONTRACT)
    console.print(f"Dividend paying call option valued at: {dividend_call:.6f}")
    console.print(f"Dividend paying put option valued at: {dividend_put:.6f}")
    console.print(f"[dim]Valuation took {elapsed:.4f} milliseconds.[/dim]\n")

    console.print(
        "[bold underline]Implied volatility of a "
        f"{DEMO_IV_INPUTS['observed_price']} call[/bold underline]\n"
    )
    results: list[tuple[ImpliedVolResult, float]] = []
    for solver_method in SolverMethod:
        start = time.perf_counter()
        result = implied_volatility(
            solver_method,
            call_price,
            DEMO_IV_INPUTS["spot"],
            DEMO_IV_INPUTS["strike"],
            DEMO_IV_INPUTS["risk_free_rate"],
            DEMO_IV_INPUTS["maturity"],
            DEMO_IV_INPUTS["observed_price"],
        )
        results.append((result, _elapsed_ms(start)))
    _render_solver_results(results)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _render_contract(params: ContractParameters) -> None:
    """Print the contract inputs of a valuation."""
    console.print(f"Initial stock price: {params.spot}")
    console.print(f"Strike price: {params.strike}")
    console.print(f"Riskless rate: {params.risk_free_rate}")
    console.print(f"Volatility of underlying stock: {params.volatility}")
    console.print(f"Time until maturity: {params.maturity}\n")


def _render_solver_results(results: list[tuple[ImpliedVolResult, float]]) -> None:
    """Render implied volatility outcomes as a rich table."""
    table = Table(title="Implied volatility")
    table.add_column("Method", style="bold")
    table.add_column("Status")
    table.add_column("Volatility", justify="right")
    table.add_column("Iterations", justify="right")
    table.add_column("Time (ms)", justify="right")

    for result, elapsed in results:
        color = "green" if result.converged else "red"
        volatility = f"{result.volatility:.6f}" if result.volatility is not None else "-"
        table.add_row(
            result.method.value,
            f"[{color}]{result.status.value}[/{color}]",
            volatility,
            str(result.iterations),
            f"{elapsed:.4f}",
        )

    console.print(table)
    for result, _ in results:
        if not result.converged:
            console.print(f"[yellow]{result.method.value}: {result.message}[/yellow]")
