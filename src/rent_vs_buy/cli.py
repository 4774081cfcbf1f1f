from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from typing import Dict, List, NoReturn, Optional, Tuple

import typer

from .data_sources import CensusACSClient, HMDAClient, LocationDataAssembler
from .model import compare_scenarios
from .query import ScenarioQuery, from_query_string, to_query_string
from .schemas import DEFAULT_YEARS, ComparisonResult, ScenarioInputs
from .validation import InvalidScenarioError, build_inputs, validate_inputs

app = typer.Typer(help="Compare building net worth by buying a home versus renting.")


def _default_census_key() -> Optional[str]:
    return os.environ.get("CENSUS_API_KEY")


def _default_hmda_table() -> str:
    return os.environ.get("HMDA_TABLE", "bigquery-public-data.hmda.hmda_2023")


def _default_years() -> Optional[int]:
    value = os.environ.get("RENT_VS_BUY_YEARS")
    return int(value) if value else None


# Rates are given in percent, as on the web form.
PRICE = typer.Option(None, "--price", help="Purchase price in dollars.")
DOWN = typer.Option(None, "--down", help="Down payment, % of price.")
RATE = typer.Option(None, "--rate", help="Mortgage rate, annual %.")
RENT = typer.Option(None, "--rent", help="Current monthly rent in dollars.")
APPRECIATION = typer.Option(None, "--appreciation", help="Home appreciation, annual %.")
RENT_GROWTH = typer.Option(None, "--rent-growth", help="Rent growth, annual %.")
YEARS = typer.Option(
    default_factory=_default_years,
    help="Projection horizon in years (env RENT_VS_BUY_YEARS; default 10).",
)
QUERY = typer.Option(
    None, "--query", help="Load a shared scenario, e.g. 'price=900000&down=25'."
)
INVESTMENT_RETURN = typer.Option(7.0, help="Renter's investment return, annual %.")
PROPERTY_TAX = typer.Option(1.15, help="Property tax rate, % of assessed value.")
HOA = typer.Option(0.0, help="Monthly HOA dues in dollars.")
MAINTENANCE = typer.Option(1.0, help="Maintenance, annual % of home value.")
CLOSING_COST = typer.Option(2.5, help="Closing costs, % of purchase price.")
SELLING_COST = typer.Option(6.0, help="Selling costs, % of sale price.")
INSURANCE = typer.Option(
    0.0, help="Annual insurance premium in dollars (0 = 0.35% of home value)."
)
VERBOSE = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _advanced(
    investment_return: float,
    property_tax: float,
    hoa: float,
    maintenance: float,
    closing_cost: float,
    selling_cost: float,
    insurance: float,
) -> Dict[str, float]:
    return {
        "investment_return_rate": investment_return / 100.0,
        "property_tax_rate": property_tax / 100.0,
        "hoa_monthly": hoa,
        "maintenance_rate": maintenance / 100.0,
        "closing_cost_rate": closing_cost / 100.0,
        "selling_cost_rate": selling_cost / 100.0,
        "insurance_annual": insurance,
    }


def _collect_inputs(
    query: Optional[str],
    overrides: Dict[str, Optional[float]],
    years: Optional[int],
    advanced: Dict[str, float],
) -> Tuple[ScenarioInputs, int]:
    scenario = from_query_string(query) if query else ScenarioQuery()
    for name, value in overrides.items():
        if value is not None:
            setattr(scenario, name, value)
    if years is not None:
        scenario.years = years
    _check_years(scenario.years_or_default)

    form = scenario.form_values()
    try:
        inputs = build_inputs(
            form["purchase_price"],
            form["down_payment_percent"],
            form["mortgage_rate_pct"],
            form["monthly_rent"],
            form["home_appreciation_pct"],
            form["rent_growth_pct"],
            **advanced,
        )
    except InvalidScenarioError as exc:
        _fail(exc.errors)
    return inputs, scenario.years_or_default


def _check_years(years: int) -> None:
    if years < 0:
        raise typer.BadParameter("years must be zero or positive", param_hint="--years")


def _fail(errors: List[str]) -> NoReturn:
    for message in errors:
        typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=2)


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def _report(result: ComparisonResult, as_json: bool) -> None:
    if as_json:
        payload = {
            "inputs": asdict(result.inputs),
            "monthly_mortgage_payment": result.monthly_mortgage_payment,
            "crossover_year": result.crossover_year,
            "better_option": result.better_option,
            "records": [asdict(record) for record in result.records],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    inputs = result.inputs
    last = result.final_record
    typer.echo(f"Purchase price: {_money(inputs.purchase_price)}")
    typer.echo(f"Down payment: {_money(inputs.down_payment)}")
    typer.echo(f"Monthly mortgage payment (P&I): {_money(result.monthly_mortgage_payment)}")
    typer.echo(f"Starting rent: {_money(inputs.monthly_rent)}/month")
    typer.echo("")
    typer.echo(f"{'Year':>4}  {'Buy':>14}  {'Rent':>14}")
    for record in result.records:
        typer.echo(
            f"{record.year:>4}  {_money(record.buy_net_worth):>14}  "
            f"{_money(record.rent_net_worth):>14}"
        )
    typer.echo("")
    typer.echo(f"Net worth after {result.years} years, buying: {_money(last.buy_net_worth)}")
    typer.echo(f"Net worth after {result.years} years, renting: {_money(last.rent_net_worth)}")
    typer.echo(f"Better outcome: {result.better_option}")

    if result.crossover_year is not None:
        typer.echo(f"Buying pulls ahead after ~{result.crossover_year:.1f} years")
    elif result.buy_leads_from_start:
        typer.echo("Buying leads from day one.")
    else:
        dominant = "Renting" if last.rent_net_worth >= last.buy_net_worth else "Buying"
        typer.echo(f"No crossover: {dominant} stays ahead over the whole horizon.")


@app.command()
def simulate(
    price: Optional[float] = PRICE,
    down: Optional[float] = DOWN,
    rate: Optional[float] = RATE,
    rent: Optional[float] = RENT,
    appreciation: Optional[float] = APPRECIATION,
    rent_growth: Optional[float] = RENT_GROWTH,
    years: Optional[int] = YEARS,
    query: Optional[str] = QUERY,
    investment_return: float = INVESTMENT_RETURN,
    property_tax: float = PROPERTY_TAX,
    hoa: float = HOA,
    maintenance: float = MAINTENANCE,
    closing_cost: float = CLOSING_COST,
    selling_cost: float = SELLING_COST,
    insurance: float = INSURANCE,
    as_json: bool = typer.Option(False, "--json", help="Dump yearly records as JSON."),
    verbose: bool = VERBOSE,
) -> None:
    """
    Project buy vs. rent net worth and report where buying pulls ahead.
    """
    _configure_logging(verbose)
    inputs, horizon = _collect_inputs(
        query,
        {
            "purchase_price": price,
            "down_payment_percent": down,
            "mortgage_rate_pct": rate,
            "monthly_rent": rent,
            "home_appreciation_pct": appreciation,
            "rent_growth_pct": rent_growth,
        },
        years,
        _advanced(
            investment_return, property_tax, hoa, maintenance,
            closing_cost, selling_cost, insurance,
        ),
    )
    _report(compare_scenarios(inputs, horizon), as_json)


@app.command()
def share(
    price: Optional[float] = PRICE,
    down: Optional[float] = DOWN,
    rate: Optional[float] = RATE,
    rent: Optional[float] = RENT,
    appreciation: Optional[float] = APPRECIATION,
    rent_growth: Optional[float] = RENT_GROWTH,
    years: Optional[int] = YEARS,
    query: Optional[str] = QUERY,
) -> None:
    """
    Print the query string that reproduces this scenario.
    """
    scenario = from_query_string(query) if query else ScenarioQuery()
    for name, value in (
        ("purchase_price", price),
        ("down_payment_percent", down),
        ("mortgage_rate_pct", rate),
        ("monthly_rent", rent),
        ("home_appreciation_pct", appreciation),
        ("rent_growth_pct", rent_growth),
        ("years", years),
    ):
        if value is not None:
            setattr(scenario, name, value)
    typer.echo(to_query_string(scenario))


@app.command("cbsa")
def from_cbsa(
    cbsa: str = typer.Argument(..., help="CBSA code, e.g., 31080 for Los Angeles."),
    acs_year: int = typer.Option(2023, help="ACS vintage to query."),
    hmda_year: int = typer.Option(2023, help="HMDA filing year to query."),
    census_api_key: Optional[str] = typer.Option(
        default_factory=_default_census_key,
        help="Census API key (env CENSUS_API_KEY if omitted).",
    ),
    hmda_table: str = typer.Option(
        default_factory=_default_hmda_table,
        help="Fully-qualified HMDA BigQuery table.",
    ),
    gcp_project: Optional[str] = typer.Option(
        None, help="GCP project for the BigQuery client (defaults to env)."
    ),
    appreciation: float = typer.Option(3.0, help="Home appreciation, annual %."),
    rent_growth: float = typer.Option(3.0, help="Rent growth, annual %."),
    years: Optional[int] = YEARS,
    investment_return: float = INVESTMENT_RETURN,
    as_json: bool = typer.Option(False, "--json", help="Dump yearly records as JSON."),
    verbose: bool = VERBOSE,
) -> None:
    """
    Fetch ACS + HMDA data for the CBSA, build defaults, and compare.
    """
    _configure_logging(verbose)
    horizon = DEFAULT_YEARS if years is None else years
    _check_years(horizon)
    acs_client = CensusACSClient(api_key=census_api_key)
    hmda_client = HMDAClient(table=hmda_table, project=gcp_project)
    assembler = LocationDataAssembler(acs_client=acs_client, hmda_client=hmda_client)
    defaults = assembler.build_defaults(cbsa, acs_year=acs_year, hmda_year=hmda_year)

    inputs = defaults.to_scenario_inputs(
        home_appreciation_rate=appreciation / 100.0,
        rent_growth_rate=rent_growth / 100.0,
        investment_return_rate=investment_return / 100.0,
    )
    errors = validate_inputs(inputs)
    if errors:
        _fail(errors)

    if not as_json:
        typer.echo(f"Location: {defaults.name} (CBSA {defaults.cbsa})")
        typer.echo(f"Median income: {_money(defaults.median_income)}")
        typer.echo(f"Mortgage rate: {defaults.interest_rate:.2f}%")
        typer.echo(f"Property tax rate: {inputs.property_tax_rate:.2%}")
        typer.echo("")
    _report(compare_scenarios(inputs, horizon), as_json)


if __name__ == "__main__":
    app()
