"""Command‑line interface for dividend_income.

Provides sub‑commands to refresh the PSX dividend dataset, compare projected
dividend income across stocks, and run the interest and loan calculators.
"""

import logging

import click
import pandas as pd
from tabulate import tabulate

from . import __version__
from . import calculators
from . import fetch
from . import store
from . import utils
from .config import DATA_DIR, TAX_RATES_FILE, RefreshSettings, Universe
from .query import (
    ALL_COUNTRIES,
    ALL_SECTORS,
    DEFAULT_INVESTMENT,
    PresentationState,
    SortKey,
    build_view,
    country_options,
    parse_investment_amount,
    sector_options,
)


@click.group()
@click.version_option(version=__version__, prog_name="dividend-income")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose):
    """PSX Dividend Income Calculator & Financial Calculators CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _tax_rates(settings: RefreshSettings):
    path = settings.tax_rates_path
    if not path.exists():
        path = DATA_DIR / TAX_RATES_FILE
    return store.load_tax_rates(path)


@main.command()
def update():
    """Scrape current dividend figures and rewrite the stock dataset."""
    settings = RefreshSettings.from_env()
    universe = Universe()

    click.echo("=" * 60)
    click.echo("PSXDIV20 Stock Data Updater")
    click.echo("=" * 60)
    click.echo(f"Stocks to update: {len(universe.tickers)}")
    click.echo(f"Delay between requests: {settings.delay_between_requests}s\n")

    try:
        result = fetch.run_update(settings, universe, progress=True)
    except OSError as e:
        raise click.ClickException(f"Could not write dataset: {e}")

    click.echo("\n" + "=" * 60)
    click.echo("Update Summary")
    click.echo("=" * 60)
    click.echo(f"Total stocks: {len(universe.tickers)}")
    click.echo(f"Successfully updated: {len(result.updated)}")
    click.echo(f"Failed (using existing data): {len(result.fallback)}")
    click.echo(f"Failed (no data available): {len(result.omitted)}")
    if result.failed:
        click.echo(f"\nFailed stocks: {', '.join(result.failed)}")
    click.echo(f"Saved {len(result.records)} stocks to {settings.dataset_path}")


def _amount(ctx, param, value):
    if value is None:
        return DEFAULT_INVESTMENT
    amount = parse_investment_amount(value)
    if amount is None:
        raise click.BadParameter("must be a number between 10,000 and 10,000,000,000")
    return amount


def _income_row(view) -> dict:
    stock, income = view.record, view.income
    return {
        "Ticker": stock.ticker,
        "Name": stock.name,
        "Yield (%)": stock.dividend.yield_ttm,
        "Price": stock.current_price,
        "Monthly": income.monthly_before_tax,
        "Quarterly": income.quarterly_before_tax,
        "Annual": income.annual_before_tax,
        "Annual After Tax": income.annual_after_tax,
    }


def _echo_details(view) -> None:
    stock, income = view.record, view.income

    def fmt(amount):
        return utils.format_currency(amount, stock.currency or "PKR")

    def pct(value):
        return "N/A" if value is None else f"{value:.2f}%"

    click.echo(f"\n--- {stock.name} ({stock.ticker}) ---")
    click.echo(f"{stock.sector} • {stock.exchange} • {stock.country}")
    click.echo(
        f"Yield TTM: {pct(stock.dividend.yield_ttm)} | Last Year: {pct(stock.dividend.yield_last_year)}"
    )
    rows = [
        ("Monthly", fmt(income.monthly_before_tax), fmt(income.monthly_after_tax)),
        ("Quarterly", fmt(income.quarterly_before_tax), fmt(income.quarterly_after_tax)),
        ("Annually", fmt(income.annual_before_tax), fmt(income.annual_after_tax)),
    ]
    click.echo(tabulate(rows, headers=["Period", "Before Tax", "After Tax"], tablefmt="simple"))
    click.echo(f"Tax Rate: {income.tax_rate}% ({stock.country})")


@main.command()
@click.option("--amount", callback=_amount, help="Investment amount in PKR (default 100,000).")
@click.option("--query", default="", help="Search by ticker or company name.")
@click.option("--country", default=ALL_COUNTRIES, show_default=True, help="Only show this country.")
@click.option("--sector", default=ALL_SECTORS, show_default=True, help="Only show this sector.")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([k.value for k in SortKey]),
    default=SortKey.YIELD.value,
    show_default=True,
    help="Sort order.",
)
@click.option("--expand", multiple=True, help="Show the income breakdown for a ticker (repeatable).")
@click.option("--options", "show_options", is_flag=True, help="List the available countries and sectors.")
def dividends(amount, query, country, sector, sort_key, expand, show_options):
    """Compare projected dividend income across stocks."""
    settings = RefreshSettings.from_env()
    stocks = store.load_stocks(settings.dataset_path)
    if not stocks:
        click.echo("No data found. Try running 'update' first.")
        return

    if show_options:
        click.echo("Countries: " + ", ".join(country_options(stocks)))
        click.echo("Sectors:   " + ", ".join(sector_options(stocks)))
        return

    state = PresentationState(
        investment_amount=amount,
        query=query,
        country=country,
        sector=sector,
        sort_key=SortKey(sort_key),
    )
    for ticker in expand:
        state = state.toggle_expanded(ticker.upper())

    views = build_view(stocks, state, _tax_rates(settings))
    click.echo(f"Investment: {utils.format_currency(amount)} | Sort: {state.sort_key.label}")
    click.echo(f"Showing {len(views)} stock{'' if len(views) == 1 else 's'}\n")
    if not views:
        click.echo("No stocks found matching your criteria.")
        click.echo("Try adjusting your search or filters.")
        return

    df = pd.DataFrame([_income_row(v) for v in views])
    for col in ("Monthly", "Quarterly", "Annual", "Annual After Tax"):
        df[col] = df[col].map(lambda v: "N/A" if pd.isna(v) else f"{v:,.0f}")
    for col in ("Yield (%)", "Price"):
        df[col] = df[col].map(lambda v: "N/A" if pd.isna(v) else f"{v:.2f}")
    click.echo(tabulate(df, headers="keys", tablefmt="grid", showindex=False, disable_numparse=True))

    for view in views:
        if view.expanded:
            _echo_details(view)


@main.command()
@click.option("--principal", type=float, default=10000, show_default=True)
@click.option("--rate", type=float, default=5, show_default=True, help="Interest rate (% per year).")
@click.option("--years", type=float, default=1, show_default=True)
def simple(principal, rate, years):
    """Simple Interest = (Principal × Rate × Time) / 100."""
    try:
        result = calculators.simple_interest(principal, rate, years)
    except ValueError as e:
        raise click.BadParameter(str(e))
    click.echo(f"Simple Interest: {result.interest:,.2f}")
    click.echo(f"Total Amount:    {result.total_amount:,.2f}")


@main.command()
@click.option("--principal", type=float, default=10000, show_default=True)
@click.option("--rate", type=float, default=5, show_default=True, help="Annual interest rate (%).")
@click.option("--years", type=float, default=5, show_default=True)
@click.option(
    "--frequency",
    type=click.Choice([str(n) for n in calculators.COMPOUNDING_FREQUENCIES]),
    default="12",
    show_default=True,
    help="Compounding periods per year.",
)
def compound(principal, rate, years, frequency):
    """A = P(1 + r/n)^(nt) where n is the compounding frequency."""
    n = int(frequency)
    try:
        result = calculators.compound_interest(principal, rate, years, n)
    except ValueError as e:
        raise click.BadParameter(str(e))
    click.echo(f"Compounding:     {calculators.COMPOUNDING_FREQUENCIES[n]}")
    click.echo(f"Compound Interest: {result.interest:,.2f}")
    click.echo(f"Total Amount:    {result.total_amount:,.2f}")


@main.command()
@click.option("--amount", type=float, default=100000, show_default=True, help="Loan amount.")
@click.option("--rate", type=float, default=7, show_default=True, help="Interest rate (% per year).")
@click.option("--years", type=float, default=20, show_default=True, help="Loan tenure in years.")
def loan(amount, rate, years):
    """Monthly EMI and total interest on a loan."""
    try:
        result = calculators.loan_emi(amount, rate, years)
    except ValueError as e:
        raise click.BadParameter(str(e))
    click.echo(tabulate(
        [
            ("Monthly EMI", f"{result.emi:,.2f}"),
            ("Total Interest", f"{result.total_interest:,.2f}"),
            ("Total Payment", f"{result.total_payment:,.2f}"),
        ],
        tablefmt="simple",
    ))


if __name__ == "__main__":
    main()
