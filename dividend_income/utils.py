"""Utility functions for dividend calculations.

Provides:
* derive_price – back out the share price from payout and yield.
* derive_last_year_yield – approximate the previous year's yield.
* project_income – income from an investment, before and after withholding tax.
"""

import math
from dataclasses import dataclass
from typing import Mapping, Optional

from .models import StockRecord

LAST_YEAR_YIELD_FACTOR = 0.95


def round2(value: float) -> float:
    return round(value, 2)


def _is_usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def derive_price(annual_payout: Optional[float], yield_ttm: Optional[float]) -> Optional[float]:
    """Price implied by ``annual_payout`` and a percentage yield.

    The vendor page only shows payout and yield, so the price is derived, never
    observed.  Returns ``None`` when either input is missing or the yield is 0.
    """
    if not annual_payout or not yield_ttm:
        return None
    return round2(annual_payout / yield_ttm * 100)


def derive_last_year_yield(yield_ttm: Optional[float], growth: Optional[float] = None) -> Optional[float]:
    """Approximate last year's yield.

    With a 1Y dividend growth figure the TTM yield is deflated by it; without
    one it falls back to 95% of the TTM yield.
    """
    if not yield_ttm:
        return None
    if growth is not None and growth != -100:
        return round2(yield_ttm / (1 + growth / 100))
    return round2(yield_ttm * LAST_YEAR_YIELD_FACTOR)


def tax_rate_for(country: str, tax_rates: Mapping[str, Mapping[str, float]]) -> float:
    """Default withholding percentage for ``country``; unknown countries pay 0."""
    entry = tax_rates.get(country) or {}
    return entry.get("default") or 0


@dataclass(frozen=True)
class IncomeProjection:
    """Income figures for one stock at a given investment amount.

    Every amount is ``None`` when the stock has no usable price or payout.
    Periods are calendar averages of the annual figure, whatever the actual
    payment frequency is.
    """

    tax_rate: float
    shares_owned: Optional[float] = None
    annual_before_tax: Optional[float] = None
    quarterly_before_tax: Optional[float] = None
    monthly_before_tax: Optional[float] = None
    annual_after_tax: Optional[float] = None
    quarterly_after_tax: Optional[float] = None
    monthly_after_tax: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.shares_owned is not None


def project_income(
    record: StockRecord,
    investment_amount: float,
    tax_rates: Mapping[str, Mapping[str, float]],
) -> IncomeProjection:
    tax_rate = tax_rate_for(record.country, tax_rates)
    payout = record.dividend.annual_payout_ttm
    if not _is_usable(record.current_price) or payout is None or not math.isfinite(payout):
        return IncomeProjection(tax_rate=tax_rate)

    shares = investment_amount / record.current_price
    annual = shares * payout
    monthly = annual / 12
    quarterly = annual / 4
    keep = 1 - tax_rate / 100

    return IncomeProjection(
        tax_rate=tax_rate,
        shares_owned=shares,
        annual_before_tax=annual,
        quarterly_before_tax=quarterly,
        monthly_before_tax=monthly,
        annual_after_tax=annual * keep,
        quarterly_after_tax=quarterly * keep,
        monthly_after_tax=monthly * keep,
    )


def format_currency(amount: Optional[float], currency: str = "PKR") -> str:
    """``PKR 1,234`` style amount, rounded to whole units; ``N/A`` when absent."""
    if amount is None or not math.isfinite(amount):
        return "N/A"
    return f"{currency} {amount:,.0f}"
