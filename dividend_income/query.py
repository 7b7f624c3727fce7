"""Filtering, sorting and the view model for the dividend calculator.

``build_view`` is a pure function of the records, the presentation state and
the tax table, and is recomputed in full whenever any of them changes.
"""

import unicodedata
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from .models import StockRecord
from .utils import IncomeProjection, project_income

ALL_COUNTRIES = "All Countries"
ALL_SECTORS = "All Sectors"

DEFAULT_INVESTMENT = 100000
MIN_INVESTMENT = 10000
MAX_INVESTMENT = 10000000000


class SortKey(str, Enum):
    YIELD = "yield"
    MONTHLY = "monthly"
    ANNUAL = "annual"
    NAME = "name"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    SortKey.YIELD: "Highest Dividend Yield",
    SortKey.MONTHLY: "Highest Monthly Payout",
    SortKey.ANNUAL: "Highest Annual Payout",
    SortKey.NAME: "Stock Name (A-Z)",
}


@dataclass(frozen=True)
class PresentationState:
    investment_amount: float = DEFAULT_INVESTMENT
    query: str = ""
    country: str = ALL_COUNTRIES
    sector: str = ALL_SECTORS
    sort_key: SortKey = SortKey.YIELD
    expanded: FrozenSet[str] = frozenset()

    def toggle_expanded(self, ticker: str) -> "PresentationState":
        return replace(self, expanded=self.expanded ^ {ticker})


@dataclass(frozen=True)
class StockView:
    record: StockRecord
    income: IncomeProjection
    expanded: bool = False


def parse_investment_amount(text: str) -> Optional[float]:
    """Parse a typed amount such as ``1,000,000``; ``None`` if invalid or out of range."""
    try:
        amount = float(str(text).replace(",", "").strip())
    except ValueError:
        return None
    if not MIN_INVESTMENT <= amount <= MAX_INVESTMENT:
        return None
    return amount


def _options(values: Iterable[str], sentinel: str) -> List[str]:
    return [sentinel] + sorted(set(values))


def country_options(records: Sequence[StockRecord]) -> List[str]:
    return _options((r.country for r in records), ALL_COUNTRIES)


def sector_options(records: Sequence[StockRecord]) -> List[str]:
    return _options((r.sector for r in records), ALL_SECTORS)


def filter_stocks(
    records: Sequence[StockRecord],
    query: str = "",
    country: str = ALL_COUNTRIES,
    sector: str = ALL_SECTORS,
) -> List[StockRecord]:
    """Keep records matching every active filter.

    ``query`` is a case-insensitive substring of the ticker or the name; empty
    values and the "All ..." sentinels switch a filter off.
    """
    needle = query.lower()
    out = []
    for record in records:
        if needle and needle not in record.ticker.lower() and needle not in record.name.lower():
            continue
        if country and country != ALL_COUNTRIES and record.country != country:
            continue
        if sector and sector != ALL_SECTORS and record.sector != sector:
            continue
        out.append(record)
    return out


def name_sort_key(name: str) -> str:
    """Case and accent insensitive collation key."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _stable_sort(
    records: Sequence[StockRecord],
    value: Callable[[StockRecord], Optional[float]],
    descending: bool,
) -> List[StockRecord]:
    # Records without a value go last, in input order.
    present = [r for r in records if value(r) is not None]
    missing = [r for r in records if value(r) is None]
    return sorted(present, key=value, reverse=descending) + missing


def sort_stocks(
    records: Sequence[StockRecord],
    sort_key: SortKey = SortKey.YIELD,
    investment_amount: float = DEFAULT_INVESTMENT,
    tax_rates: Optional[Mapping[str, Mapping[str, float]]] = None,
) -> List[StockRecord]:
    """Stable sort; ties keep the input order."""
    sort_key = SortKey(sort_key)
    tax_rates = tax_rates or {}

    if sort_key is SortKey.NAME:
        return sorted(records, key=lambda r: name_sort_key(r.name))
    if sort_key is SortKey.YIELD:
        return _stable_sort(records, lambda r: r.dividend.yield_ttm, descending=True)

    # Income ordering depends on the investment amount, so it is recomputed here.
    incomes = {id(r): project_income(r, investment_amount, tax_rates) for r in records}
    if sort_key is SortKey.MONTHLY:
        return _stable_sort(records, lambda r: incomes[id(r)].monthly_before_tax, descending=True)
    return _stable_sort(records, lambda r: incomes[id(r)].annual_before_tax, descending=True)


def build_view(
    records: Sequence[StockRecord],
    state: PresentationState,
    tax_rates: Mapping[str, Mapping[str, float]],
) -> List[StockView]:
    filtered = filter_stocks(records, state.query, state.country, state.sector)
    ordered = sort_stocks(filtered, state.sort_key, state.investment_amount, tax_rates)
    return [
        StockView(
            record=r,
            income=project_income(r, state.investment_amount, tax_rates),
            expanded=r.ticker in state.expanded,
        )
        for r in ordered
    ]
