"""Data fetching utilities for dividend_income.

Scrapes the stockanalysis.com dividend page of every PSX ticker, one at a time,
and merges the results with the previous dataset so a failed ticker keeps its
last known figures.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

import requests
from tqdm import tqdm

from . import store
from .config import HEADERS, RefreshSettings, Universe
from .extract import extract
from .models import DividendInfo, StockRecord, utc_timestamp
from .utils import derive_last_year_yield, derive_price

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


class FetchError(Exception):
    """A ticker could not be fetched or parsed."""


class ExtractionError(FetchError):
    """The page was fetched but the essential dividend figures were missing."""


@dataclass
class RefreshResult:
    records: List[StockRecord] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    fallback: List[str] = field(default_factory=list)
    omitted: List[str] = field(default_factory=list)

    @property
    def failed(self) -> List[str]:
        return self.fallback + self.omitted


def fetch_page(ticker: str, settings: RefreshSettings, session: requests.Session) -> str:
    """GET the dividend page for ``ticker`` and return its HTML."""
    response = session.get(settings.url_for(ticker), headers=HEADERS, timeout=settings.timeout)
    response.raise_for_status()
    return response.text


def build_record(ticker: str, html: str, universe: Universe) -> StockRecord:
    """Turn a dividend page into a record, deriving price and last-year yield."""
    fields = extract(html)
    if not fields.annual_payout or not fields.yield_ttm:
        raise ExtractionError("Missing essential dividend data")

    dividend = DividendInfo(
        annual_payout_ttm=fields.annual_payout,
        yield_ttm=fields.yield_ttm,
        yield_last_year=derive_last_year_yield(fields.yield_ttm, fields.growth_1y),
        frequency=fields.frequency or "annual",
    )
    return StockRecord(
        ticker=ticker,
        name=universe.names.get(ticker, ticker),
        sector=universe.sectors.get(ticker, ""),
        country=universe.country,
        currency=universe.currency,
        exchange=universe.exchange,
        current_price=derive_price(dividend.annual_payout_ttm, dividend.yield_ttm),
        dividend=dividend,
        last_updated=utc_timestamp(),
    )


def fetch_stock(
    ticker: str,
    settings: RefreshSettings,
    universe: Universe,
    session: requests.Session,
    sleep: Sleep = time.sleep,
) -> Optional[StockRecord]:
    """Fetch one ticker, retrying on any failure.  ``None`` once attempts run out."""
    for attempt in range(1, settings.retry_attempts + 1):
        logger.debug("Fetching %s (attempt %d/%d)", ticker, attempt, settings.retry_attempts)
        try:
            html = fetch_page(ticker, settings, session)
            record = build_record(ticker, html, universe)
        except (requests.RequestException, FetchError) as e:
            logger.warning("Failed to fetch %s: %s", ticker, e)
            if attempt < settings.retry_attempts:
                logger.debug("Retrying %s in %ss", ticker, settings.retry_delay)
                sleep(settings.retry_delay)
            continue
        logger.info(
            "Fetched %s: %s%% yield, %s", ticker, record.dividend.yield_ttm, record.dividend.frequency
        )
        return record

    logger.error("Skipping %s after %d attempts", ticker, settings.retry_attempts)
    return None


def refresh(
    settings: RefreshSettings,
    universe: Universe,
    previous: Iterable[StockRecord] = (),
    session: Optional[requests.Session] = None,
    sleep: Sleep = time.sleep,
    progress: bool = False,
) -> RefreshResult:
    """Fetch every ticker in ``universe`` and merge with ``previous``.

    Tickers are processed strictly in order with a pause between them.  The
    returned records are sorted by ticker.  Without a ``session`` one is
    opened for the run and closed afterwards.
    """
    if session is None:
        with requests.Session() as own_session:
            return refresh(settings, universe, previous, own_session, sleep, progress)

    previous_by_ticker: Dict[str, StockRecord] = {r.ticker: r for r in previous}
    result = RefreshResult()

    tickers = universe.tickers
    iterator = tqdm(tickers, desc="Updating data") if progress else tickers
    last = len(tickers) - 1

    for i, ticker in enumerate(iterator):
        record = fetch_stock(ticker, settings, universe, session, sleep)
        if record is not None:
            result.records.append(record)
            result.updated.append(ticker)
        elif ticker in previous_by_ticker:
            logger.info("Using existing data for %s", ticker)
            result.records.append(previous_by_ticker[ticker])
            result.fallback.append(ticker)
        else:
            result.omitted.append(ticker)

        if i < last:
            sleep(settings.delay_between_requests)

    result.records.sort(key=lambda r: r.ticker)
    return result


def run_update(
    settings: RefreshSettings,
    universe: Universe,
    session: Optional[requests.Session] = None,
    sleep: Sleep = time.sleep,
    progress: bool = False,
) -> RefreshResult:
    """Refresh the dataset file and rewrite the sector map."""
    previous = store.load_stocks(settings.dataset_path)
    result = refresh(settings, universe, previous, session=session, sleep=sleep, progress=progress)
    store.save_stocks(settings.dataset_path, result.records)
    store.save_sector_map(settings.sector_map_path, universe.sector_map())
    return result
