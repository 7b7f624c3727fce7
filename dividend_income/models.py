"""Record types shared by the refresh and presentation pipelines.

The dataset file uses camelCase keys shared with the web front end, so the
records convert explicitly with ``to_dict``/``from_dict``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T10:00:00.000Z``."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class DividendInfo:
    annual_payout_ttm: Optional[float] = None
    yield_ttm: Optional[float] = None
    yield_last_year: Optional[float] = None
    frequency: str = "annual"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "yieldTTM": self.yield_ttm,
            "yieldLastYear": self.yield_last_year,
            "annualPayoutTTM": self.annual_payout_ttm,
            "frequency": self.frequency,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DividendInfo":
        return cls(
            annual_payout_ttm=data.get("annualPayoutTTM"),
            yield_ttm=data.get("yieldTTM"),
            yield_last_year=data.get("yieldLastYear"),
            frequency=data.get("frequency") or "annual",
        )


@dataclass
class StockRecord:
    """One row of the dataset file, keyed by ``ticker``."""

    ticker: str
    name: str
    sector: str
    country: str
    currency: str
    exchange: str
    current_price: Optional[float] = None
    dividend: DividendInfo = field(default_factory=DividendInfo)
    last_updated: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "name": self.name,
            "exchange": self.exchange,
            "country": self.country,
            "currency": self.currency,
            "sector": self.sector,
            "currentPrice": self.current_price,
            "dividend": self.dividend.to_dict(),
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StockRecord":
        return cls(
            ticker=data["ticker"],
            name=data.get("name", ""),
            sector=data.get("sector", ""),
            country=data.get("country", ""),
            currency=data.get("currency", ""),
            exchange=data.get("exchange", ""),
            current_price=data.get("currentPrice"),
            dividend=DividendInfo.from_dict(data.get("dividend") or {}),
            last_updated=data.get("lastUpdated"),
        )
