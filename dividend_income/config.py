"""Static configuration for dividend_income.

The scraper settings and the PSXDIV20 lookup tables live here as immutable
objects that are handed to the refresh pipeline, so tests can inject their own.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

BASE_URL = "https://stockanalysis.com/quote/psx"

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
}

DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_DIR_ENV = "DIVIDEND_INCOME_DATA_DIR"

DATASET_FILE = "stocks.json"
SECTOR_MAP_FILE = "sectorMap.json"
TAX_RATES_FILE = "taxRates.json"

# Seconds
DELAY_BETWEEN_REQUESTS = 2.0
RETRY_DELAY = 5.0
REQUEST_TIMEOUT = 15

RETRY_ATTEMPTS = 3

TICKERS = (
    "ABL", "APL", "BAFL", "BAHL", "EFERT", "ENGRO", "EPCL", "EPQL",
    "FATIMA", "FFC", "HBL", "HMB", "INDU", "ISL", "KAPCO", "MCB",
    "NCL", "POL", "TGL", "UBL",
)

SECTORS = {
    "ABL": "Commercial Banks",
    "APL": "Oil & Gas Marketing",
    "BAFL": "Commercial Banks",
    "BAHL": "Commercial Banks",
    "EFERT": "Fertilizer",
    "ENGRO": "Chemicals",
    "EPCL": "Chemicals",
    "EPQL": "Power Generation",
    "FATIMA": "Fertilizer",
    "FFC": "Fertilizer",
    "HBL": "Commercial Banks",
    "HMB": "Commercial Banks",
    "INDU": "Automobile Assembler",
    "ISL": "Iron & Steel",
    "KAPCO": "Power Generation",
    "MCB": "Commercial Banks",
    "NCL": "Textiles",
    "POL": "Oil & Gas Exploration",
    "TGL": "Glass & Ceramics",
    "UBL": "Commercial Banks",
}

COMPANY_NAMES = {
    "ABL": "Allied Bank Limited",
    "APL": "Attock Petroleum Limited",
    "BAFL": "Bank Alfalah Limited",
    "BAHL": "Bank Al-Habib Limited",
    "EFERT": "Engro Fertilizers Limited",
    "ENGRO": "Engro Corporation Limited",
    "EPCL": "Engro Polymer & Chemicals Limited",
    "EPQL": "Engro Powergen Qadirpur Limited",
    "FATIMA": "Fatima Fertilizer Company Limited",
    "FFC": "Fauji Fertilizer Company Limited",
    "HBL": "Habib Bank Limited",
    "HMB": "Habib Metropolitan Bank Limited",
    "INDU": "Indus Motor Company Limited",
    "ISL": "International Steels Limited",
    "KAPCO": "Kot Addu Power Company Limited",
    "MCB": "MCB Bank Limited",
    "NCL": "Nishat Chunian Limited",
    "POL": "Pakistan Oilfields Limited",
    "TGL": "Tariq Glass Industries Limited",
    "UBL": "United Bank Limited",
}


@dataclass(frozen=True)
class Universe:
    """The tickers to refresh and their descriptive attributes."""

    tickers: Tuple[str, ...] = TICKERS
    names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(COMPANY_NAMES)))
    sectors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(SECTORS)))
    exchange: str = "PSX"
    country: str = "Pakistan"
    currency: str = "PKR"

    def sector_map(self) -> dict:
        """Return ``ticker -> sector`` for every ticker in the universe."""
        return {ticker: self.sectors.get(ticker) for ticker in self.tickers}


@dataclass(frozen=True)
class RefreshSettings:
    base_url: str = BASE_URL
    delay_between_requests: float = DELAY_BETWEEN_REQUESTS
    retry_attempts: int = RETRY_ATTEMPTS
    retry_delay: float = RETRY_DELAY
    timeout: float = REQUEST_TIMEOUT
    data_dir: Path = DATA_DIR

    @property
    def dataset_path(self) -> Path:
        return self.data_dir / DATASET_FILE

    @property
    def sector_map_path(self) -> Path:
        return self.data_dir / SECTOR_MAP_FILE

    @property
    def tax_rates_path(self) -> Path:
        return self.data_dir / TAX_RATES_FILE

    def url_for(self, ticker: str) -> str:
        return f"{self.base_url}/{ticker}/dividend/"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RefreshSettings":
        """Build settings, letting ``DIVIDEND_INCOME_DATA_DIR`` move the data files."""
        environ = os.environ if environ is None else environ
        data_dir = environ.get(DATA_DIR_ENV)
        if data_dir:
            return cls(data_dir=Path(data_dir))
        return cls()
