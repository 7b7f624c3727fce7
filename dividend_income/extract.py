"""Pull dividend figures out of a stockanalysis.com dividend page.

The page has no stable schema, so this is plain pattern matching over the HTML
text.  Everything else in the package only sees :class:`ExtractedFields`.
"""

import re
from dataclasses import dataclass
from typing import Optional

_NUMBER = r"(\d[\d,]*\.?\d*)"

ANNUAL_DIVIDEND_RE = re.compile(r"Annual Dividend[:\s]*" + _NUMBER + r"\s*PKR", re.IGNORECASE)
DIVIDEND_YIELD_RE = re.compile(r"Dividend Yield[:\s]*" + _NUMBER + r"%", re.IGNORECASE)
FREQUENCY_RE = re.compile(
    r"Payment Frequency[:\s]*(Semi-Annual|Annual|Quarterly|Monthly)", re.IGNORECASE
)
GROWTH_RE = re.compile(r"Dividend Growth \(1Y\)[:\s]*(-?\d[\d,]*\.?\d*)%", re.IGNORECASE)


@dataclass
class ExtractedFields:
    annual_payout: Optional[float] = None
    yield_ttm: Optional[float] = None
    frequency: Optional[str] = None
    growth_1y: Optional[float] = None


def _to_float(text: str) -> float:
    return float(text.replace(",", ""))


def _match_number(pattern: "re.Pattern", html: str) -> Optional[float]:
    match = pattern.search(html)
    if not match:
        return None
    try:
        return _to_float(match.group(1))
    except ValueError:
        return None


def normalize_frequency(label: str) -> str:
    """``Semi-Annual`` -> ``semiannual``, ``Quarterly`` -> ``quarterly``."""
    return label.lower().replace("-", "")


def extract(html: str) -> ExtractedFields:
    """Return whatever dividend fields can be found in ``html``.

    Missing fields are left as ``None``; deciding whether that is fatal is up to
    the caller.
    """
    fields = ExtractedFields(
        annual_payout=_match_number(ANNUAL_DIVIDEND_RE, html),
        yield_ttm=_match_number(DIVIDEND_YIELD_RE, html),
        growth_1y=_match_number(GROWTH_RE, html),
    )
    freq = FREQUENCY_RE.search(html)
    if freq:
        fields.frequency = normalize_frequency(freq.group(1))
    return fields
