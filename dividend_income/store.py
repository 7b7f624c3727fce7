"""JSON file handling for dividend_income.

Replaces a database with three flat files: the stock dataset, the sector map
export and the hand-maintained tax rate table.  Writes go to a temporary file
next to the target and are swapped in with ``os.replace`` so a crash never
leaves a half-written dataset behind.
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .models import StockRecord

logger = logging.getLogger(__name__)


def _file_mode(path: Path) -> int:
    """Mode the written file should end up with: the target's, or the umask default."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_json(path: Path, payload: Any) -> None:
    """Atomically replace ``path`` with ``payload`` as indented UTF-8 JSON.

    The replaced file keeps its permissions; a new file gets the usual
    umask-derived ones rather than the private mode of the temporary file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _file_mode(path)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load_stocks(path: Path) -> List[StockRecord]:
    """Load the dataset, or an empty list if there is nothing usable yet."""
    try:
        with Path(path).open(encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as e:
        logger.warning("Could not load existing data from %s (%s), starting fresh", path, e)
        return []
    if not isinstance(raw, list):
        logger.warning("Existing data in %s is not a list of stocks, starting fresh", path)
        return []
    try:
        return [StockRecord.from_dict(item) for item in raw]
    except (KeyError, TypeError, AttributeError) as e:
        logger.warning("Malformed stock record in %s (%r), starting fresh", path, e)
        return []


def save_stocks(path: Path, records: Iterable[StockRecord]) -> None:
    payload = [record.to_dict() for record in records]
    write_json(path, payload)
    logger.info("Saved %d stocks to %s", len(payload), path)


def save_sector_map(path: Path, sector_map: Mapping[str, str]) -> None:
    write_json(path, dict(sector_map))
    logger.info("Saved sector map to %s", path)


def load_tax_rates(path: Path) -> Dict[str, Dict[str, float]]:
    """Country -> ``{"default": percent}``.

    A missing or unreadable file means no tax anywhere, as does any entry that
    is not a ``{"default": percent}`` object.
    """
    try:
        with Path(path).open(encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as e:
        logger.warning("Could not load tax rates from %s (%s), assuming 0%% everywhere", path, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Tax rates in %s are not a country mapping, assuming 0%% everywhere", path)
        return {}
    return {country: entry for country, entry in raw.items() if isinstance(entry, dict)}
