"""Load trade rows from JSON or CSV files into TradeRecords.

Stands in for the persistence layer when the engine runs from the CLI.
JSON files hold either a list of row objects or ``{"trades": [...]}``;
CSV files have one row per trade with a header naming the fields.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..core.errors import TradeLoadError
from .record import TradeRecord

logger = logging.getLogger(__name__)


def records_from_rows(rows: Iterable[Mapping[str, Any]], *, source: str = "rows") -> list[TradeRecord]:
    trades = []
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise TradeLoadError(source, f"row {i} is not an object")
        try:
            trades.append(TradeRecord.from_row(row))
        except TradeLoadError as exc:
            raise TradeLoadError(source, f"row {i}: {exc.reason}") from exc
    return trades


def _read_json(path: Path) -> list[Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TradeLoadError(str(path), f"invalid JSON ({exc.msg})") from exc
    if isinstance(payload, Mapping):
        payload = payload.get("trades")
    if not isinstance(payload, list):
        raise TradeLoadError(str(path), "expected a list of trades")
    return payload


def _read_csv(path: Path) -> list[dict[str, str]]:
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def load_trades(path: str | Path) -> list[TradeRecord]:
    """Read a ``.json`` or ``.csv`` trade file.

    Raises:
        TradeLoadError: The file is missing, unreadable, malformed, or has
            an unsupported extension.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".json", ".csv"):
        raise TradeLoadError(str(path), f"unsupported file type {suffix or '(none)'!r}")

    try:
        rows = _read_json(path) if suffix == ".json" else _read_csv(path)
    except OSError as exc:
        raise TradeLoadError(str(path), exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise TradeLoadError(str(path), "file is not UTF-8 text") from exc

    trades = records_from_rows(rows, source=str(path))
    logger.info("loaded %d trades from %s", len(trades), path)
    return trades
