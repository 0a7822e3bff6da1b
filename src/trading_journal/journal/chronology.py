"""Placing trades in time: trailing-window filter and chronological sort.

Both helpers rely on :func:`resolve_trade_date`.  Neither reads the wall
clock; the reference instant is always passed in by the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from .record import TradeRecord, resolve_trade_date

logger = logging.getLogger(__name__)

# Sort key for trades whose date cannot be resolved
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def window_start(now: datetime, days: int) -> datetime:
    """First instant of a trailing ``days`` window ending at ``now``.

    Subtracts calendar days from ``now``'s wall-clock time in its own
    time zone, so across a DST change the window is 23 or 25 hours longer
    or shorter than ``days * 24h``.  A naive ``now`` is taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    # Aware datetime + timedelta keeps the wall clock and tzinfo
    return now - timedelta(days=days)


def filter_trades_by_recent_days(
    trades: Iterable[TradeRecord],
    days: int,
    now: datetime,
) -> list[TradeRecord]:
    """Keep trades dated on or after ``now - days``; undated trades are dropped."""
    start = window_start(now, days)
    kept = []
    for trade in trades:
        resolved = resolve_trade_date(trade)
        if resolved is not None and resolved >= start:
            kept.append(trade)
    logger.debug("recency filter: %d trades since %s", len(kept), start.isoformat())
    return kept


def _sort_key(trade: TradeRecord) -> datetime:
    resolved = resolve_trade_date(trade)
    return resolved if resolved is not None else EPOCH


def sort_by_trade_date(
    trades: Iterable[TradeRecord],
    *,
    descending: bool = False,
) -> list[TradeRecord]:
    """Return a new list ordered by resolved date.

    The sort is stable in both directions.  Undated trades sort as the
    epoch: first when ascending, last when descending.
    """
    return sorted(trades, key=_sort_key, reverse=descending)
