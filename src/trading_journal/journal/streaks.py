"""Loss streaks counted back from the most recent trade.

Two descending scans with deliberately different handling of trades
whose PnL is unknown:

* :func:`latest_loss_streak` stops at the first unknown PnL.
* :func:`build_loss_streak_map` resets the counter on unknown PnL and
  still records an entry (0) for that trade.

The ascending streak accumulation used for ``max_loss_streak`` skips
unknown PnL instead and lives in :mod:`.risk_summary`.
"""

from __future__ import annotations

from typing import Iterable

from .chronology import sort_by_trade_date
from .record import TradeRecord, calculate_trade_pnl


def latest_loss_streak(trades: Iterable[TradeRecord]) -> int:
    """Number of consecutive losing trades ending with the most recent one."""
    streak = 0
    for trade in sort_by_trade_date(trades, descending=True):
        pnl = calculate_trade_pnl(trade)
        if pnl is None or pnl >= 0:
            break
        streak += 1
    return streak


def build_loss_streak_map(trades: Iterable[TradeRecord]) -> dict[str, int]:
    """Map trade id -> consecutive losses ending at that trade.

    Walks from newest to oldest, so a value of 3 means the trade and the
    two trades right before it in the descending listing all lost.
    """
    streak_by_id: dict[str, int] = {}
    current = 0

    for trade in sort_by_trade_date(trades, descending=True):
        pnl = calculate_trade_pnl(trade)
        if pnl is not None and pnl < 0:
            current += 1
            streak_by_id[trade.trade_id] = current
            continue

        current = 0
        streak_by_id[trade.trade_id] = 0

    return streak_by_id
