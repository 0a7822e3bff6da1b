"""Risk summary — loss streaks, drawdown and average loss size.

Usage::

    summary = calculate_risk_summary(trades, now=datetime.now(timezone.utc))
    print(summary.max_drawdown_amount, summary.max_drawdown_rate)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

from .chronology import filter_trades_by_recent_days, sort_by_trade_date
from .equity import build_equity_curve
from .record import TradeRecord, calculate_trade_pnl, round_half_up, trade_capital
from .streaks import latest_loss_streak

logger = logging.getLogger(__name__)

RECENT_LOSS_WINDOW_DAYS = 30


@dataclass(frozen=True)
class RiskSummary:
    """Scalar risk snapshot.  Every field is >= 0."""

    max_loss_streak: int = 0
    latest_loss_streak: int = 0
    max_drawdown_amount: float = 0.0
    max_drawdown_rate: float = 0.0  # percent
    average_loss_amount: float = 0.0
    average_loss_amount_last_30_days: float = 0.0
    loss_trade_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxLossStreak": self.max_loss_streak,
            "latestLossStreak": self.latest_loss_streak,
            "maxDrawdownAmount": self.max_drawdown_amount,
            "maxDrawdownRate": self.max_drawdown_rate,
            "averageLossAmount": self.average_loss_amount,
            "averageLossAmountLast30Days": self.average_loss_amount_last_30_days,
            "lossTradeCount": self.loss_trade_count,
        }


@dataclass
class _LossScan:
    max_streak: int = 0
    losses: list[Decimal] = field(default_factory=list)
    baseline_capital: Decimal = Decimal("0")


def _scan_losses_ascending(sorted_asc: Sequence[TradeRecord]) -> _LossScan:
    """Oldest-to-newest pass.  Unknown PnL is skipped and leaves the streak as is."""
    scan = _LossScan()
    current = 0
    baseline_set = False

    for trade in sorted_asc:
        pnl = calculate_trade_pnl(trade)
        if pnl is None:
            continue

        if pnl < 0:
            current += 1
            scan.max_streak = max(scan.max_streak, current)
            scan.losses.append(abs(pnl))
        else:
            current = 0

        if not baseline_set:
            scan.baseline_capital = trade_capital(trade)
            baseline_set = True

    return scan


def _average_loss(losses: Sequence[Decimal]) -> float:
    if not losses:
        return 0.0
    return round_half_up(sum(losses, Decimal("0")) / len(losses), 2)


def _max_drawdown(
    sorted_asc: Sequence[TradeRecord],
    baseline_capital: Decimal,
) -> tuple[float, float]:
    """Largest peak-to-equity decline and the rate at that same point."""
    peak = Decimal("0")
    max_amount = Decimal("0")
    rate_at_max = Decimal("0")

    for point in build_equity_curve(sorted_asc):
        peak = max(peak, point.equity)
        drawdown = peak - point.equity
        denominator = max(peak, baseline_capital, Decimal("1"))
        if drawdown > max_amount:
            max_amount = drawdown
            rate_at_max = drawdown / denominator * 100

    return round_half_up(max_amount, 2), round_half_up(rate_at_max, 2)


def calculate_risk_summary(
    trades: Iterable[TradeRecord],
    now: datetime,
    *,
    recent_days: int = RECENT_LOSS_WINDOW_DAYS,
) -> RiskSummary:
    """Compute the risk snapshot for a trade collection.

    Parameters
    ----------
    trades : Iterable[TradeRecord]
        The analysis window, already filtered by the caller.
    now : datetime
        Reference instant for the recent average-loss window.
    recent_days : int
        Length of that window in calendar days.  Default 30.
    """
    trades = list(trades)
    sorted_asc = sort_by_trade_date(trades)

    scan = _scan_losses_ascending(sorted_asc)
    max_dd_amount, max_dd_rate = _max_drawdown(sorted_asc, scan.baseline_capital)

    recent_losses = []
    for trade in filter_trades_by_recent_days(trades, recent_days, now):
        pnl = calculate_trade_pnl(trade)
        if pnl is not None and pnl < 0:
            recent_losses.append(abs(pnl))

    summary = RiskSummary(
        max_loss_streak=scan.max_streak,
        latest_loss_streak=latest_loss_streak(trades),
        max_drawdown_amount=max_dd_amount,
        max_drawdown_rate=max_dd_rate,
        average_loss_amount=_average_loss(scan.losses),
        average_loss_amount_last_30_days=_average_loss(recent_losses),
        loss_trade_count=len(scan.losses),
    )
    logger.debug(
        "risk summary: %d trades, %d losses, max streak %d, max dd %.2f",
        len(trades),
        summary.loss_trade_count,
        summary.max_loss_streak,
        summary.max_drawdown_amount,
    )
    return summary
