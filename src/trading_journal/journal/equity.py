"""Equity curve and the chart series projected from it.

The equity curve is the running total of realised PnL in chronological
order, paired with the running total of capital deployed so each point
can be expressed as a return rate.  The series projectors reshape the
curve (or the raw trades) for charting and never truncate: callers pick
the analysis window with :func:`filter_trades_by_recent_days` first.

Usage::

    window = filter_trades_by_recent_days(trades, 90, now)
    curve = build_equity_curve(window)
    print(curve[-1].equity, curve[-1].rate)
    months = build_monthly_win_rate_series(window)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Iterable

from .chronology import sort_by_trade_date
from .record import (
    TradeRecord,
    calculate_trade_pnl,
    resolve_trade_date,
    round_half_up,
    trade_capital,
)

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


@dataclass(frozen=True)
class EquityPoint:
    """Running totals after one trade (chronological order)."""

    trade_id: str
    date: datetime | None
    cumulative_pnl: Decimal
    cumulative_capital: Decimal
    equity: Decimal
    rate: float  # percent, 2 dp

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.trade_id,
            "date": self.date.isoformat() if self.date else "",
            "cumulativePnl": float(self.cumulative_pnl),
            "cumulativeCapital": float(self.cumulative_capital),
            "equity": float(self.equity),
            "rate": self.rate,
        }


@dataclass(frozen=True)
class CumulativePoint:
    index: int
    label: str
    rate: float

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "label": self.label, "rate": self.rate}


@dataclass(frozen=True)
class MonthlyWinRatePoint:
    month: str  # YYYY-MM
    label: str
    total: int
    win: int
    win_rate: float  # percent, 1 dp

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "label": self.label,
            "total": self.total,
            "win": self.win,
            "winRate": self.win_rate,
        }


def build_equity_curve(trades: Iterable[TradeRecord]) -> list[EquityPoint]:
    """One point per trade, in ascending date order.

    A trade with unknown PnL still adds its capital and repeats the
    previous equity.
    """
    cumulative_pnl = Decimal("0")
    cumulative_capital = Decimal("0")
    points: list[EquityPoint] = []

    for trade in sort_by_trade_date(trades):
        pnl = calculate_trade_pnl(trade)
        if pnl is not None:
            cumulative_pnl += pnl
        cumulative_capital += trade_capital(trade)

        if cumulative_capital > 0:
            rate = round_half_up(cumulative_pnl / cumulative_capital * 100, 2)
        else:
            rate = 0.0

        points.append(EquityPoint(
            trade_id=trade.trade_id,
            date=resolve_trade_date(trade),
            cumulative_pnl=cumulative_pnl,
            cumulative_capital=cumulative_capital,
            equity=cumulative_pnl,
            rate=rate,
        ))

    return points


def build_cumulative_rate_series(
    trades: Iterable[TradeRecord],
    *,
    tz: tzinfo = timezone.utc,
) -> list[CumulativePoint]:
    """Cumulative return rate per trade, labelled ``M/D`` in ``tz``."""
    series = []
    for position, point in enumerate(build_equity_curve(trades), start=1):
        if point.date is not None:
            local = point.date.astimezone(tz)
            label = f"{local.month}/{local.day}"
        else:
            label = str(position)
        series.append(CumulativePoint(index=position, label=label, rate=point.rate))
    return series


def build_monthly_win_rate_series(
    trades: Iterable[TradeRecord],
    *,
    tz: tzinfo = timezone.utc,
) -> list[MonthlyWinRatePoint]:
    """Win rate per calendar month of the resolved date (in ``tz``).

    Trades with unknown PnL or date are ignored.  Break-even trades open
    their month's bucket but count as neither win nor loss, so a month of
    break-evens only reports ``total == 0`` and ``win_rate == 0``.
    """
    totals: dict[str, int] = {}
    wins: dict[str, int] = {}
    labels: dict[str, str] = {}

    for trade in trades:
        resolved = resolve_trade_date(trade)
        pnl = calculate_trade_pnl(trade)
        if resolved is None or pnl is None:
            continue

        local = resolved.astimezone(tz)
        key = f"{local.year:04d}-{local.month:02d}"
        if key not in totals:
            totals[key] = 0
            wins[key] = 0
            labels[key] = MONTH_NAMES[local.month - 1]

        if pnl == 0:
            continue
        totals[key] += 1
        if pnl > 0:
            wins[key] += 1

    series = []
    for key in sorted(totals):
        total = totals[key]
        win = wins[key]
        win_rate = round_half_up(Decimal(win) / Decimal(total) * 100, 1) if total > 0 else 0.0
        series.append(MonthlyWinRatePoint(
            month=key, label=labels[key], total=total, win=win, win_rate=win_rate,
        ))

    logger.debug("monthly win rate: %d months", len(series))
    return series
