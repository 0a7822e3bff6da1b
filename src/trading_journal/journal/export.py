"""Analytics export — CSV/JSON output of trade rows and computed series.

Usage::

    exporter = AnalyticsExporter()
    csv_str = exporter.trades_to_csv(trades)
    curve_csv = exporter.equity_curve_to_csv(build_equity_curve(trades))
    json_str = exporter.snapshot_to_json(build_dashboard(trades, now, thresholds))
"""

from __future__ import annotations

import csv
import io
import json
import logging
from decimal import Decimal
from typing import Any, Iterable

from .chronology import sort_by_trade_date
from .dashboard import DashboardSnapshot
from .equity import EquityPoint
from .record import (
    TradeRecord,
    calculate_trade_pnl,
    resolve_trade_date,
    round_half_up,
    trade_capital,
)
from .streaks import build_loss_streak_map

logger = logging.getLogger(__name__)

# Default CSV columns
_TRADE_COLUMNS = [
    "id",
    "symbol",
    "direction",
    "entry_price",
    "exit_price",
    "quantity",
    "date",
    "pnl",
    "capital",
    "loss_streak",
]

_EQUITY_COLUMNS = [
    "id",
    "date",
    "cumulative_pnl",
    "cumulative_capital",
    "equity",
    "rate",
]


class AnalyticsExporter:
    """Export trade rows and analytics series to CSV/JSON.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for money fields.  Default 2.
    """

    def __init__(self, *, decimal_places: int = 2) -> None:
        self._dp = decimal_places

    # ------------------------------------------------------------------ #
    # Trade rows                                                           #
    # ------------------------------------------------------------------ #

    def trade_rows(self, trades: Iterable[TradeRecord]) -> list[dict[str, Any]]:
        """Newest-first rows annotated with PnL and current loss streak."""
        trades = list(trades)
        streaks = build_loss_streak_map(trades)
        return [
            self._trade_to_row(t, streaks.get(t.trade_id, 0))
            for t in sort_by_trade_date(trades, descending=True)
        ]

    def trades_to_csv(
        self,
        trades: Iterable[TradeRecord],
        *,
        columns: list[str] | None = None,
    ) -> str:
        """Export trades as a CSV string with header row."""
        return self._write_csv(self.trade_rows(trades), columns or _TRADE_COLUMNS)

    def trades_to_json(self, trades: Iterable[TradeRecord], *, indent: int = 2) -> str:
        return json.dumps(self.trade_rows(trades), indent=indent, default=str)

    # ------------------------------------------------------------------ #
    # Series                                                               #
    # ------------------------------------------------------------------ #

    def equity_curve_to_csv(self, points: Iterable[EquityPoint]) -> str:
        rows = [self._point_to_row(p) for p in points]
        return self._write_csv(rows, _EQUITY_COLUMNS)

    def equity_curve_to_json(self, points: Iterable[EquityPoint], *, indent: int = 2) -> str:
        return json.dumps([self._point_to_row(p) for p in points], indent=indent)

    def snapshot_to_json(self, snapshot: DashboardSnapshot, *, indent: int = 2) -> str:
        return json.dumps(snapshot.to_dict(), indent=indent, default=str)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _money(self, value: Decimal | None) -> float | None:
        if value is None:
            return None
        return round_half_up(value, self._dp)

    def _trade_to_row(self, trade: TradeRecord, loss_streak: int) -> dict[str, Any]:
        resolved = resolve_trade_date(trade)
        return {
            "id": trade.trade_id,
            "symbol": trade.symbol,
            "direction": trade.direction.value if trade.direction else None,
            "entry_price": self._money(trade.entry_price),
            "exit_price": self._money(trade.exit_price),
            "quantity": float(trade.quantity) if trade.quantity is not None else None,
            "date": resolved.isoformat() if resolved else None,
            "pnl": self._money(calculate_trade_pnl(trade)),
            "capital": self._money(trade_capital(trade)),
            "loss_streak": loss_streak,
        }

    def _point_to_row(self, point: EquityPoint) -> dict[str, Any]:
        return {
            "id": point.trade_id,
            "date": point.date.isoformat() if point.date else "",
            "cumulative_pnl": self._money(point.cumulative_pnl),
            "cumulative_capital": self._money(point.cumulative_capital),
            "equity": self._money(point.equity),
            "rate": point.rate,
        }

    @staticmethod
    def _write_csv(rows: list[dict[str, Any]], columns: list[str]) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({c: "" if row.get(c) is None else row.get(c) for c in columns})
        logger.debug("exported %d rows", len(rows))
        return buf.getvalue()
