"""Dashboard snapshot — everything the overview page shows, in one call.

The dashboard analyses a single trailing window (90 calendar days by
default) so the charts, the risk cards and the alert banner always
describe the same set of trades.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable

from ..core.config import RiskThresholds
from .alerts import RiskAlert, evaluate_risk_alerts
from .chronology import filter_trades_by_recent_days, sort_by_trade_date
from .equity import (
    CumulativePoint,
    MonthlyWinRatePoint,
    build_cumulative_rate_series,
    build_monthly_win_rate_series,
)
from .record import TradeRecord
from .risk_summary import RECENT_LOSS_WINDOW_DAYS, RiskSummary, calculate_risk_summary
from .streaks import build_loss_streak_map

logger = logging.getLogger(__name__)

DASHBOARD_WINDOW_DAYS = 90
RECENT_TRADES_LIMIT = 5


@dataclass(frozen=True)
class DashboardSnapshot:
    generated_at: datetime
    window_days: int
    trade_count: int
    cumulative: list[CumulativePoint] = field(default_factory=list)
    monthly_win_rate: list[MonthlyWinRatePoint] = field(default_factory=list)
    risk_summary: RiskSummary = field(default_factory=RiskSummary)
    alerts: list[RiskAlert] = field(default_factory=list)
    recent_trades: list[TradeRecord] = field(default_factory=list)
    loss_streaks: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "windowDays": self.window_days,
            "tradeCount": self.trade_count,
            "cumulative": [p.to_dict() for p in self.cumulative],
            "monthlyWinRate": [p.to_dict() for p in self.monthly_win_rate],
            "riskSummary": self.risk_summary.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "recentTrades": [
                {**t.to_dict(), "lossStreak": self.loss_streaks.get(t.trade_id, 0)}
                for t in self.recent_trades
            ],
        }


def build_dashboard(
    trades: Iterable[TradeRecord],
    now: datetime,
    thresholds: RiskThresholds,
    *,
    window_days: int = DASHBOARD_WINDOW_DAYS,
    recent_days: int = RECENT_LOSS_WINDOW_DAYS,
    recent_limit: int = RECENT_TRADES_LIMIT,
    tz: tzinfo = timezone.utc,
) -> DashboardSnapshot:
    """Filter to the trailing window and compute every dashboard figure."""
    window = filter_trades_by_recent_days(trades, window_days, now)
    summary = calculate_risk_summary(window, now, recent_days=recent_days)

    snapshot = DashboardSnapshot(
        generated_at=now,
        window_days=window_days,
        trade_count=len(window),
        cumulative=build_cumulative_rate_series(window, tz=tz),
        monthly_win_rate=build_monthly_win_rate_series(window, tz=tz),
        risk_summary=summary,
        alerts=evaluate_risk_alerts(summary, thresholds),
        recent_trades=sort_by_trade_date(window, descending=True)[:recent_limit],
        loss_streaks=build_loss_streak_map(window),
    )
    logger.info(
        "dashboard built: %d trades in %d-day window, %d alerts",
        snapshot.trade_count,
        window_days,
        len(snapshot.alerts),
    )
    return snapshot
