"""Trade Journal Analytics — performance and risk figures from raw trades.

Every function here is pure: it takes an in-memory collection of trade
records (plus an explicit reference instant where a time window is
involved) and returns fresh value objects.  Nothing is cached or stored.

Key components
--------------
**Inputs & time**

TradeRecord                   One journal entry, with PnL / capital / date helpers
filter_trades_by_recent_days  Trailing calendar-day window
sort_by_trade_date            Stable chronological ordering

**Performance**

build_equity_curve            Running PnL and return rate per trade
build_cumulative_rate_series  Chart series of the cumulative return rate
build_monthly_win_rate_series Win rate per calendar month

**Risk**

calculate_risk_summary        Loss streaks, max drawdown, average loss
evaluate_risk_alerts          Threshold alerts for the dashboard banner
build_loss_streak_map         Per-trade loss streak for list annotation

**Composition & I/O**

build_dashboard               One-call dashboard snapshot
AnalyticsExporter             CSV/JSON output
load_trades                   JSON/CSV trade file loader
"""

from .record import (
    TradeRecord,
    calculate_trade_pnl,
    resolve_trade_date,
    trade_capital,
)
from .chronology import filter_trades_by_recent_days, sort_by_trade_date
from .equity import (
    CumulativePoint,
    EquityPoint,
    MonthlyWinRatePoint,
    build_cumulative_rate_series,
    build_equity_curve,
    build_monthly_win_rate_series,
)
from .risk_summary import RiskSummary, calculate_risk_summary
from .alerts import RiskAlert, evaluate_risk_alerts
from .streaks import build_loss_streak_map, latest_loss_streak
from .dashboard import DashboardSnapshot, build_dashboard
from .export import AnalyticsExporter
from .loader import load_trades

__all__ = [
    "TradeRecord",
    "calculate_trade_pnl",
    "resolve_trade_date",
    "trade_capital",
    "filter_trades_by_recent_days",
    "sort_by_trade_date",
    "EquityPoint",
    "CumulativePoint",
    "MonthlyWinRatePoint",
    "build_equity_curve",
    "build_cumulative_rate_series",
    "build_monthly_win_rate_series",
    "RiskSummary",
    "calculate_risk_summary",
    "RiskAlert",
    "evaluate_risk_alerts",
    "build_loss_streak_map",
    "latest_loss_streak",
    "DashboardSnapshot",
    "build_dashboard",
    "AnalyticsExporter",
    "load_trades",
]
