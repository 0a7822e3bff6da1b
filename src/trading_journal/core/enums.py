"""Enumerations used across the trading journal."""

from enum import Enum


class TradeDirection(str, Enum):
    LONG = "long"
    SHORT = "short"


class AlertId(str, Enum):
    """Closed set of risk alerts shown on the dashboard."""

    LOSS_STREAK = "loss-streak"
    DRAWDOWN = "drawdown"
    AVG_LOSS = "avg-loss"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
