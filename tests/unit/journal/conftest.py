"""Shared fixtures for journal tests."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from trading_journal.core.config import RiskThresholds
from trading_journal.core.enums import TradeDirection
from trading_journal.journal.record import TradeRecord

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
_UNSET = object()


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def now():
    return datetime(2024, 3, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def thresholds():
    return RiskThresholds(
        max_loss_streak=3, max_drawdown_rate=10.0, average_loss_multiplier=1.5
    )


def _dec(value):
    return None if value is None else Decimal(str(value))


def make_trade(
    trade_id: str = "t1",
    direction: str | None = "long",
    entry_price: float | None = 100.0,
    exit_price: float | None = 110.0,
    quantity: float | None = 1.0,
    entry_at=_UNSET,
    created_at=None,
    symbol: str | None = "BTC/USDT",
) -> TradeRecord:
    """Helper to create a TradeRecord; ``entry_at`` defaults to BASE_TIME."""
    return TradeRecord(
        trade_id=trade_id,
        direction=TradeDirection(direction) if direction else None,
        entry_price=_dec(entry_price),
        exit_price=_dec(exit_price),
        quantity=_dec(quantity),
        entry_at=BASE_TIME if entry_at is _UNSET else entry_at,
        created_at=created_at,
        symbol=symbol,
    )


def make_pnl_trade(trade_id: str, pnl: float | None, day: int, qty: float = 1.0) -> TradeRecord:
    """Long trade entered at 100 on BASE_TIME + ``day`` days with the given PnL.

    ``pnl=None`` leaves the exit price unknown.
    """
    exit_price = None if pnl is None else 100.0 + pnl / qty
    return make_trade(
        trade_id=trade_id,
        entry_price=100.0,
        exit_price=exit_price,
        quantity=qty,
        entry_at=BASE_TIME + timedelta(days=day),
    )
