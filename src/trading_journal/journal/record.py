"""Trade record — the input data model of the analytics engine.

A TradeRecord is one row of the user's journal as handed over by the
query layer: direction, prices, quantity and two timestamps, any of which
may be missing.  Missing or garbage values are normalised to ``None`` at
construction time (see :meth:`TradeRecord.from_row`) and every derived
figure propagates that ``None`` instead of guessing a zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Mapping

from ..core.enums import TradeDirection
from ..core.errors import TradeLoadError

# Row keys accepted for each field, snake_case first
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "trade_id": ("id", "trade_id", "tradeId"),
    "direction": ("direction",),
    "entry_price": ("entry_price", "entryPrice"),
    "exit_price": ("exit_price", "exitPrice"),
    "quantity": ("quantity", "qty"),
    "entry_at": ("entry_at", "entryAt"),
    "created_at": ("created_at", "createdAt"),
    "symbol": ("symbol", "tickers", "ticker"),
}


# ---------------------------------------------------------------------- #
# Value normalisation                                                      #
# ---------------------------------------------------------------------- #

def to_decimal_or_none(value: Any) -> Decimal | None:
    """Coerce a raw numeric cell to ``Decimal``.

    Returns ``None`` for missing, empty and non-numeric input, and for
    values that are not finite or do not fit in a ``float``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if _in_float_range(value) else None
    if isinstance(value, int):
        parsed = Decimal(value)
        return parsed if _in_float_range(parsed) else None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
        return parsed if _in_float_range(parsed) else None
    return None


def _in_float_range(value: Decimal) -> bool:
    # finite and small enough that products stay inside the default context
    return value.is_finite() and math.isfinite(float(value))


def round_half_up(value: Decimal, places: int) -> float:
    """Round for display: half away from zero, returned as ``float``."""
    with localcontext() as ctx:
        # quantize needs every integer digit plus the requested places
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def parse_direction(value: Any) -> TradeDirection | None:
    if isinstance(value, TradeDirection):
        return value
    if not isinstance(value, str):
        return None
    try:
        return TradeDirection(value.strip().lower())
    except ValueError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware ``datetime``.

    Naive values are taken as UTC.  Anything unparseable yields ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _extract_symbol(value: Any) -> str | None:
    # Joined ticker rows arrive as {"symbol": ...} or a list of those
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, Mapping):
        value = value.get("symbol")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_present(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


# ---------------------------------------------------------------------- #
# Record                                                                   #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class TradeRecord:
    """One journal entry.

    Parameters
    ----------
    trade_id : str
        Opaque unique identifier assigned by the persistence layer.
    direction : TradeDirection | None
        ``long`` or ``short``; ``None`` when unknown.
    entry_price, exit_price, quantity : Decimal | None
        Non-negative magnitudes; ``None`` when unknown.
    entry_at, created_at : datetime | date | str | None
        ``entry_at`` places the trade in time, ``created_at`` is the
        fallback.  Strings are parsed lazily by :func:`resolve_trade_date`.
    """

    trade_id: str
    direction: TradeDirection | None = None
    entry_price: Decimal | None = None
    exit_price: Decimal | None = None
    quantity: Decimal | None = None
    entry_at: date | str | None = None
    created_at: date | str | None = None
    symbol: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> TradeRecord:
        """Build a record from a persistence row (snake_case or camelCase keys)."""
        raw_id = _first_present(row, _FIELD_ALIASES["trade_id"])
        if raw_id is None or str(raw_id).strip() == "":
            raise TradeLoadError("row", f"missing trade id in {dict(row)!r}")

        def _ts(name: str) -> date | str | None:
            value = _first_present(row, _FIELD_ALIASES[name])
            if isinstance(value, str):
                return value.strip() or None
            return value if isinstance(value, date) else None

        return cls(
            trade_id=str(raw_id).strip(),
            direction=parse_direction(_first_present(row, _FIELD_ALIASES["direction"])),
            entry_price=to_decimal_or_none(_first_present(row, _FIELD_ALIASES["entry_price"])),
            exit_price=to_decimal_or_none(_first_present(row, _FIELD_ALIASES["exit_price"])),
            quantity=to_decimal_or_none(_first_present(row, _FIELD_ALIASES["quantity"])),
            entry_at=_ts("entry_at"),
            created_at=_ts("created_at"),
            symbol=_extract_symbol(_first_present(row, _FIELD_ALIASES["symbol"])),
        )

    # ------------------------------------------------------------------ #
    # Computed properties                                                  #
    # ------------------------------------------------------------------ #

    @property
    def pnl(self) -> Decimal | None:
        return calculate_trade_pnl(self)

    @property
    def capital(self) -> Decimal:
        return trade_capital(self)

    @property
    def trade_date(self) -> datetime | None:
        return resolve_trade_date(self)

    def to_dict(self) -> dict[str, Any]:
        """Export to a flat dictionary for logging / storage."""
        resolved = self.trade_date
        pnl = self.pnl
        return {
            "id": self.trade_id,
            "symbol": self.symbol,
            "direction": self.direction.value if self.direction else None,
            "entryPrice": str(self.entry_price) if self.entry_price is not None else None,
            "exitPrice": str(self.exit_price) if self.exit_price is not None else None,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "date": resolved.isoformat() if resolved else None,
            "pnl": str(pnl) if pnl is not None else None,
        }


# ---------------------------------------------------------------------- #
# PnL / capital / date                                                     #
# ---------------------------------------------------------------------- #

def calculate_trade_pnl(trade: TradeRecord) -> Decimal | None:
    """Signed profit/loss of a closed trade, or ``None`` when not computable.

    long:  (exit - entry) * quantity
    short: (entry - exit) * quantity
    """
    if (
        trade.direction is None
        or trade.entry_price is None
        or trade.exit_price is None
        or trade.quantity is None
    ):
        return None

    if trade.direction == TradeDirection.LONG:
        return (trade.exit_price - trade.entry_price) * trade.quantity
    return (trade.entry_price - trade.exit_price) * trade.quantity


def trade_capital(trade: TradeRecord) -> Decimal:
    """Notional exposure ``|entry * quantity|``; zero when either is unknown."""
    if trade.entry_price is None or trade.quantity is None:
        return Decimal("0")
    return abs(trade.entry_price * trade.quantity)


def resolve_trade_date(trade: TradeRecord) -> datetime | None:
    """Entry time if usable, else creation time, else ``None``."""
    resolved = parse_timestamp(trade.entry_at)
    if resolved is None:
        resolved = parse_timestamp(trade.created_at)
    return resolved
