"""Tests for calculate_risk_summary — streaks, drawdown and average loss."""

import pytest
from datetime import datetime, timedelta, timezone

from trading_journal.journal.equity import build_equity_curve, build_monthly_win_rate_series
from trading_journal.journal.record import TradeRecord
from trading_journal.journal.risk_summary import RiskSummary, calculate_risk_summary

from .conftest import make_pnl_trade, make_trade


class TestLossStreaks:

    def test_win_then_loss_scenario(self, base_time, now):
        trades = [
            make_trade("t1", direction="long", entry_price=100, exit_price=110,
                       quantity=1, entry_at=base_time),
            make_trade("t2", direction="short", entry_price=100, exit_price=120,
                       quantity=1, entry_at=base_time + timedelta(days=1)),
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.max_loss_streak == 1
        assert summary.latest_loss_streak == 1
        assert summary.loss_trade_count == 1
        assert summary.average_loss_amount == 20.0

    def test_three_losses_then_win(self, now):
        trades = [
            make_pnl_trade("l1", -5, day=0),
            make_pnl_trade("l2", -5, day=1),
            make_pnl_trade("l3", -5, day=2),
            make_pnl_trade("w", 8, day=3),
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.max_loss_streak == 3
        assert summary.latest_loss_streak == 0

    def test_breakeven_resets_streak(self, now):
        trades = [
            make_pnl_trade("l1", -5, day=0),
            make_pnl_trade("be", 0, day=1),
            make_pnl_trade("l2", -5, day=2),
        ]
        assert calculate_risk_summary(trades, now).max_loss_streak == 1

    def test_unknown_pnl_skipped_ascending_but_stops_latest(self, now):
        trades = [
            make_pnl_trade("l1", -5, day=0),
            make_pnl_trade("open", None, day=1),
            make_pnl_trade("l2", -5, day=2),
        ]
        summary = calculate_risk_summary(trades, now)
        # Ascending: the unknown trade neither extends nor breaks the streak
        assert summary.max_loss_streak == 2
        # Descending: the unknown trade ends the latest streak
        assert summary.latest_loss_streak == 1

    def test_latest_streak_stops_on_most_recent_unknown(self, now):
        trades = [
            make_pnl_trade("l1", -5, day=0),
            make_pnl_trade("open", None, day=1),
        ]
        assert calculate_risk_summary(trades, now).latest_loss_streak == 0


class TestDrawdown:

    def test_drawdown_scenario(self, base_time, now):
        trades = [
            make_trade("t1", entry_price=100, exit_price=110, quantity=1, entry_at=base_time),
            make_trade("t2", direction="short", entry_price=100, exit_price=120,
                       quantity=1, entry_at=base_time + timedelta(days=1)),
        ]
        summary = calculate_risk_summary(trades, now)
        # peak 10 -> equity -10, denominator max(10, baseline 100, 1)
        assert summary.max_drawdown_amount == 20.0
        assert summary.max_drawdown_rate == 20.0

    def test_non_decreasing_equity_has_no_drawdown(self, now):
        trades = [make_pnl_trade(f"w{i}", 5, day=i) for i in range(5)]
        trades.append(make_pnl_trade("be", 0, day=6))
        summary = calculate_risk_summary(trades, now)
        assert summary.max_drawdown_amount == 0.0
        assert summary.max_drawdown_rate == 0.0

    def test_rate_taken_at_largest_amount(self, base_time, now):
        def at(trade_id, entry, exit, day):
            return make_trade(trade_id, entry_price=entry, exit_price=exit, quantity=1,
                              entry_at=base_time + timedelta(days=day))

        trades = [
            at("a", 1, 11, 0),       # +10, baseline capital 1
            at("b", 10, 5, 1),       # -5 from peak 10 -> 50%
            at("c", 5, 1000, 2),     # peak 1000
            at("d", 200, 100, 3),    # -100 from peak 1000 -> 10%
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.max_drawdown_amount == 100.0
        assert summary.max_drawdown_rate == 10.0

    def test_baseline_capital_fixed_even_when_zero(self, base_time, now):
        trades = [
            make_trade("free", entry_price=0, exit_price=10, quantity=1, entry_at=base_time),
            make_trade("loss", entry_price=100, exit_price=95, quantity=1,
                       entry_at=base_time + timedelta(days=1)),
        ]
        summary = calculate_risk_summary(trades, now)
        # denominator max(peak 10, baseline 0, 1) = 10
        assert summary.max_drawdown_amount == 5.0
        assert summary.max_drawdown_rate == 50.0

    def test_unknown_pnl_trade_does_not_set_baseline(self, base_time, now):
        trades = [
            make_trade("open", entry_price=1000, exit_price=None, quantity=1, entry_at=base_time),
            make_trade("w", entry_price=100, exit_price=110, quantity=1,
                       entry_at=base_time + timedelta(days=1)),
            make_trade("l", entry_price=100, exit_price=80, quantity=1,
                       entry_at=base_time + timedelta(days=2)),
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.max_drawdown_amount == 20.0
        assert summary.max_drawdown_rate == 20.0

    def test_drawdown_from_zero_peak(self, now):
        trades = [make_pnl_trade("l", -0.5, day=0)]
        summary = calculate_risk_summary(trades, now)
        # peak stays 0, denominator is the baseline capital 100
        assert summary.max_drawdown_amount == 0.5
        assert summary.max_drawdown_rate == 0.5


class TestAverageLoss:

    def test_average_rounded(self, now):
        trades = [
            make_pnl_trade("a", -1, day=0),
            make_pnl_trade("b", -1, day=1),
            make_pnl_trade("c", -2, day=2),
            make_pnl_trade("w", 50, day=3),
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.average_loss_amount == 1.33
        assert summary.loss_trade_count == 3

    def test_last_30_days_window(self, now):
        trades = [
            make_trade("old", entry_price=100, exit_price=70, quantity=1,
                       entry_at=datetime(2024, 1, 10, tzinfo=timezone.utc)),
            make_trade("recent", entry_price=100, exit_price=90, quantity=1,
                       entry_at=datetime(2024, 3, 20, tzinfo=timezone.utc)),
            make_trade("undated", entry_price=100, exit_price=50, quantity=1,
                       entry_at=None),
        ]
        summary = calculate_risk_summary(trades, now)
        assert summary.average_loss_amount == 30.0  # (30 + 10 + 50) / 3
        assert summary.average_loss_amount_last_30_days == 10.0

    def test_recent_days_override(self, now):
        trades = [
            make_trade("old", entry_price=100, exit_price=70, quantity=1,
                       entry_at=datetime(2024, 1, 10, tzinfo=timezone.utc)),
        ]
        summary = calculate_risk_summary(trades, now, recent_days=120)
        assert summary.average_loss_amount_last_30_days == 30.0

    def test_no_losses(self, now):
        summary = calculate_risk_summary([make_pnl_trade("w", 5, day=0)], now)
        assert summary.average_loss_amount == 0.0
        assert summary.average_loss_amount_last_30_days == 0.0
        assert summary.loss_trade_count == 0


class TestEdgeCases:

    def test_empty_input_is_all_zero(self, now):
        assert calculate_risk_summary([], now) == RiskSummary()

    def test_only_unknown_trades(self, now):
        trades = [make_pnl_trade(f"o{i}", None, day=i) for i in range(3)]
        assert calculate_risk_summary(trades, now) == RiskSummary()

    def test_accepts_generator(self, now):
        summary = calculate_risk_summary((make_pnl_trade(f"l{i}", -1, day=i) for i in range(2)), now)
        assert summary.loss_trade_count == 2
        assert summary.latest_loss_streak == 2

    def test_to_dict_keys(self, now):
        data = calculate_risk_summary([], now).to_dict()
        assert set(data) == {
            "maxLossStreak",
            "latestLossStreak",
            "maxDrawdownAmount",
            "maxDrawdownRate",
            "averageLossAmount",
            "averageLossAmountLast30Days",
            "lossTradeCount",
        }


class TestLargeAmounts:

    @pytest.mark.parametrize(
        "entry, exit_, qty, amount, rate",
        [
            ("1e30", "1", "1", 1e30, 100.0),
            ("1e15", "1e13", "1e13", 9.9e27, 99.0),
        ],
    )
    def test_amounts_beyond_decimal_precision(self, now, entry, exit_, qty, amount, rate):
        trade = TradeRecord.from_row({
            "id": "x",
            "direction": "long",
            "entryPrice": entry,
            "exitPrice": exit_,
            "quantity": qty,
            "entryAt": "2024-03-30",
        })
        summary = calculate_risk_summary([trade], now)
        assert summary.loss_trade_count == 1
        assert summary.max_drawdown_amount == pytest.approx(amount)
        assert summary.max_drawdown_rate == pytest.approx(rate)
        assert summary.average_loss_amount == pytest.approx(amount)
        assert summary.average_loss_amount_last_30_days == pytest.approx(amount)

        (point,) = build_equity_curve([trade])
        assert point.rate == pytest.approx(-rate)
        (month,) = build_monthly_win_rate_series([trade])
        assert month.total == 1
        assert month.win_rate == 0.0
