"""CLI entry point for the trading journal analytics."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.enums import ExportFormat
from .core.errors import JournalError
from .journal.record import TradeRecord, parse_timestamp
from .observability.logger import configure_from_settings, get_logger

_FORMATS = click.Choice([f.value for f in ExportFormat])


def _bootstrap(config: str, trades_path: str) -> tuple[Settings, list[TradeRecord]]:
    from .journal.loader import load_trades

    try:
        settings = load_settings(config_path=config)
        configure_from_settings(settings.observability)
        trades = load_trades(trades_path)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    get_logger(__name__).info("trades_loaded", path=trades_path, count=len(trades))
    return settings, trades


def _resolve_now(value: str | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    now = parse_timestamp(value)
    if now is None:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value!r}", param_hint="--now")
    return now


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
def main() -> None:
    """Trading journal performance analytics."""


@main.command()
@click.option("--trades", "trades_path", required=True, help="Trade file (.json or .csv)")
@click.option("--config", default="configs/journal.toml", help="Config file path")
@click.option("--now", default=None, help="Reference time (ISO-8601), default: current UTC time")
@click.option("--days", default=None, type=int, help="Dashboard window override (days)")
def dashboard(trades_path: str, config: str, now: str | None, days: int | None) -> None:
    """Print the dashboard snapshot as JSON."""
    from .journal.dashboard import build_dashboard
    from .journal.export import AnalyticsExporter

    settings, trades = _bootstrap(config, trades_path)
    analytics = settings.analytics
    snapshot = build_dashboard(
        trades,
        _resolve_now(now),
        settings.risk,
        window_days=days if days is not None else analytics.dashboard_days,
        recent_days=analytics.recent_loss_days,
        recent_limit=analytics.recent_trades_limit,
        tz=analytics.tzinfo,
    )
    click.echo(AnalyticsExporter().snapshot_to_json(snapshot))


@main.command()
@click.option("--trades", "trades_path", required=True, help="Trade file (.json or .csv)")
@click.option("--config", default="configs/journal.toml", help="Config file path")
@click.option("--now", default=None, help="Reference time (ISO-8601), default: current UTC time")
def risk(trades_path: str, config: str, now: str | None) -> None:
    """Print the risk summary and triggered alerts over all trades."""
    from .journal.alerts import evaluate_risk_alerts
    from .journal.risk_summary import calculate_risk_summary

    settings, trades = _bootstrap(config, trades_path)
    summary = calculate_risk_summary(
        trades, _resolve_now(now), recent_days=settings.analytics.recent_loss_days
    )
    alerts = evaluate_risk_alerts(summary, settings.risk)
    _echo_json({
        "riskSummary": summary.to_dict(),
        "alerts": [a.to_dict() for a in alerts],
    })


@main.command()
@click.option("--trades", "trades_path", required=True, help="Trade file (.json or .csv)")
@click.option("--config", default="configs/journal.toml", help="Config file path")
@click.option("--format", "fmt", type=_FORMATS, default=ExportFormat.CSV.value, help="Output format")
def equity(trades_path: str, config: str, fmt: str) -> None:
    """Print the equity curve."""
    from .journal.equity import build_equity_curve
    from .journal.export import AnalyticsExporter

    _, trades = _bootstrap(config, trades_path)
    exporter = AnalyticsExporter()
    curve = build_equity_curve(trades)
    if fmt == ExportFormat.JSON.value:
        click.echo(exporter.equity_curve_to_json(curve))
    else:
        click.echo(exporter.equity_curve_to_csv(curve), nl=False)


@main.command()
@click.option("--trades", "trades_path", required=True, help="Trade file (.json or .csv)")
@click.option("--config", default="configs/journal.toml", help="Config file path")
@click.option("--format", "fmt", type=_FORMATS, default=ExportFormat.CSV.value, help="Output format")
def streaks(trades_path: str, config: str, fmt: str) -> None:
    """Print trades newest-first with their current loss streak."""
    from .journal.export import AnalyticsExporter

    _, trades = _bootstrap(config, trades_path)
    exporter = AnalyticsExporter()
    if fmt == ExportFormat.JSON.value:
        click.echo(exporter.trades_to_json(trades))
    else:
        click.echo(exporter.trades_to_csv(trades), nl=False)


if __name__ == "__main__":
    main()
