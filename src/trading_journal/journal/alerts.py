"""Threshold-driven risk alerts for the dashboard banner.

Each alert is evaluated on its own; a summary can raise any subset of
the three, always in the order loss-streak, drawdown, avg-loss.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..core.config import RiskThresholds
from ..core.enums import AlertId
from .risk_summary import RiskSummary

logger = logging.getLogger(__name__)

TRADES_HREF = "/trades"


@dataclass(frozen=True)
class RiskAlert:
    id: AlertId
    title: str
    description: str
    href: str
    cta_label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.value,
            "title": self.title,
            "description": self.description,
            "href": self.href,
            "ctaLabel": self.cta_label,
        }


def _loss_streak_alert(summary: RiskSummary) -> RiskAlert:
    return RiskAlert(
        id=AlertId.LOSS_STREAK,
        title=f"{summary.max_loss_streak} losing trades in a row",
        description="Cut position size for a while and re-check your entry criteria.",
        href=TRADES_HREF,
        cta_label="Review losing streak",
    )


def _drawdown_alert(summary: RiskSummary) -> RiskAlert:
    return RiskAlert(
        id=AlertId.DRAWDOWN,
        title=f"Max drawdown is {summary.max_drawdown_rate:.1f}%",
        description="Set a loss cap first and trade conservatively until you recover.",
        href=TRADES_HREF,
        cta_label="View drawdown",
    )


def _avg_loss_alert(summary: RiskSummary) -> RiskAlert:
    return RiskAlert(
        id=AlertId.AVG_LOSS,
        title="Average loss is growing fast",
        description="Review your recent losing trades and re-align your stop-loss rules.",
        href=f"{TRADES_HREF}?direction=long",
        cta_label="View recent losses",
    )


def evaluate_risk_alerts(
    summary: RiskSummary,
    thresholds: RiskThresholds,
) -> list[RiskAlert]:
    """Return the alerts whose thresholds ``summary`` meets or exceeds."""
    alerts: list[RiskAlert] = []

    if summary.max_loss_streak >= thresholds.max_loss_streak:
        alerts.append(_loss_streak_alert(summary))

    if summary.max_drawdown_rate >= thresholds.max_drawdown_rate:
        alerts.append(_drawdown_alert(summary))

    recent = summary.average_loss_amount_last_30_days
    if recent > 0 and summary.average_loss_amount >= recent * thresholds.average_loss_multiplier:
        alerts.append(_avg_loss_alert(summary))

    if alerts:
        logger.info("risk alerts raised: %s", ", ".join(a.id.value for a in alerts))
    return alerts
