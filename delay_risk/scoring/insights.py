"""
Insight & Recommendation Generator
Turns a scored flight into human-readable insights and a tiered action plan
"""

from typing import List, Sequence

from config.scoring_config import (
    LONG_RANGE_HORIZON_HOURS,
    RISK_THRESHOLDS,
    URGENT_HORIZON_HOURS,
)
from delay_risk.schemas import FactorContribution, Insight, Recommendation


def generate_insights(
    probability: int,
    factors: Sequence[FactorContribution],
    hours_until_departure: int,
) -> List[Insight]:
    """
    Generate insights for a prediction

    Args:
        probability: Delay probability (0-100)
        factors: Factor contributions, in evaluation order
        hours_until_departure: Lead time in whole hours

    Returns:
        Primary risk insight, top-factor insight and an optional
        lead-time insight
    """
    insights = []

    if probability >= RISK_THRESHOLDS["high"]:
        insights.append(
            Insight(
                type="warning",
                message=(
                    f"High delay risk ({probability}%). "
                    "Consider proactive passenger communication."
                ),
                icon="⚠️",
            )
        )
    elif probability >= RISK_THRESHOLDS["medium"]:
        insights.append(
            Insight(
                type="info",
                message=(
                    f"Moderate delay risk ({probability}%). "
                    "Monitor flight status closely."
                ),
                icon="ℹ️",
            )
        )
    else:
        insights.append(
            Insight(
                type="success",
                message=f"Low delay risk ({probability}%). Flight likely on schedule.",
                icon="✅",
            )
        )

    # Stable sort: ties keep evaluation order
    ranked = sorted(factors, key=lambda f: f.impact, reverse=True)
    if ranked:
        top = ranked[0]
        insights.append(
            Insight(
                type="analysis",
                message=f"Top delay factor: {top.name} ({top.impact:.1f}% impact)",
                icon="📊",
            )
        )

    if hours_until_departure < URGENT_HORIZON_HOURS:
        insights.append(
            Insight(
                type="urgent",
                message="Flight departing soon. Real-time monitoring active.",
                icon="🚨",
            )
        )
    elif hours_until_departure > LONG_RANGE_HORIZON_HOURS:
        insights.append(
            Insight(
                type="info",
                message=(
                    "Long-range prediction. "
                    "Accuracy will improve as departure approaches."
                ),
                icon="🔮",
            )
        )

    return insights


def get_recommendation(probability: int, estimated_delay_minutes: int) -> Recommendation:
    """Tiered action plan keyed by the risk thresholds"""
    if probability >= RISK_THRESHOLDS["high"]:
        return Recommendation(
            action="immediate",
            title="Immediate Action Required",
            steps=[
                "Notify vendor to prepare backup driver",
                "Send proactive communication to passenger",
                "Monitor flight status every 10 minutes",
                f"Adjust pickup time by estimated {estimated_delay_minutes} minutes",
            ],
        )
    if probability >= RISK_THRESHOLDS["medium"]:
        return Recommendation(
            action="monitor",
            title="Enhanced Monitoring",
            steps=[
                "Alert vendor of potential delay",
                "Increase status check frequency",
                "Prepare delay notification templates",
                "Keep driver on standby",
            ],
        )
    return Recommendation(
        action="standard",
        title="Standard Procedure",
        steps=[
            "Continue normal monitoring",
            "Proceed with planned pickup schedule",
            "Routine status updates to vendor",
        ],
    )
