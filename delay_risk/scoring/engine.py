"""
Scoring Engine - Flight Delay Risk Prediction
Combines factor contributions into a delay probability, delay estimate,
confidence score and risk tier
"""

import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from config.scoring_config import (
    CONFIDENCE_BASE,
    REALTIME_STATUS_BONUS,
    REALTIME_STATUSES,
    RISK_COLORS,
    RISK_THRESHOLDS,
    STANDARD_STATUS_BONUS,
)
from delay_risk.knowledge import KnowledgeBase
from delay_risk.schemas import FlightAttributes, PredictionResult
from delay_risk.scoring.factors import FactorEvaluator, align_now
from delay_risk.scoring.insights import generate_insights, get_recommendation
from delay_risk.utils import get_logger

FlightInput = Union[FlightAttributes, Mapping[str, Any]]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def classify_risk(probability: int) -> Tuple[str, str]:
    """
    Map a delay probability to its risk tier

    Args:
        probability: Delay probability (0-100)

    Returns:
        (risk_level, risk_color)
    """
    if probability >= RISK_THRESHOLDS["high"]:
        level = "high"
    elif probability >= RISK_THRESHOLDS["medium"]:
        level = "medium"
    else:
        level = "low"
    return level, RISK_COLORS[level]


def confidence_score(lead_time_confidence: int, status: Optional[str]) -> int:
    """Base confidence plus lead-time and real-time status bonuses, clamped to 0-100"""
    score = CONFIDENCE_BASE + lead_time_confidence
    score += REALTIME_STATUS_BONUS if status in REALTIME_STATUSES else STANDARD_STATUS_BONUS
    return int(np.clip(score, 0, 100))


class DelayRiskEngine:
    """
    Stateless delay risk scorer over immutable knowledge tables

    Features:
    - Scores a single flight into a PredictionResult
    - Annotates results with insights and a recommendation
    - Never raises: failures come back as {"success": False, "error": ...}

    Usage:
        engine = DelayRiskEngine()
        outcome = engine.predict({"flight_no": "AA100", "departure_time": "..."})
        if outcome["success"]:
            print(outcome["prediction"].delay_probability)
    """

    def __init__(
        self,
        knowledge: Optional[KnowledgeBase] = None,
        log_level: str = "INFO",
    ):
        """
        Initialize engine

        Args:
            knowledge: Knowledge tables (defaults to the configured tables)
            log_level: Logging level
        """
        self.knowledge = knowledge or KnowledgeBase.from_config()
        self.evaluator = FactorEvaluator(self.knowledge)
        self.logger = get_logger(__name__, log_level)

    def predict(
        self, flight: FlightInput, now: Optional[pd.Timestamp] = None
    ) -> Dict[str, Any]:
        """
        Predict delay risk for one flight

        Args:
            flight: FlightAttributes or a dict-like flight record
            now: Reference time for lead time (defaults to the current time)

        Returns:
            {"success": bool, "prediction": PredictionResult | None, "error": str | None}
        """
        try:
            attributes = FlightAttributes.from_mapping(flight)
            prediction = self._score(attributes, now)
        except Exception as e:
            self.logger.error(f"Error in flight delay prediction: {e}")
            return {"success": False, "prediction": None, "error": str(e)}

        self.logger.debug(
            f"{prediction.flight_number}: {prediction.delay_probability}% "
            f"({prediction.risk_level}), ~{prediction.estimated_delay_minutes} min"
        )
        return {"success": True, "prediction": prediction, "error": None}

    def _score(
        self, flight: FlightAttributes, now: Optional[pd.Timestamp]
    ) -> PredictionResult:
        now = align_now(flight.departure_time, now)
        evaluation = self.evaluator.evaluate(flight, now)

        probability = round_half_up(float(np.clip(evaluation.probability_points, 0, 100)))
        estimated_minutes = max(round_half_up(evaluation.delay_minutes), 0)
        confidence = confidence_score(
            evaluation.lead_time_confidence, flight.current_status
        )
        risk_level, risk_color = classify_risk(probability)

        return PredictionResult(
            flight_number=flight.flight_no,
            delay_probability=probability,
            estimated_delay_minutes=estimated_minutes,
            risk_level=risk_level,
            risk_color=risk_color,
            confidence_score=confidence,
            predicted_at=now,
            factors=evaluation.factors,
            insights=generate_insights(
                probability,
                evaluation.factors,
                evaluation.hours_until_departure,
            ),
            recommendation=get_recommendation(probability, estimated_minutes),
        )


_default_engine: Optional[DelayRiskEngine] = None


def get_default_engine() -> DelayRiskEngine:
    """Lazily built shared engine (holds no mutable state)"""
    global _default_engine
    if _default_engine is None:
        _default_engine = DelayRiskEngine()
    return _default_engine


def predict_flight_delay(
    flight: FlightInput, now: Optional[pd.Timestamp] = None
) -> Dict[str, Any]:
    """
    Convenience function to score one flight with the default engine

    Args:
        flight: Flight record
        now: Reference time

    Returns:
        Scoring outcome dict
    """
    return get_default_engine().predict(flight, now=now)


if __name__ == "__main__":
    """Score a sample flight"""
    print("=" * 60)
    print("DELAY RISK ENGINE TEST")
    print("=" * 60)

    now = pd.Timestamp("2025-01-10 15:00")
    sample = {
        "flight_no": "ua920",
        "airline": "United Airlines",
        "departure_airport": "LHR",
        "arrival_airport": "ORD",
        "departure_time": "2025-01-10 19:30",
        "arrival_time": "2025-01-10 22:45",
        "current_status": "delayed",
    }

    outcome = DelayRiskEngine().predict(sample, now=now)
    result = outcome["prediction"]

    print(f"\nFlight: {result.flight_number}")
    print(f"  Probability: {result.delay_probability}% ({result.risk_level})")
    print(f"  Estimated delay: {result.estimated_delay_minutes} min")
    print(f"  Confidence: {result.confidence_score}")
    print("\nFactors:")
    for factor in result.factors:
        print(f"  {factor.name:<22} {factor.impact:>6.1f}%  {factor.description}")
    print("\nInsights:")
    for insight in result.insights:
        print(f"  {insight.icon} {insight.message}")
    print(f"\nRecommendation: {result.recommendation.title}")

    print("\n" + "=" * 60)
    print("✓ Engine test complete")
    print("=" * 60)
