"""
Factor Evaluator
Computes one weighted contribution per factor category from a flight's
attributes and the knowledge tables

Factors (nominal weight):
1. Airline performance (25%)
2. Airport congestion (20%)
3. Departure time of day (20%)
4. Season (15%)
5. Current operational status (20%)
6. Day of week (5%)
7. Lead time to departure (5%)
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd

from config.scoring_config import (
    CONGESTION_DELAY_SCALE,
    DAY_OF_WEEK_IMPACT,
    FACTOR_WEIGHTS,
    LEAD_TIME_FALLBACK,
    LEAD_TIME_TIERS,
    SEASON_DELAY_SCALE,
    STATUS_DESCRIPTIONS,
    STATUS_IMPACT,
    TIME_OF_DAY_DELAY_SCALE,
)
from delay_risk.knowledge import KnowledgeBase, season_for_month, time_slot
from delay_risk.schemas import FactorContribution, FlightAttributes


@dataclass(frozen=True)
class FactorEvaluation:
    """Per-factor contributions plus the running totals they add up to"""

    factors: List[FactorContribution]
    probability_points: float
    delay_minutes: float
    lead_time_confidence: int
    hours_until_departure: int


def align_now(departure: pd.Timestamp, now: Optional[pd.Timestamp]) -> pd.Timestamp:
    """Return `now` in the same tz-awareness as the departure timestamp"""
    if now is None:
        return pd.Timestamp.now(tz=departure.tz)

    now = pd.Timestamp(now)
    if departure.tz is not None and now.tz is None:
        return now.tz_localize(departure.tz)
    if departure.tz is None and now.tz is not None:
        return now.tz_convert(None)
    return now


def hours_until(departure: pd.Timestamp, now: Optional[pd.Timestamp] = None) -> int:
    """Whole hours from now until departure, truncated toward zero"""
    delta = departure - align_now(departure, now)
    return int(delta.total_seconds() / 3600)


def lead_time_tier(hours: int) -> Tuple[int, int]:
    """(probability impact, confidence bonus) for the given lead time"""
    for limit, impact, confidence in LEAD_TIME_TIERS:
        if hours < limit:
            return impact, confidence
    return LEAD_TIME_FALLBACK


class FactorEvaluator:
    """
    Evaluates the seven delay factors for a single flight

    Weights are read from FACTOR_WEIGHTS.

    Usage:
        evaluator = FactorEvaluator(KnowledgeBase.from_config())
        evaluation = evaluator.evaluate(flight, now=pd.Timestamp("2025-04-15 07:00"))
    """

    def __init__(self, knowledge: Optional[KnowledgeBase] = None, weights=None):
        self.knowledge = knowledge or KnowledgeBase.from_config()
        self.weights = dict(weights or FACTOR_WEIGHTS)

    def evaluate(
        self, flight: FlightAttributes, now: Optional[pd.Timestamp] = None
    ) -> FactorEvaluation:
        departure = flight.departure_time
        hours = hours_until(departure, now)

        factors = [
            self._airline_factor(flight),
            self._congestion_factor(flight),
            self._time_of_day_factor(departure),
            self._season_factor(departure),
            self._status_factor(flight.current_status),
            self._day_of_week_factor(departure),
        ]
        lead_factor, lead_confidence = self._lead_time_factor(hours)
        factors.append(lead_factor)

        return FactorEvaluation(
            factors=factors,
            probability_points=sum(f.probability_points for f in factors),
            delay_minutes=sum(f.delay_minutes for f in factors),
            lead_time_confidence=lead_confidence,
            hours_until_departure=hours,
        )

    def _airline_factor(self, flight: FlightAttributes) -> FactorContribution:
        weight = self.weights["Airline Performance"]
        profile = self.knowledge.airline(flight.airline_code)
        impact = (1 - profile.on_time_rate) * 100

        return FactorContribution(
            name="Airline Performance",
            impact=impact,
            weight=weight,
            description=(
                f"{flight.airline} has {profile.on_time_rate * 100:.1f}% "
                "on-time performance"
            ),
            probability_points=impact * weight,
            delay_minutes=profile.avg_delay * weight,
        )

    def _congestion_factor(self, flight: FlightAttributes) -> FactorContribution:
        weight = self.weights["Airport Congestion"]
        departure = self.knowledge.congestion(flight.departure_airport)
        arrival = self.knowledge.congestion(flight.arrival_airport)
        avg_congestion = (departure + arrival) / 2
        impact = (avg_congestion - 1) * 100

        return FactorContribution(
            name="Airport Congestion",
            impact=impact,
            weight=weight,
            description=(
                f"{flight.departure_airport} → {flight.arrival_airport} "
                f"congestion level: {avg_congestion:.2f}x"
            ),
            probability_points=impact * weight,
            delay_minutes=impact * CONGESTION_DELAY_SCALE * weight,
        )

    def _time_of_day_factor(self, departure: pd.Timestamp) -> FactorContribution:
        weight = self.weights["Departure Time"]
        slot = time_slot(departure.hour)
        multiplier = self.knowledge.time_of_day[slot]
        impact = (multiplier - 1) * 100

        return FactorContribution(
            name="Departure Time",
            impact=impact,
            weight=weight,
            description=f"{slot} flights have {multiplier}x delay rate",
            probability_points=abs(impact) * weight,
            delay_minutes=max(0.0, impact * TIME_OF_DAY_DELAY_SCALE) * weight,
        )

    def _season_factor(self, departure: pd.Timestamp) -> FactorContribution:
        weight = self.weights["Seasonal Pattern"]
        season = season_for_month(departure.month)
        multiplier = self.knowledge.seasons[season]
        impact = (multiplier - 1) * 100

        return FactorContribution(
            name="Seasonal Pattern",
            impact=impact,
            weight=weight,
            description=f"{season.capitalize()} season factor: {multiplier}x",
            probability_points=abs(impact) * weight,
            delay_minutes=max(0.0, impact * SEASON_DELAY_SCALE) * weight,
        )

    def _status_factor(self, status: Optional[str]) -> FactorContribution:
        weight = self.weights["Current Status"]
        impact, minutes = STATUS_IMPACT.get(status, (0, 0))

        return FactorContribution(
            name="Current Status",
            impact=float(impact),
            weight=weight,
            description=STATUS_DESCRIPTIONS.get(status, f"Flight status: {status}"),
            probability_points=impact * weight,
            delay_minutes=minutes * weight,
        )

    def _day_of_week_factor(self, departure: pd.Timestamp) -> FactorContribution:
        weight = self.weights["Day of Week"]
        # Monday=0 ... Sunday=6
        is_weekend = departure.dayofweek >= 5
        impact = -DAY_OF_WEEK_IMPACT if is_weekend else DAY_OF_WEEK_IMPACT

        return FactorContribution(
            name="Day of Week",
            impact=float(impact),
            weight=weight,
            description=(
                "Weekend - lower traffic" if is_weekend else "Weekday - higher traffic"
            ),
            probability_points=abs(impact) * weight,
        )

    def _lead_time_factor(self, hours: int) -> Tuple[FactorContribution, int]:
        weight = self.weights["Prediction Timeframe"]
        impact, confidence = lead_time_tier(hours)

        factor = FactorContribution(
            name="Prediction Timeframe",
            impact=float(impact),
            weight=weight,
            description=f"{hours}h until departure",
            probability_points=impact * weight,
        )
        return factor, confidence
