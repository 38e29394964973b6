"""
Data Model for the Delay Risk Scoring Engine

Input (FlightAttributes) and derived output types. Every object is created
fresh per call; to_dict() emits the camelCase contract consumed by the
surrounding application.
"""

from dataclasses import dataclass, field
from collections.abc import Mapping
from numbers import Real
from typing import Any, Dict, List, Optional

import pandas as pd


class FlightDataError(ValueError):
    """Raised when a flight record is missing a required field or is malformed."""


REQUIRED_FIELDS = ("flight_no", "departure_time")


def _parse_timestamp(value: Any, field_name: str) -> pd.Timestamp:
    """
    Parse a timestamp-like value, raising FlightDataError when unparseable

    Numbers are read as epoch milliseconds (JavaScript Date serialization).
    """
    if value is None:
        raise FlightDataError(f"Missing required field: {field_name}")
    if isinstance(value, bool):
        raise FlightDataError(f"Invalid {field_name}: {value!r}")
    try:
        if isinstance(value, Real):
            ts = pd.Timestamp(value, unit="ms")
        else:
            ts = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise FlightDataError(f"Invalid {field_name}: {value!r} ({e})") from e
    if pd.isna(ts):
        raise FlightDataError(f"Invalid {field_name}: {value!r}")
    return ts


@dataclass(frozen=True)
class FlightAttributes:
    """Flight metadata the engine reads; everything else on a record is ignored"""

    flight_no: str
    departure_time: pd.Timestamp
    airline: Optional[str] = None
    departure_airport: Optional[str] = None
    arrival_airport: Optional[str] = None
    arrival_time: Optional[pd.Timestamp] = None
    current_status: Optional[str] = None

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "FlightAttributes":
        """
        Build flight attributes from a caller's record

        Transfer records keep the status under "status"; it is used when
        "current_status" is absent.

        Args:
            record: Dict-like flight details

        Returns:
            FlightAttributes

        Raises:
            FlightDataError: missing flight number/departure time or bad timestamp
        """
        if isinstance(record, cls):
            return record
        if not isinstance(record, Mapping):
            raise FlightDataError(
                f"Flight record must be a mapping, got {type(record).__name__}"
            )

        missing = [
            name
            for name in REQUIRED_FIELDS
            if record.get(name) is None
            or (isinstance(record.get(name), str) and not record.get(name).strip())
        ]
        if missing:
            raise FlightDataError(f"Missing required fields: {missing}")

        flight_no = record["flight_no"]
        if not isinstance(flight_no, str):
            raise FlightDataError(f"flight_no must be a string, got {flight_no!r}")

        arrival = record.get("arrival_time")
        status = record.get("current_status")
        if status is None:
            status = record.get("status")

        return cls(
            flight_no=flight_no,
            departure_time=_parse_timestamp(record["departure_time"], "departure_time"),
            airline=record.get("airline"),
            departure_airport=record.get("departure_airport"),
            arrival_airport=record.get("arrival_airport"),
            arrival_time=(
                _parse_timestamp(arrival, "arrival_time") if arrival is not None else None
            ),
            current_status=status,
        )

    @property
    def airline_code(self) -> str:
        """Airline code embedded in the flight number (digits stripped, upper-cased)"""
        return "".join(ch for ch in self.flight_no if not ch.isdigit()).upper()


@dataclass(frozen=True)
class FactorContribution:
    """One weighted factor category"""

    name: str
    impact: float  # signed raw factor percentage, used for ranking
    weight: float
    description: str
    probability_points: float = 0.0
    delay_minutes: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "impact": f"{self.impact:.1f}%",
            "weight": f"{self.weight:.0%}",
            "description": self.description,
        }


@dataclass(frozen=True)
class Insight:
    type: str
    message: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message, "icon": self.icon}


@dataclass(frozen=True)
class Recommendation:
    action: str
    title: str
    steps: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, "title": self.title, "steps": list(self.steps)}


@dataclass
class PredictionResult:
    """Output of the scoring engine for one flight"""

    flight_number: str
    delay_probability: int
    estimated_delay_minutes: int
    risk_level: str
    risk_color: str
    confidence_score: int
    predicted_at: pd.Timestamp
    factors: List[FactorContribution] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    recommendation: Optional[Recommendation] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flightNumber": self.flight_number,
            "delayProbability": self.delay_probability,
            "estimatedDelayMinutes": self.estimated_delay_minutes,
            "riskLevel": self.risk_level,
            "riskColor": self.risk_color,
            "confidenceScore": self.confidence_score,
            "predictedAt": self.predicted_at.isoformat(),
            "factors": [f.to_dict() for f in self.factors],
            "insights": [i.to_dict() for i in self.insights],
            "recommendation": (
                self.recommendation.to_dict() if self.recommendation else None
            ),
        }


@dataclass
class BatchSummary:
    """Aggregate statistics over a batch of predictions"""

    total: int
    analyzed: int
    high_risk: int
    medium_risk: int
    low_risk: int
    average_delay_probability: Optional[int]  # None when nothing was analyzed
    requires_attention: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "analyzed": self.analyzed,
            "highRisk": self.high_risk,
            "mediumRisk": self.medium_risk,
            "lowRisk": self.low_risk,
            "averageDelayProbability": self.average_delay_probability,
            "requiresAttention": self.requires_attention,
        }


def outcome_to_dict(outcome: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a {success, prediction, error} scoring outcome"""
    prediction = outcome.get("prediction")
    return {
        "success": outcome["success"],
        "prediction": prediction.to_dict() if prediction is not None else None,
        "error": outcome.get("error"),
    }
