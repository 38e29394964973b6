"""
Shared pytest fixtures for delay risk scoring tests.
Baseline flight: unknown airline and airports (defaults), midday, spring,
weekday, on_time, 30 hours ahead of NOW.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
import pandas as pd

from delay_risk.knowledge import KnowledgeBase
from delay_risk.scoring import BatchAggregator, DelayRiskEngine, FactorEvaluator

NOW = pd.Timestamp("2025-04-15 07:00")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def baseline_flight():
    """
    Neutral flight: only the default airline and the weekday factor add
    probability (20 x 0.25 + 5 x 0.05 = 5.25).
    """
    return {
        "flight_no": "ZZ123",
        "airline": "Test Air",
        "departure_airport": "AAA",
        "arrival_airport": "BBB",
        "departure_time": "2025-04-16 13:00",  # Wednesday
        "arrival_time": "2025-04-16 16:00",
        "current_status": "on_time",
        # Extra fields from a transfer record are ignored
        "customer_name": "Jane Doe",
        "vendor_name": "City Cars",
    }


@pytest.fixture
def knowledge():
    return KnowledgeBase.from_config()


@pytest.fixture
def evaluator(knowledge):
    return FactorEvaluator(knowledge)


@pytest.fixture
def engine():
    return DelayRiskEngine()


@pytest.fixture
def aggregator(engine):
    return BatchAggregator(engine=engine, n_jobs=2)


@pytest.fixture
def mixed_flights(baseline_flight):
    """Five flights; the one at index 2 has an unparseable departure time."""
    flights = []
    for i, (flight_no, status) in enumerate(
        [
            ("AA100", "on_time"),
            ("UA200", "delayed"),
            ("BROKEN", "on_time"),
            ("DL300", "boarding"),
            ("EK400", "departed"),
        ]
    ):
        flight = dict(baseline_flight, flight_no=flight_no, current_status=status)
        flights.append(flight)
    flights[2]["departure_time"] = "not-a-date"
    return flights
