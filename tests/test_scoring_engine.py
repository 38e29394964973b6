"""
Unit Tests for the Scoring Engine

Tests:
1. Worked examples (baseline and delayed status)
2. Output ranges and clamping
3. Risk tier boundaries
4. Confidence score
5. Failures returned as data
6. Idempotence
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import itertools

import pytest
import pandas as pd
from config.scoring_config import FACTOR_WEIGHTS
from delay_risk.schemas import FlightAttributes, PredictionResult, outcome_to_dict
from delay_risk.scoring import (
    DelayRiskEngine,
    FactorEvaluator,
    classify_risk,
    confidence_score,
    predict_flight_delay,
)
from delay_risk.scoring.engine import round_half_up


class TestWorkedExamples:
    def test_baseline_flight(self, engine, baseline_flight, now):
        """5.25 -> 5%, 11.25 -> 11 min, confidence 40 + 5 + 15."""
        outcome = engine.predict(baseline_flight, now=now)

        assert outcome["success"] is True
        assert outcome["error"] is None
        prediction = outcome["prediction"]
        assert isinstance(prediction, PredictionResult)
        assert prediction.flight_number == "ZZ123"
        assert prediction.delay_probability == 5
        assert prediction.estimated_delay_minutes == 11
        assert prediction.confidence_score == 60
        assert prediction.risk_level == "low"
        assert prediction.risk_color == "green"

    def test_delayed_status(self, engine, baseline_flight, now):
        """Delayed adds 40 x 0.20 = 8 points and 30 x 0.20 = 6 minutes."""
        prediction = engine.predict(
            dict(baseline_flight, current_status="delayed"), now=now
        )["prediction"]

        assert prediction.delay_probability == 13
        assert prediction.estimated_delay_minutes == 17
        assert prediction.confidence_score == 75

    def test_status_alias(self, engine, baseline_flight, now):
        """Transfer records carry the status under 'status'."""
        record = dict(baseline_flight, status="delayed")
        del record["current_status"]

        prediction = engine.predict(record, now=now)["prediction"]
        assert prediction.delay_probability == 13

    def test_epoch_millisecond_times(self, engine, baseline_flight, now):
        record = dict(
            baseline_flight,
            departure_time=pd.Timestamp("2025-04-16 13:00").value // 1_000_000,
            arrival_time=float(pd.Timestamp("2025-04-16 16:00").value // 1_000_000),
        )

        outcome = engine.predict(record, now=now)

        assert outcome["success"] is True
        assert outcome["prediction"].delay_probability == 5
        assert outcome["prediction"].factors[-1].description == "30h until departure"
        assert outcome == engine.predict(baseline_flight, now=now)

    def test_accepts_flight_attributes(self, engine, baseline_flight, now):
        flight = FlightAttributes.from_mapping(baseline_flight)
        assert engine.predict(flight, now=now)["prediction"].delay_probability == 5

    def test_busy_winter_evening(self, engine, now):
        prediction = engine.predict(
            {
                "flight_no": "UA920",
                "airline": "United Airlines",
                "departure_airport": "LHR",
                "arrival_airport": "ORD",
                "departure_time": "2025-01-10 19:30",
                "current_status": "delayed",
            },
            now=pd.Timestamp("2025-01-10 15:00"),
        )["prediction"]

        # 5.25 + 7.5 + 5 + 4.5 + 8 + 0.25 + 0.4 = 30.9
        assert prediction.delay_probability == 31
        # 11.25 + 3.75 + 1.5 + 1.8 + 6 = 24.3
        assert prediction.estimated_delay_minutes == 24
        # 40 + 15 + 30
        assert prediction.confidence_score == 85


class TestRanges:
    def test_bounds_over_many_flights(self, engine, baseline_flight, now):
        airlines = ["AA1", "UA2", "EK3", "ZZ4"]
        airports = [("JFK", "LHR"), ("AAA", "BBB")]
        times = ["2025-04-15 07:30", "2025-04-15 19:00", "2025-12-20 03:00"]
        statuses = ["on_time", "delayed", "boarding", "departed", "cancelled"]

        for flight_no, (dep, arr), dep_time, status in itertools.product(
            airlines, airports, times, statuses
        ):
            prediction = engine.predict(
                dict(
                    baseline_flight,
                    flight_no=flight_no,
                    departure_airport=dep,
                    arrival_airport=arr,
                    departure_time=dep_time,
                    current_status=status,
                ),
                now=now,
            )["prediction"]

            assert 0 <= prediction.delay_probability <= 100
            assert 0 <= prediction.confidence_score <= 100
            assert prediction.estimated_delay_minutes >= 0
            assert prediction.risk_level == classify_risk(prediction.delay_probability)[0]

    def test_probability_clamped_high(self, engine, baseline_flight, now):
        engine.evaluator = FactorEvaluator(
            engine.knowledge, weights={k: 10.0 for k in FACTOR_WEIGHTS}
        )
        prediction = engine.predict(baseline_flight, now=now)["prediction"]

        assert prediction.delay_probability == 100
        assert prediction.risk_level == "high"
        assert prediction.risk_color == "red"
        assert prediction.recommendation.action == "immediate"

    def test_negative_totals_floored(self, engine, baseline_flight, now):
        engine.evaluator = FactorEvaluator(
            engine.knowledge, weights={k: -1.0 for k in FACTOR_WEIGHTS}
        )
        prediction = engine.predict(baseline_flight, now=now)["prediction"]

        assert prediction.delay_probability == 0
        assert prediction.estimated_delay_minutes == 0


class TestRiskTier:
    @pytest.mark.parametrize(
        "probability,level,color",
        [
            (0, "low", "green"),
            (39, "low", "green"),
            (40, "medium", "orange"),
            (69, "medium", "orange"),
            (70, "high", "red"),
            (100, "high", "red"),
        ],
    )
    def test_boundaries(self, probability, level, color):
        assert classify_risk(probability) == (level, color)


class TestConfidence:
    @pytest.mark.parametrize(
        "lead_bonus,status,expected",
        [
            (5, "on_time", 60),
            (25, "on_time", 80),
            (25, "delayed", 95),
            (25, "boarding", 95),
            (15, "departed", 70),
            (10, None, 65),
        ],
    )
    def test_components(self, lead_bonus, status, expected):
        assert confidence_score(lead_bonus, status) == expected

    def test_clamped(self):
        assert confidence_score(500, "delayed") == 100
        assert confidence_score(-500, "on_time") == 0


class TestRounding:
    @pytest.mark.parametrize(
        "value,expected", [(5.25, 5), (5.5, 6), (6.5, 7), (17.25, 17), (0.49, 0)]
    )
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestFailures:
    def test_malformed_timestamp(self, engine, baseline_flight, now):
        outcome = engine.predict(
            dict(baseline_flight, departure_time="not-a-date"), now=now
        )

        assert outcome["success"] is False
        assert outcome["prediction"] is None
        assert "departure_time" in outcome["error"]

    @pytest.mark.parametrize("value", [True, float("nan")])
    def test_non_time_numeric_departure(self, engine, baseline_flight, now, value):
        outcome = engine.predict(dict(baseline_flight, departure_time=value), now=now)

        assert outcome["success"] is False
        assert outcome["prediction"] is None
        assert "departure_time" in outcome["error"]

    def test_malformed_arrival(self, engine, baseline_flight, now):
        outcome = engine.predict(dict(baseline_flight, arrival_time="soon"), now=now)
        assert outcome["success"] is False

    def test_missing_flight_number(self, engine, baseline_flight, now):
        record = dict(baseline_flight)
        del record["flight_no"]

        outcome = engine.predict(record, now=now)
        assert outcome["success"] is False
        assert "flight_no" in outcome["error"]

    def test_not_a_mapping(self, engine, now):
        outcome = engine.predict(42, now=now)
        assert outcome["success"] is False
        assert outcome["prediction"] is None


class TestIdempotence:
    def test_same_input_same_output(self, engine, baseline_flight, now):
        first = engine.predict(baseline_flight, now=now)
        second = engine.predict(baseline_flight, now=now)

        assert first == second
        assert outcome_to_dict(first) == outcome_to_dict(second)

    def test_predicted_at_is_now(self, engine, baseline_flight, now):
        prediction = engine.predict(baseline_flight, now=now)["prediction"]
        assert prediction.predicted_at == now

    def test_default_engine(self, baseline_flight, now):
        assert predict_flight_delay(baseline_flight, now=now) == DelayRiskEngine().predict(
            baseline_flight, now=now
        )


class TestSerialization:
    def test_wire_contract(self, engine, baseline_flight, now):
        payload = outcome_to_dict(engine.predict(baseline_flight, now=now))
        prediction = payload["prediction"]

        assert set(prediction) == {
            "flightNumber",
            "delayProbability",
            "estimatedDelayMinutes",
            "riskLevel",
            "riskColor",
            "confidenceScore",
            "predictedAt",
            "factors",
            "insights",
            "recommendation",
        }
        assert prediction["factors"][0] == {
            "name": "Airline Performance",
            "impact": "20.0%",
            "weight": "25%",
            "description": "Test Air has 80.0% on-time performance",
        }
        # Must be JSON serializable as-is
        json.dumps(payload)
