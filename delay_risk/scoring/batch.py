"""
Batch Aggregator
Scores collections of flights and summarizes the results

Features:
- Bounded parallel fan-out (joblib) with results kept in input order
- Per-item error isolation and an optional deadline for the whole batch
- Risk summaries, high-risk ranking and time-window dashboards
"""

import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from config.scoring_config import (
    ACTIVE_STATUSES,
    DASHBOARD_WINDOWS_HOURS,
    get_batch_config,
)
from delay_risk.schemas import BatchSummary, outcome_to_dict
from delay_risk.scoring.engine import DelayRiskEngine, FlightInput, round_half_up
from delay_risk.utils import get_logger


def summarize(predictions: Sequence[Dict[str, Any]]) -> BatchSummary:
    """
    Compute summary statistics for a batch of scoring outcomes

    Args:
        predictions: Outcomes as returned by DelayRiskEngine.predict

    Returns:
        BatchSummary (average is None when nothing was analyzed)
    """
    analyzed = [
        p["prediction"]
        for p in predictions
        if p.get("success") and p.get("prediction") is not None
    ]
    if not analyzed:
        return BatchSummary(
            total=len(predictions),
            analyzed=0,
            high_risk=0,
            medium_risk=0,
            low_risk=0,
            average_delay_probability=None,
            requires_attention=0,
        )

    df = pd.DataFrame(
        {
            "risk_level": [p.risk_level for p in analyzed],
            "delay_probability": [p.delay_probability for p in analyzed],
        }
    )
    counts = df["risk_level"].value_counts()
    high = int(counts.get("high", 0))
    medium = int(counts.get("medium", 0))
    low = int(counts.get("low", 0))

    return BatchSummary(
        total=len(predictions),
        analyzed=len(df),
        high_risk=high,
        medium_risk=medium,
        low_risk=low,
        average_delay_probability=round_half_up(float(df["delay_probability"].mean())),
        requires_attention=high + medium,
    )


def predictions_to_frame(batch_result: Dict[str, Any]) -> pd.DataFrame:
    """One row per input position with the headline fields of each outcome"""
    rows = []
    for index, outcome in enumerate(batch_result["predictions"]):
        prediction = outcome.get("prediction")
        rows.append(
            {
                "index": index,
                "success": outcome["success"],
                "flight_number": prediction.flight_number if prediction else None,
                "delay_probability": prediction.delay_probability if prediction else None,
                "estimated_delay_minutes": (
                    prediction.estimated_delay_minutes if prediction else None
                ),
                "risk_level": prediction.risk_level if prediction else None,
                "confidence_score": prediction.confidence_score if prediction else None,
                "error": outcome.get("error"),
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "index",
            "success",
            "flight_number",
            "delay_probability",
            "estimated_delay_minutes",
            "risk_level",
            "confidence_score",
            "error",
        ],
    )


def batch_to_dict(batch_result: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a batch result to the camelCase wire contract"""
    payload = {
        "success": batch_result["success"],
        "totalFlights": batch_result["totalFlights"],
        "predictions": [outcome_to_dict(p) for p in batch_result["predictions"]],
        "summary": batch_result["summary"].to_dict(),
    }
    if batch_result.get("error"):
        payload["error"] = batch_result["error"]
    return payload


def rank_high_risk(
    records: Sequence[Mapping[str, Any]], batch_result: Dict[str, Any]
) -> List[Dict[str, Any]]:
    """
    Pair high-risk predictions with their source records

    Args:
        records: Flight records in the order they were scored
        batch_result: Result of batch_predict over the same records

    Returns:
        [{"index", "record", "prediction"}] sorted by delay probability, highest first
    """
    predictions = batch_result["predictions"]
    if len(predictions) != len(records):
        raise ValueError(
            f"Batch has {len(predictions)} predictions for {len(records)} records"
        )

    ranked = [
        {"index": index, "record": record, "prediction": outcome["prediction"]}
        for index, (record, outcome) in enumerate(zip(records, predictions))
        if outcome.get("success") and outcome["prediction"].risk_level == "high"
    ]
    ranked.sort(key=lambda item: item["prediction"].delay_probability, reverse=True)
    return ranked


def _status_of(record: Mapping[str, Any]) -> Optional[str]:
    status = record.get("current_status")
    return status if status is not None else record.get("status")


def _to_utc(now: Optional[pd.Timestamp]) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    now = pd.Timestamp(now)
    return now.tz_localize("UTC") if now.tz is None else now.tz_convert("UTC")


def filter_active(
    records: Sequence[Mapping[str, Any]],
    now: Optional[pd.Timestamp] = None,
    horizon_hours: float = 24,
) -> List[Mapping[str, Any]]:
    """
    Select records with an active status arriving within the next horizon_hours

    Naive timestamps are treated as UTC. Records with a missing or unparseable
    arrival time are skipped.

    Args:
        records: Flight records
        now: Reference time
        horizon_hours: Window length in hours

    Returns:
        Matching records, in input order
    """
    if not records:
        return []

    now = _to_utc(now)
    statuses = pd.Series([_status_of(r) for r in records], dtype="object")
    arrivals = pd.to_datetime(
        pd.Series([r.get("arrival_time") for r in records], dtype="object"),
        errors="coerce",
        utc=True,
        format="mixed",
    )

    mask = (
        statuses.isin(ACTIVE_STATUSES)
        & arrivals.ge(now)
        & arrivals.le(now + pd.Timedelta(hours=horizon_hours))
    )
    return [records[i] for i in np.flatnonzero(mask.to_numpy())]


class BatchAggregator:
    """
    Runs the scoring engine across a collection of flights

    Usage:
        aggregator = BatchAggregator()
        result = aggregator.batch_predict(flights, timeout=30)
        result["summary"].requires_attention
    """

    def __init__(
        self,
        engine: Optional[DelayRiskEngine] = None,
        n_jobs: Optional[int] = None,
        log_level: str = "INFO",
    ):
        """
        Initialize aggregator

        Args:
            engine: Scoring engine (a new one is built if omitted)
            n_jobs: Worker threads, defaults to BATCH_CONFIG["n_jobs"]
            log_level: Logging level
        """
        self.engine = engine or DelayRiskEngine(log_level=log_level)
        self.config = get_batch_config(n_jobs=n_jobs)
        self.logger = get_logger(__name__, log_level)

    def batch_predict(
        self,
        flights: Iterable[FlightInput],
        now: Optional[pd.Timestamp] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Score every flight; predictions[i] corresponds to flights[i]

        Args:
            flights: Flight records
            now: Reference time shared by all flights (defaults to the current time)
            timeout: Deadline in seconds for the whole batch (overrides BATCH_CONFIG)

        Returns:
            {"success", "totalFlights", "predictions", "summary"} plus "error"
            when the batch timed out
        """
        flights = list(flights)
        timeout = timeout if timeout is not None else self.config["timeout"]

        if len(flights) > self.config["max_batch_size"]:
            self.logger.warning(
                f"Batch of {len(flights)} flights exceeds "
                f"max_batch_size={self.config['max_batch_size']}"
            )

        deadline = time.monotonic() + timeout if timeout is not None else None
        outputs = Parallel(
            n_jobs=self.config["n_jobs"],
            backend=self.config["backend"],
            return_as="generator",
        )(delayed(self.engine.predict)(flight, now) for flight in flights)

        predictions = []
        for outcome in outputs:
            predictions.append(outcome)
            if deadline is not None and time.monotonic() > deadline:
                # Abandons the tasks that have not started yet
                outputs.close()
                self.logger.error(
                    f"Batch of {len(flights)} flights timed out after {timeout}s "
                    f"({len(predictions)} scored)"
                )
                return {
                    "success": False,
                    "error": f"Batch timed out after {timeout}s",
                    "totalFlights": len(flights),
                    "predictions": [],
                    "summary": summarize([]),
                }

        summary = summarize(predictions)
        self.logger.info(
            f"Batch scored: {summary.analyzed}/{len(flights)} analyzed, "
            f"{summary.requires_attention} require attention"
        )

        return {
            "success": True,
            "totalFlights": len(flights),
            "predictions": predictions,
            "summary": summary,
        }

    def build_dashboard(
        self,
        records: Sequence[Mapping[str, Any]],
        now: Optional[pd.Timestamp] = None,
    ) -> Dict[str, Any]:
        """
        Risk overview for active flights arriving in the configured windows

        Args:
            records: Flight records (e.g. flight details of open transfers)
            now: Reference time

        Returns:
            Dashboard dict with "overview", one block per window and "generatedAt"
        """
        now = _to_utc(now)
        dashboard = {"overview": {}}

        for window, hours in DASHBOARD_WINDOWS_HOURS.items():
            active = filter_active(records, now, hours)
            summary = (
                self.batch_predict(active, now=now)["summary"]
                if active
                else summarize([])
            )
            suffix = f"Next{hours}h"

            dashboard["overview"].update(
                {
                    f"totalFlights{suffix}": len(active),
                    f"highRisk{suffix}": summary.high_risk,
                    f"mediumRisk{suffix}": summary.medium_risk,
                    f"avgDelayProbability{hours}h": summary.average_delay_probability
                    or 0,
                }
            )
            dashboard[window] = {
                "transfers": len(active),
                "predictions": summary.to_dict(),
                "requiresAttention": summary.requires_attention,
            }

        dashboard["generatedAt"] = now.isoformat()
        return dashboard


_default_aggregator: Optional[BatchAggregator] = None


def batch_predict_delays(
    flights: Iterable[FlightInput],
    now: Optional[pd.Timestamp] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """Convenience function to score a batch with the default aggregator"""
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = BatchAggregator()
    return _default_aggregator.batch_predict(flights, now=now, timeout=timeout)
