"""
Feedback Recorder
Compares a prior delay estimate with the observed delay. Reporting hook only:
the knowledge tables are never updated from here.
"""

import numbers
from typing import Any, Dict, Optional

import pandas as pd

from config.scoring_config import FEEDBACK_TOLERANCE_MINUTES
from delay_risk.utils import get_logger


def classify_accuracy(
    predicted_minutes: float,
    actual_minutes: float,
    tolerance: float = FEEDBACK_TOLERANCE_MINUTES,
) -> str:
    """'accurate' when the estimate is within tolerance minutes, else 'needs_improvement'"""
    if abs(predicted_minutes - actual_minutes) <= tolerance:
        return "accurate"
    return "needs_improvement"


class FeedbackRecorder:
    """
    Records observed outcomes against earlier predictions

    Usage:
        recorder = FeedbackRecorder()
        recorder.record_outcome("AA100", predicted_minutes=20, actual_minutes=32)
    """

    def __init__(
        self,
        tolerance_minutes: float = FEEDBACK_TOLERANCE_MINUTES,
        log_level: str = "INFO",
    ):
        self.tolerance_minutes = tolerance_minutes
        self.logger = get_logger(__name__, log_level)

    def record_outcome(
        self,
        flight_id: str,
        predicted_minutes: float,
        actual_minutes: float,
        recorded_at: Optional[pd.Timestamp] = None,
    ) -> Dict[str, Any]:
        """
        Classify the accuracy of a previous delay estimate

        Args:
            flight_id: Flight number or identifier
            predicted_minutes: Previously estimated delay
            actual_minutes: Observed delay
            recorded_at: Timestamp for the log entry (defaults to now)

        Returns:
            {"success": True, "accuracy": str, "improvement": abs difference}
            or {"success": False, "error": str} for non-numeric input
        """
        for label, value in (("predicted", predicted_minutes), ("actual", actual_minutes)):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                self.logger.error(f"Invalid {label} delay for {flight_id}: {value!r}")
                return {
                    "success": False,
                    "error": f"{label} delay must be a number, got {value!r}",
                }

        difference = abs(predicted_minutes - actual_minutes)
        accuracy = classify_accuracy(
            predicted_minutes, actual_minutes, self.tolerance_minutes
        )

        self.logger.info(
            f"Outcome recorded: flight={flight_id} predicted={predicted_minutes} "
            f"actual={actual_minutes} accuracy={accuracy} "
            f"at={(recorded_at or pd.Timestamp.now()).isoformat()}"
        )

        return {"success": True, "accuracy": accuracy, "improvement": difference}


_default_recorder: Optional[FeedbackRecorder] = None


def record_outcome(
    flight_id: str, predicted_minutes: float, actual_minutes: float
) -> Dict[str, Any]:
    """Convenience function using a shared recorder"""
    global _default_recorder
    if _default_recorder is None:
        _default_recorder = FeedbackRecorder()
    return _default_recorder.record_outcome(flight_id, predicted_minutes, actual_minutes)
