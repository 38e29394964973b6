"""
Scoring Package
Provides delay risk scoring for single flights and batches, plus outcome feedback
"""

from .engine import (
    DelayRiskEngine,
    classify_risk,
    confidence_score,
    get_default_engine,
    predict_flight_delay,
)
from .factors import FactorEvaluation, FactorEvaluator, hours_until
from .insights import generate_insights, get_recommendation
from .batch import (
    BatchAggregator,
    batch_predict_delays,
    batch_to_dict,
    filter_active,
    predictions_to_frame,
    rank_high_risk,
    summarize,
)
from .feedback import FeedbackRecorder, classify_accuracy, record_outcome

__all__ = [
    # Engine
    "DelayRiskEngine",
    "classify_risk",
    "confidence_score",
    "get_default_engine",
    "predict_flight_delay",
    # Factors
    "FactorEvaluation",
    "FactorEvaluator",
    "hours_until",
    # Insights
    "generate_insights",
    "get_recommendation",
    # Batch
    "BatchAggregator",
    "batch_predict_delays",
    "batch_to_dict",
    "filter_active",
    "predictions_to_frame",
    "rank_high_risk",
    "summarize",
    # Feedback
    "FeedbackRecorder",
    "classify_accuracy",
    "record_outcome",
]
