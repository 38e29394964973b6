"""
Scoring Configuration Module
Centralizes the knowledge tables, factor weights and thresholds used by the
flight delay risk scoring engine
"""

from typing import Dict, Any

# ============================================================================
# LOGGING
# ============================================================================

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ============================================================================
# KNOWLEDGE TABLES
# ============================================================================

# Key used for the fallback entry of every lookup table
DEFAULT_KEY = "DEFAULT"

# Historical airline on-time performance (industry averages)
AIRLINE_PERFORMANCE = {
    "AA": {"on_time_rate": 0.82, "avg_delay": 42},  # American Airlines
    "UA": {"on_time_rate": 0.79, "avg_delay": 45},  # United Airlines
    "DL": {"on_time_rate": 0.85, "avg_delay": 38},  # Delta
    "WN": {"on_time_rate": 0.81, "avg_delay": 40},  # Southwest
    "BA": {"on_time_rate": 0.84, "avg_delay": 39},  # British Airways
    "LH": {"on_time_rate": 0.86, "avg_delay": 35},  # Lufthansa
    "AF": {"on_time_rate": 0.83, "avg_delay": 41},  # Air France
    "EK": {"on_time_rate": 0.88, "avg_delay": 32},  # Emirates
    DEFAULT_KEY: {"on_time_rate": 0.80, "avg_delay": 45},
}

# Airport congestion multipliers (1.0 = baseline)
AIRPORT_CONGESTION = {
    "JFK": 1.3,
    "LAX": 1.25,
    "ORD": 1.35,
    "ATL": 1.3,
    "LHR": 1.4,
    "CDG": 1.35,
    "FRA": 1.25,
    "DXB": 1.2,
    DEFAULT_KEY: 1.0,
}

# Departure time-of-day delay multipliers
TIME_OF_DAY_PATTERNS = {
    "early_morning": 0.7,  # 05-07 (less delays)
    "morning": 0.85,  # 07-11
    "midday": 1.0,  # 11-15
    "afternoon": 1.15,  # 15-18 (peak delays)
    "evening": 1.25,  # 18-21 (cascading delays)
    "night": 1.1,  # 21-05
}

# Hour ranges [start, end) per slot; anything not covered is "night"
TIME_SLOT_HOURS = [
    ("early_morning", 5, 7),
    ("morning", 7, 11),
    ("midday", 11, 15),
    ("afternoon", 15, 18),
    ("evening", 18, 21),
]
FALLBACK_TIME_SLOT = "night"

# Seasonal delay multipliers
SEASONAL_FACTORS = {
    "winter": 1.3,  # Dec-Feb (weather issues)
    "spring": 1.0,  # Mar-May
    "summer": 1.15,  # Jun-Aug (high traffic)
    "fall": 0.95,  # Sep-Nov
}

# Calendar month (1-12) -> season
SEASON_MONTHS = {
    12: "winter",
    1: "winter",
    2: "winter",
    3: "spring",
    4: "spring",
    5: "spring",
    6: "summer",
    7: "summer",
    8: "summer",
    9: "fall",
    10: "fall",
    11: "fall",
}

# ============================================================================
# FACTOR WEIGHTS
# ============================================================================

# Nominal share of the scoring mass per factor. Sums to 1.10.
FACTOR_WEIGHTS = {
    "Airline Performance": 0.25,
    "Airport Congestion": 0.20,
    "Departure Time": 0.20,
    "Seasonal Pattern": 0.15,
    "Current Status": 0.20,
    "Day of Week": 0.05,
    "Prediction Timeframe": 0.05,
}

# Delay-minutes scaling applied to the raw factor before weighting
CONGESTION_DELAY_SCALE = 0.5
TIME_OF_DAY_DELAY_SCALE = 0.3
SEASON_DELAY_SCALE = 0.4

# Current status -> (probability impact, delay-minutes impact)
STATUS_IMPACT = {
    "delayed": (40, 30),
    "boarding": (10, 0),
    "departed": (10, 0),
}

STATUS_DESCRIPTIONS = {
    "delayed": "Flight is already showing delay status",
    "boarding": "Flight is active and on schedule",
    "departed": "Flight is active and on schedule",
}

# Weekend is negative, weekday positive; only the magnitude is scored
DAY_OF_WEEK_IMPACT = 5

# Lead time tiers: (hours below, probability impact, confidence bonus)
LEAD_TIME_TIERS = [
    (2, 15, 25),
    (12, 8, 15),
    (24, 5, 10),
]
LEAD_TIME_FALLBACK = (0, 5)

# ============================================================================
# SCORING
# ============================================================================

CONFIDENCE_BASE = 40
REALTIME_STATUSES = ("delayed", "boarding")
REALTIME_STATUS_BONUS = 30
STANDARD_STATUS_BONUS = 15

# Risk thresholds on the rounded delay probability (fixed, not tunable)
RISK_THRESHOLDS = {
    "high": 70,
    "medium": 40,
}

RISK_COLORS = {
    "high": "red",
    "medium": "orange",
    "low": "green",
}

# Lead time horizons (hours) for the time-based insight
URGENT_HORIZON_HOURS = 2
LONG_RANGE_HORIZON_HOURS = 24

# ============================================================================
# BATCH & DASHBOARD
# ============================================================================

BATCH_CONFIG = {
    "n_jobs": 4,  # Worker threads per batch
    "backend": "threading",  # joblib backend
    "timeout": None,  # Seconds, None = wait indefinitely
    "max_batch_size": 100,  # Larger batches are scored with a warning
}

# Statuses considered "active" when building dashboards
ACTIVE_STATUSES = ["on_time", "delayed", "boarding", "departed"]

# Dashboard windows (hours ahead of now)
DASHBOARD_WINDOWS_HOURS = {
    "next6Hours": 6,
    "next24Hours": 24,
}

# ============================================================================
# FEEDBACK
# ============================================================================

FEEDBACK_TOLERANCE_MINUTES = 15

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def get_factor_weight(factor_name: str) -> float:
    """
    Get the nominal weight of a scoring factor

    Args:
        factor_name: One of FACTOR_WEIGHTS keys

    Returns:
        Weight as a fraction
    """
    if factor_name not in FACTOR_WEIGHTS:
        raise ValueError(
            f"Unknown factor: {factor_name}. Available: {list(FACTOR_WEIGHTS)}"
        )
    return FACTOR_WEIGHTS[factor_name]


def get_batch_config(**overrides) -> Dict[str, Any]:
    """
    Get batch configuration with optional overrides

    Args:
        **overrides: Keys of BATCH_CONFIG to replace (None values are ignored)

    Returns:
        Batch configuration dictionary
    """
    unknown = set(overrides) - set(BATCH_CONFIG)
    if unknown:
        raise ValueError(f"Unknown batch settings: {sorted(unknown)}")

    config = dict(BATCH_CONFIG)
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def total_factor_weight() -> float:
    """Sum of nominal factor weights (1.10 as shipped)."""
    return sum(FACTOR_WEIGHTS.values())


if __name__ == "__main__":
    print("=" * 60)
    print("SCORING CONFIGURATION TEST")
    print("=" * 60)
    print(f"Airlines: {len(AIRLINE_PERFORMANCE) - 1} (+ default)")
    print(f"Airports: {len(AIRPORT_CONGESTION) - 1} (+ default)")
    print(f"Time slots: {list(TIME_OF_DAY_PATTERNS)}")
    print(f"Seasons: {list(SEASONAL_FACTORS)}")
    print()

    print("Factor Weights:")
    for name, weight in FACTOR_WEIGHTS.items():
        print(f"  {name:<22} {weight:.0%}")
    print(f"  {'TOTAL':<22} {total_factor_weight():.0%}")
    print()

    print(f"Risk thresholds: {RISK_THRESHOLDS}")
    print(f"Batch config: {get_batch_config()}")
    print("=" * 60)
