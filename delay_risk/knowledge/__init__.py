"""
Knowledge Package
Static, read-only reference data used by the factor evaluator
"""

from .tables import (
    AirlineProfile,
    KnowledgeBase,
    KnowledgeTable,
    season_for_month,
    time_slot,
)

__all__ = [
    "AirlineProfile",
    "KnowledgeBase",
    "KnowledgeTable",
    "season_for_month",
    "time_slot",
]
