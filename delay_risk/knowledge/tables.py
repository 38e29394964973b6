"""
Knowledge Tables
Read-only reference data for airline performance, airport congestion,
time-of-day and seasonal delay patterns
"""

from dataclasses import dataclass
from types import MappingProxyType
from collections.abc import Mapping
from typing import Any, Hashable, Iterator, Optional

from config.scoring_config import (
    AIRLINE_PERFORMANCE,
    AIRPORT_CONGESTION,
    DEFAULT_KEY,
    FALLBACK_TIME_SLOT,
    SEASON_MONTHS,
    SEASONAL_FACTORS,
    TIME_OF_DAY_PATTERNS,
    TIME_SLOT_HOURS,
)


@dataclass(frozen=True)
class AirlineProfile:
    on_time_rate: float
    avg_delay: float


class KnowledgeTable(Mapping):
    """
    Immutable lookup table with an optional explicit default entry

    Usage:
        table = KnowledgeTable("congestion", {"JFK": 1.3, "DEFAULT": 1.0})
        table.lookup_or_default("XYZ")  # -> 1.0
    """

    def __init__(
        self,
        name: str,
        entries: Mapping[Hashable, Any],
        default_key: Optional[Hashable] = DEFAULT_KEY,
    ):
        if default_key is not None and default_key not in entries:
            raise ValueError(f"Table '{name}' has no default entry '{default_key}'")

        self.name = name
        self.default_key = default_key
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: Hashable) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KnowledgeTable({self.name!r}, {len(self)} entries)"

    @property
    def default(self) -> Any:
        if self.default_key is None:
            raise KeyError(f"Table '{self.name}' has no default entry")
        return self._entries[self.default_key]

    def lookup_or_default(self, key: Optional[Hashable]) -> Any:
        """Return the entry for key, or the default entry when key is absent"""
        if key is not None and key in self._entries:
            return self._entries[key]
        return self.default


def time_slot(hour: int) -> str:
    """Map a departure hour (0-23) to its time-of-day bucket"""
    for slot, start, end in TIME_SLOT_HOURS:
        if start <= hour < end:
            return slot
    return FALLBACK_TIME_SLOT


def season_for_month(month: int) -> str:
    """Map a calendar month (1-12) to its season"""
    if month not in SEASON_MONTHS:
        raise ValueError(f"Invalid month: {month}")
    return SEASON_MONTHS[month]


@dataclass(frozen=True)
class KnowledgeBase:
    """Bundle of the four knowledge tables; safe to share between threads"""

    airlines: KnowledgeTable
    airports: KnowledgeTable
    time_of_day: KnowledgeTable
    seasons: KnowledgeTable

    @classmethod
    def from_config(cls) -> "KnowledgeBase":
        return cls(
            airlines=KnowledgeTable(
                "airline_performance",
                {
                    code: AirlineProfile(**values)
                    for code, values in AIRLINE_PERFORMANCE.items()
                },
            ),
            airports=KnowledgeTable("airport_congestion", AIRPORT_CONGESTION),
            time_of_day=KnowledgeTable(
                "time_of_day", TIME_OF_DAY_PATTERNS, default_key=None
            ),
            seasons=KnowledgeTable("seasons", SEASONAL_FACTORS, default_key=None),
        )

    def airline(self, code: Optional[str]) -> AirlineProfile:
        return self.airlines.lookup_or_default(code)

    def congestion(self, airport: Optional[str]) -> float:
        return self.airports.lookup_or_default(airport)

    def time_multiplier(self, hour: int) -> float:
        return self.time_of_day[time_slot(hour)]

    def season_multiplier(self, month: int) -> float:
        return self.seasons[season_for_month(month)]
