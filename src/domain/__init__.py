"""Statistics domain modules."""

from domain.stats.common import DateRange, MatchRecord, Participant, StatsParameters

__all__ = ["DateRange", "MatchRecord", "Participant", "StatsParameters"]
