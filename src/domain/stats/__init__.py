"""Match-history statistics engine."""

from domain.stats.common import (
    DateRange,
    HeadToHeadMethod,
    HeadToHeadStats,
    MatchOrder,
    MatchRecord,
    Participant,
    PlayerStats,
    StatsParameters,
    TeamCompositionResult,
    TeammateSuggestion,
)
from domain.stats.debounce import RecomputeDebouncer
from domain.stats.head_to_head_calculator import HeadToHeadCalculator
from domain.stats.overview import OverviewRecomputer
from domain.stats.player_calculator import PlayerStatsCalculator
from domain.stats.team_composition import TeamCompositionQuery

__all__ = [
    "DateRange",
    "HeadToHeadCalculator",
    "HeadToHeadMethod",
    "HeadToHeadStats",
    "MatchOrder",
    "MatchRecord",
    "OverviewRecomputer",
    "Participant",
    "PlayerStats",
    "PlayerStatsCalculator",
    "RecomputeDebouncer",
    "StatsParameters",
    "TeamCompositionQuery",
    "TeamCompositionResult",
    "TeammateSuggestion",
]
