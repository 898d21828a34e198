"""Read helpers for the dashboard: overview bundle, search, ranking, player detail."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from domain.stats.common import DateRange, HeadToHeadStats, MatchRecord, PlayerStats, StatsParameters
from domain.stats.debounce import RecomputeDebouncer
from domain.stats.filters import select_matches
from domain.stats.head_to_head_calculator import HeadToHeadCalculator, HeadToHeadMatrix
from domain.stats.player_calculator import PlayerStatsCalculator

STRONG_WIN_RATE = 60.0
EVEN_WIN_RATE = 50.0


class PlayerSortKey(str, Enum):
    MMR = "mmr"
    WIN_RATE = "win_rate"
    TOTAL_MATCHES = "total_matches"


@dataclass(frozen=True)
class StatsOverview:
    """Everything the dashboard shows for one filter state."""

    player_stats: dict[str, PlayerStats]
    head_to_head: HeadToHeadMatrix
    decisive_matches: int
    date_range: DateRange | None = None


@dataclass(frozen=True)
class PlayerDetailRow:
    opponent: PlayerStats
    stats: HeadToHeadStats


def build_overview(
    matches: Iterable[MatchRecord],
    params: StatsParameters | None = None,
    date_range: DateRange | None = None,
) -> StatsOverview:
    """Compute player stats and the head-to-head matrix over the same window."""
    params = params or StatsParameters()
    match_list = list(matches)
    player_stats = PlayerStatsCalculator(params).calculate(match_list, date_range)
    head_to_head = HeadToHeadCalculator(params).calculate_matrix(
        match_list, player_stats.keys(), date_range
    )
    return StatsOverview(
        player_stats=player_stats,
        head_to_head=head_to_head,
        decisive_matches=count_decisive_matches(match_list, params, date_range),
        date_range=date_range,
    )


class OverviewRecomputer:
    """Rebuild the overview once the requested window has stopped changing.

    An open window is a valid request, so readiness is read from the
    debouncer's pending flag rather than from the polled value.
    """

    def __init__(
        self,
        debouncer: RecomputeDebouncer[DateRange | None],
        params: StatsParameters | None = None,
    ) -> None:
        self.params = params or StatsParameters()
        self._debouncer = debouncer

    @property
    def has_pending(self) -> bool:
        return self._debouncer.has_pending

    def request(self, date_range: DateRange | None = None) -> None:
        self._debouncer.submit(date_range)

    def poll(self, matches: Iterable[MatchRecord]) -> StatsOverview | None:
        if not self._debouncer.has_pending:
            return None
        date_range = self._debouncer.poll()
        if self._debouncer.has_pending:
            return None
        return build_overview(matches, self.params, date_range)


def count_decisive_matches(
    matches: Iterable[MatchRecord],
    params: StatsParameters | None = None,
    date_range: DateRange | None = None,
) -> int:
    return len(select_matches(matches, params or StatsParameters(), date_range))


def search_players(stats: Mapping[str, PlayerStats], query: str) -> list[PlayerStats]:
    needle = query.strip().lower()
    return [player for player in stats.values() if needle in player.player_name.lower()]


def rank_players(
    players: Iterable[PlayerStats],
    key: PlayerSortKey = PlayerSortKey.MMR,
) -> list[PlayerStats]:
    return sorted(players, key=lambda player: getattr(player, key.value), reverse=True)


def win_rate_tier(win_rate: float, matches: int | None = None) -> str:
    if matches == 0:
        return "none"
    if win_rate >= STRONG_WIN_RATE:
        return "strong"
    if win_rate >= EVEN_WIN_RATE:
        return "even"
    return "weak"


def player_detail(
    player_id: str,
    stats: Mapping[str, PlayerStats],
    matrix: HeadToHeadMatrix,
) -> list[PlayerDetailRow]:
    """Head-to-head rows for one player, most-played opponents first.

    Opponents never faced on the opposing side are omitted.
    """
    rows = [
        PlayerDetailRow(opponent=stats[opponent_id], stats=record)
        for opponent_id, record in matrix.get(player_id, {}).items()
        if opponent_id in stats and record.games_against > 0
    ]
    return sorted(rows, key=lambda row: row.stats.games_against, reverse=True)


__all__ = [
    "OverviewRecomputer",
    "PlayerDetailRow",
    "PlayerSortKey",
    "StatsOverview",
    "build_overview",
    "count_decisive_matches",
    "player_detail",
    "rank_players",
    "search_players",
    "win_rate_tier",
]
