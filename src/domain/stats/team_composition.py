"""Team-of-N vs team-of-M win/loss queries and teammate suggestions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from domain.stats.common import (
    DateRange,
    MatchRecord,
    StatsParameters,
    TeamCompositionResult,
    TeammateSuggestion,
)
from domain.stats.filters import EligibleMatch, select_matches

MAX_ROSTER_SIZE = 5


class TeamCompositionQuery:
    """Count decisive matches where two rosters sat on opposing sides.

    Each roster must be contained in one side (extra players on that side are
    allowed); the match counts when exactly one side assignment fits.
    """

    def __init__(self, params: StatsParameters | None = None) -> None:
        self.params = params or StatsParameters()

    def compare(
        self,
        matches: Iterable[MatchRecord],
        team1_ids: Sequence[str],
        team2_ids: Sequence[str],
        date_range: DateRange | None = None,
    ) -> TeamCompositionResult:
        if not team1_ids or not team2_ids:
            return TeamCompositionResult()
        _validate_rosters(team1_ids, team2_ids)

        eligible = select_matches(matches, self.params, date_range)
        return self._tally(eligible, frozenset(team1_ids), frozenset(team2_ids))

    def suggest_teammates(
        self,
        matches: Iterable[MatchRecord],
        team1_ids: Sequence[str],
        team2_ids: Sequence[str],
        candidate_ids: Iterable[str],
        date_range: DateRange | None = None,
    ) -> list[TeammateSuggestion]:
        """Rank candidates by how many games roster 1 plus the candidate has vs roster 2."""
        if not team1_ids or not team2_ids or len(team1_ids) >= MAX_ROSTER_SIZE:
            return []
        _validate_rosters(team1_ids, team2_ids)

        eligible = select_matches(matches, self.params, date_range)
        team1 = frozenset(team1_ids)
        team2 = frozenset(team2_ids)

        suggestions: list[TeammateSuggestion] = []
        for candidate_id in dict.fromkeys(candidate_ids):
            if candidate_id in team1 or candidate_id in team2:
                continue
            result = self._tally(eligible, team1 | {candidate_id}, team2)
            if result.total_games > 0:
                suggestions.append(TeammateSuggestion(player_id=candidate_id, result=result))

        # sorted() is stable, ties keep candidate order.
        return sorted(suggestions, key=lambda suggestion: suggestion.total_games, reverse=True)

    @staticmethod
    def _tally(
        eligible: Sequence[EligibleMatch],
        team1: frozenset[str],
        team2: frozenset[str],
    ) -> TeamCompositionResult:
        total_games = 0
        team1_wins = 0
        for item in eligible:
            side0 = item.side_ids(0)
            side1 = item.side_ids(1)
            assignments = [
                side
                for side, (own, other) in enumerate(((side0, side1), (side1, side0)))
                if team1 <= own and team2 <= other
            ]
            if len(assignments) != 1:
                continue

            total_games += 1
            if item.winner == assignments[0]:
                team1_wins += 1

        return TeamCompositionResult(
            total_games=total_games,
            team1_wins=team1_wins,
            team2_wins=total_games - team1_wins,
        )


def _validate_rosters(team1_ids: Sequence[str], team2_ids: Sequence[str]) -> None:
    overlap = set(team1_ids) & set(team2_ids)
    if overlap:
        raise ValueError(f"players cannot be on both rosters: {sorted(overlap)}")


def compare_teams(
    matches: Iterable[MatchRecord],
    team1_ids: Sequence[str],
    team2_ids: Sequence[str],
    date_range: DateRange | None = None,
    params: StatsParameters | None = None,
) -> TeamCompositionResult:
    return TeamCompositionQuery(params).compare(matches, team1_ids, team2_ids, date_range)


__all__ = ["MAX_ROSTER_SIZE", "TeamCompositionQuery", "compare_teams"]
