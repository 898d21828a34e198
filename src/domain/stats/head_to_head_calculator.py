"""Pairwise head-to-head records (same side vs opposing sides)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from domain.stats.common import (
    DateRange,
    HeadToHeadMethod,
    HeadToHeadStats,
    MatchRecord,
    StatsParameters,
    win_percentage,
)
from domain.stats.filters import EligibleMatch, select_matches

HeadToHeadMatrix = dict[str, dict[str, HeadToHeadStats]]


@dataclass
class _PairTally:
    matches_with_both: int = 0
    wins_with: int = 0
    losses_with: int = 0
    wins_against: int = 0
    losses_against: int = 0

    def record(self, *, player1_side: int, player2_side: int, winner: int) -> None:
        self.matches_with_both += 1
        won = winner == player1_side
        if player1_side == player2_side:
            if won:
                self.wins_with += 1
            else:
                self.losses_with += 1
        elif won:
            self.wins_against += 1
        else:
            self.losses_against += 1

    def finish(self, player1_id: str, player2_id: str) -> HeadToHeadStats:
        return HeadToHeadStats(
            player1_id=player1_id,
            player2_id=player2_id,
            matches_with_both=self.matches_with_both,
            player1_wins_with_player2=self.wins_with,
            player1_losses_with_player2=self.losses_with,
            player1_wins_against_player2=self.wins_against,
            player1_losses_against_player2=self.losses_against,
            win_rate_with=win_percentage(self.wins_with, self.wins_with + self.losses_with),
            win_rate_against=win_percentage(
                self.wins_against, self.wins_against + self.losses_against
            ),
        )


class HeadToHeadCalculator:
    """Build head-to-head records for ordered player pairs.

    ``HeadToHeadMethod.PAIRWISE`` rescans the filtered matches for every pair
    (O(n^2 * m)); ``HeadToHeadMethod.SINGLE_PASS`` walks the matches once and
    feeds a sparse pair-keyed accumulator. Both produce identical matrices.
    """

    def __init__(self, params: StatsParameters | None = None) -> None:
        self.params = params or StatsParameters()

    def calculate_pair(
        self,
        matches: Iterable[MatchRecord],
        player1_id: str,
        player2_id: str,
        date_range: DateRange | None = None,
    ) -> HeadToHeadStats:
        if player1_id == player2_id:
            raise ValueError(f"head-to-head requires two distinct players, got {player1_id!r} twice")
        eligible = select_matches(matches, self.params, date_range)
        return self._scan_pair(eligible, player1_id, player2_id)

    def calculate_matrix(
        self,
        matches: Iterable[MatchRecord],
        player_ids: Iterable[str],
        date_range: DateRange | None = None,
    ) -> HeadToHeadMatrix:
        ids = list(dict.fromkeys(player_ids))
        eligible = select_matches(matches, self.params, date_range)

        if self.params.head_to_head_method == HeadToHeadMethod.SINGLE_PASS:
            return self._single_pass_matrix(eligible, ids)

        return {
            player1_id: {
                player2_id: self._scan_pair(eligible, player1_id, player2_id)
                for player2_id in ids
                if player2_id != player1_id
            }
            for player1_id in ids
        }

    @staticmethod
    def _scan_pair(
        eligible: Sequence[EligibleMatch],
        player1_id: str,
        player2_id: str,
    ) -> HeadToHeadStats:
        tally = _PairTally()
        for item in eligible:
            player1_side = item.side_of(player1_id)
            player2_side = item.side_of(player2_id)
            if player1_side is None or player2_side is None:
                continue
            tally.record(
                player1_side=player1_side,
                player2_side=player2_side,
                winner=item.winner,
            )
        return tally.finish(player1_id, player2_id)

    @staticmethod
    def _single_pass_matrix(
        eligible: Sequence[EligibleMatch],
        ids: Sequence[str],
    ) -> HeadToHeadMatrix:
        tracked = set(ids)
        tallies: dict[tuple[str, str], _PairTally] = {}

        for item in eligible:
            present: dict[str, int] = {}
            for side_index, side in enumerate(item.sides):
                for participant in side:
                    if participant.player_id in tracked:
                        present.setdefault(participant.player_id, side_index)

            for player1_id, player1_side in present.items():
                for player2_id, player2_side in present.items():
                    if player1_id == player2_id:
                        continue
                    tally = tallies.setdefault((player1_id, player2_id), _PairTally())
                    tally.record(
                        player1_side=player1_side,
                        player2_side=player2_side,
                        winner=item.winner,
                    )

        empty = _PairTally()
        return {
            player1_id: {
                player2_id: tallies.get((player1_id, player2_id), empty).finish(
                    player1_id, player2_id
                )
                for player2_id in ids
                if player2_id != player1_id
            }
            for player1_id in ids
        }


def calculate_head_to_head_matrix(
    matches: Iterable[MatchRecord],
    player_ids: Iterable[str],
    date_range: DateRange | None = None,
    params: StatsParameters | None = None,
) -> HeadToHeadMatrix:
    return HeadToHeadCalculator(params).calculate_matrix(matches, player_ids, date_range)


__all__ = [
    "HeadToHeadCalculator",
    "HeadToHeadMatrix",
    "calculate_head_to_head_matrix",
]
