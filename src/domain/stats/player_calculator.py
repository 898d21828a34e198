"""Per-player summary statistics."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from domain.stats.common import (
    DateRange,
    MatchRecord,
    Participant,
    PlayerStats,
    StatsParameters,
    win_percentage,
)
from domain.stats.filters import select_matches


@dataclass
class _PlayerTally:
    player_id: str
    player_name: str
    mmr_change: float
    total_matches: int = 0
    wins: int = 0
    losses: int = 0
    average_mmr: float = 0.0
    mmr: float = 0.0

    def record(self, participant: Participant, *, won: bool) -> None:
        self.player_name = participant.name
        self.total_matches += 1
        if won:
            self.wins += 1
        else:
            self.losses += 1
        # Running mean; may differ from a batch mean within float tolerance.
        self.average_mmr = (
            self.average_mmr * (self.total_matches - 1) + participant.mmr
        ) / self.total_matches
        self.mmr_change += participant.mmr_change
        self.mmr = participant.mmr

    def finish(self) -> PlayerStats:
        return PlayerStats(
            player_id=self.player_id,
            player_name=self.player_name,
            total_matches=self.total_matches,
            wins=self.wins,
            losses=self.losses,
            win_rate=win_percentage(self.wins, self.total_matches),
            average_mmr=self.average_mmr,
            mmr_change=self.mmr_change,
            mmr=self.mmr,
        )


class PlayerStatsCalculator:
    """Fold a match list into one ``PlayerStats`` per player id.

    The calculator holds only its parameters; every call builds and discards
    its own accumulator, so repeated calls with the same input are identical.
    """

    def __init__(self, params: StatsParameters | None = None) -> None:
        self.params = params or StatsParameters()

    def calculate(
        self,
        matches: Iterable[MatchRecord],
        date_range: DateRange | None = None,
    ) -> dict[str, PlayerStats]:
        tallies: dict[str, _PlayerTally] = {}

        for eligible in select_matches(matches, self.params, date_range):
            for side_index, side in enumerate(eligible.sides):
                won = side_index == eligible.winner
                for participant in side:
                    tally = tallies.get(participant.player_id)
                    if tally is None:
                        tally = _PlayerTally(
                            player_id=participant.player_id,
                            player_name=participant.name,
                            mmr_change=self.params.mmr_change_baseline,
                        )
                        tallies[participant.player_id] = tally
                    tally.record(participant, won=won)

        return {player_id: tally.finish() for player_id, tally in tallies.items()}


def calculate_player_stats(
    matches: Iterable[MatchRecord],
    date_range: DateRange | None = None,
    params: StatsParameters | None = None,
) -> dict[str, PlayerStats]:
    return PlayerStatsCalculator(params).calculate(matches, date_range)


__all__ = ["PlayerStatsCalculator", "calculate_player_stats"]
