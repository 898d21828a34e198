"""Shared match-selection predicates used by every aggregator."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from domain.stats.common import (
    DECISIVE_WINNERS,
    DateRange,
    MatchOrder,
    MatchRecord,
    Participant,
    StatsParameters,
)

log = structlog.get_logger(__name__).bind(component="MatchFilters")


@dataclass(frozen=True)
class EligibleMatch:
    """A decisive, well-formed match with the participants that count."""

    match: MatchRecord
    sides: tuple[tuple[Participant, ...], tuple[Participant, ...]]

    @property
    def winner(self) -> int:
        return self.match.winner

    def side_ids(self, side: int) -> frozenset[str]:
        return frozenset(participant.player_id for participant in self.sides[side])

    def side_of(self, player_id: str) -> int | None:
        """Return the side index ``player_id`` played on, first side wins on anomalies."""
        for index, side in enumerate(self.sides):
            if any(participant.player_id == player_id for participant in side):
                return index
        return None


def is_decisive(match: MatchRecord) -> bool:
    return match.winner in DECISIVE_WINNERS


def filter_by_date_range(
    matches: Iterable[MatchRecord],
    date_range: DateRange | None = None,
) -> list[MatchRecord]:
    """Keep matches whose time falls inside the inclusive range.

    Without any bound the input is returned unchanged. With a bound, matches
    without a parseable time are dropped.
    """
    if date_range is None or date_range.is_open:
        return list(matches)
    return [
        match
        for match in matches
        if match.time is not None and date_range.contains(match.time)
    ]


def counted_sides(
    match: MatchRecord,
    *,
    include_unpicked: bool = True,
) -> tuple[tuple[Participant, ...], tuple[Participant, ...]] | None:
    """Return both sides reduced to countable participants, or ``None`` if malformed."""
    if len(match.teams) != 2:
        return None

    sides: list[tuple[Participant, ...]] = []
    for team in match.teams:
        side = tuple(
            participant
            for participant in team
            if participant.player_id and (include_unpicked or participant.picked)
        )
        if not side:
            return None
        sides.append(side)
    return sides[0], sides[1]


def select_matches(
    matches: Iterable[MatchRecord],
    params: StatsParameters,
    date_range: DateRange | None = None,
) -> list[EligibleMatch]:
    """Apply category, decisiveness, validity and date filters, then order."""
    selected: list[EligibleMatch] = []
    for match in matches:
        if match.game != params.game or not is_decisive(match):
            continue
        if match.time is None:
            log.debug("skip match with unparseable time", game_num=match.game_num)
            continue
        if date_range is not None and not date_range.contains(match.time):
            continue

        sides = counted_sides(match, include_unpicked=params.include_unpicked)
        if sides is None:
            log.debug("skip malformed match", game_num=match.game_num, sides=len(match.teams))
            continue
        selected.append(EligibleMatch(match=match, sides=sides))

    return order_matches(selected, params.match_order)


def order_matches(matches: Sequence[EligibleMatch], order: MatchOrder) -> list[EligibleMatch]:
    """Sort by ``game_num``; matches without one keep input order at the end."""
    if order == MatchOrder.INPUT:
        return list(matches)

    sign = -1 if order == MatchOrder.DESCENDING else 1
    return sorted(
        matches,
        key=lambda item: (
            item.match.game_num is None,
            sign * (item.match.game_num or 0),
        ),
    )


__all__ = [
    "EligibleMatch",
    "counted_sides",
    "filter_by_date_range",
    "is_decisive",
    "order_matches",
    "select_matches",
]
