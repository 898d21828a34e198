"""Shared types for match-history statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

DEFAULT_GAME = "dota"

# Any other winner value (-1 cancelled, 2 observed in the feed) is non-decisive.
DECISIVE_WINNERS = (0, 1)

# Seed for the summed mmr_change of a new player record. Kept as a named
# constant; no business meaning is attached to it.
MMR_CHANGE_BASELINE = 0.0


class MatchOrder(str, Enum):
    """Processing order applied to matches before folding."""

    DESCENDING = "desc"
    ASCENDING = "asc"
    INPUT = "input"


class HeadToHeadMethod(str, Enum):
    """How the head-to-head matrix is collected."""

    PAIRWISE = "pairwise"
    SINGLE_PASS = "single_pass"


@dataclass(frozen=True)
class StatsParameters:
    game: str = DEFAULT_GAME
    mmr_change_baseline: float = MMR_CHANGE_BASELINE
    include_unpicked: bool = True
    match_order: MatchOrder = MatchOrder.DESCENDING
    head_to_head_method: HeadToHeadMethod = HeadToHeadMethod.PAIRWISE


@dataclass(frozen=True)
class Participant:
    """One player's appearance on one side of one match."""

    player_id: str
    name: str = ""
    mmr: float = 0.0
    mmr_change: float = 0.0
    picked: bool = True
    role: str | None = None
    team_num: int | None = None


@dataclass(frozen=True)
class MatchRecord:
    """Canonical match payload consumed by the aggregators.

    ``time`` is ``None`` when the source timestamp could not be parsed; such
    records are skipped by every aggregator.
    """

    game: str
    time: datetime | None
    teams: tuple[tuple[Participant, ...], ...]
    winner: int
    game_num: int | None = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive time window; either bound may be open."""

    start: datetime | None = None
    end: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def __post_init__(self) -> None:
        # Bounds are compared against naive-UTC match times.
        if self.start is not None:
            object.__setattr__(self, "start", to_naive_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", to_naive_utc(self.end))

    def contains(self, moment: datetime) -> bool:
        moment = to_naive_utc(moment)
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


@dataclass(frozen=True)
class PlayerStats:
    player_id: str
    player_name: str
    total_matches: int
    wins: int
    losses: int
    win_rate: float
    average_mmr: float
    mmr_change: float
    mmr: float


@dataclass(frozen=True)
class HeadToHeadStats:
    """Record of player1 relative to player2 (same side and opposing sides)."""

    player1_id: str
    player2_id: str
    matches_with_both: int = 0
    player1_wins_with_player2: int = 0
    player1_losses_with_player2: int = 0
    player1_wins_against_player2: int = 0
    player1_losses_against_player2: int = 0
    win_rate_with: float = 0.0
    win_rate_against: float = 0.0

    @property
    def games_with(self) -> int:
        return self.player1_wins_with_player2 + self.player1_losses_with_player2

    @property
    def games_against(self) -> int:
        return self.player1_wins_against_player2 + self.player1_losses_against_player2


@dataclass(frozen=True)
class TeamCompositionResult:
    total_games: int = 0
    team1_wins: int = 0
    team2_wins: int = 0

    @property
    def team1_win_rate(self) -> float:
        return win_percentage(self.team1_wins, self.total_games)


@dataclass(frozen=True)
class TeammateSuggestion:
    """Hypothetical outcome of adding ``player_id`` to roster 1."""

    player_id: str
    result: TeamCompositionResult

    @property
    def total_games(self) -> int:
        return self.result.total_games

    @property
    def win_rate(self) -> float:
        return self.result.team1_win_rate


def win_percentage(wins: int, games: int) -> float:
    """Return ``wins / games * 100``, or 0.0 when there are no games."""
    if games <= 0:
        return 0.0
    return (wins / games) * 100.0


def parse_match_time(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp into naive UTC, or ``None`` if unparseable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    return to_naive_utc(parsed)


def to_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)
