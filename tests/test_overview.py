"""Tests for dashboard read helpers."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.stats.common import DateRange, MatchRecord, Participant
from domain.stats.debounce import RecomputeDebouncer
from domain.stats.overview import (
    OverviewRecomputer,
    PlayerSortKey,
    build_overview,
    count_decisive_matches,
    player_detail,
    rank_players,
    search_players,
    win_rate_tier,
)

NAMES = {"A": "Alice", "B": "Bob", "C": "Carol", "D": "Dave"}
MMR = {"A": 1200.0, "B": 900.0, "C": 1100.0, "D": 1000.0}


def _match(side0: str, side1: str, *, winner: int, day: int) -> MatchRecord:
    def side(ids: str) -> tuple[Participant, ...]:
        return tuple(Participant(player_id=pid, name=NAMES[pid], mmr=MMR[pid]) for pid in ids)

    return MatchRecord(
        game="dota",
        time=datetime(2025, 9, day, 20, 0, 0),
        teams=(side(side0), side(side1)),
        winner=winner,
        game_num=day,
    )


def _matches() -> list[MatchRecord]:
    return [
        _match("AB", "CD", winner=0, day=1),
        _match("AC", "BD", winner=1, day=2),
        _match("AD", "BC", winner=0, day=3),
        _match("AB", "CD", winner=-1, day=4),
    ]


def test_overview_uses_one_window_for_every_figure() -> None:
    window = DateRange(start=datetime(2025, 9, 2))

    overview = build_overview(_matches(), date_range=window)

    assert overview.decisive_matches == 2
    assert overview.player_stats["A"].total_matches == 2
    assert set(overview.head_to_head) == set(overview.player_stats)
    assert overview.head_to_head["A"]["B"].matches_with_both == 2
    assert overview.date_range == window


def test_count_decisive_matches_skips_cancelled() -> None:
    assert count_decisive_matches(_matches()) == 3


def test_search_is_case_insensitive_substring() -> None:
    stats = build_overview(_matches()).player_stats

    assert sorted(player.player_id for player in search_players(stats, "a")) == ["A", "C", "D"]
    assert [player.player_id for player in search_players(stats, "BO")] == ["B"]


def test_rank_players_by_key() -> None:
    stats = build_overview(_matches()).player_stats

    by_mmr = rank_players(stats.values())
    by_win_rate = rank_players(stats.values(), PlayerSortKey.WIN_RATE)

    assert [player.player_id for player in by_mmr] == ["A", "C", "D", "B"]
    assert by_win_rate[0].player_id == "A"
    assert by_win_rate[0].win_rate == pytest.approx(200.0 / 3.0)


def test_win_rate_tiers() -> None:
    assert win_rate_tier(75.0) == "strong"
    assert win_rate_tier(60.0) == "strong"
    assert win_rate_tier(50.0) == "even"
    assert win_rate_tier(49.9) == "weak"
    assert win_rate_tier(0.0, matches=0) == "none"


def test_player_detail_lists_opponents_by_opposing_games() -> None:
    overview = build_overview([*_matches(), _match("A", "B", winner=0, day=5)])

    rows = player_detail("A", overview.player_stats, overview.head_to_head)

    assert rows[0].opponent.player_id == "B"
    assert rows[0].stats.games_against == 3
    assert {row.opponent.player_id: row.stats.games_against for row in rows[1:]} == {"C": 2, "D": 2}


def test_player_detail_for_unknown_player_is_empty() -> None:
    overview = build_overview(_matches())

    assert player_detail("Z", overview.player_stats, overview.head_to_head) == []


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_recomputer_builds_overview_for_latest_window_after_settling() -> None:
    clock = _FakeClock()
    recomputer = OverviewRecomputer(RecomputeDebouncer(0.3, clock=clock))
    latest = DateRange(start=datetime(2025, 9, 2))

    assert recomputer.poll(_matches()) is None
    recomputer.request(DateRange(start=datetime(2025, 9, 3)))
    clock.now = 0.1
    recomputer.request(latest)
    clock.now = 0.2
    assert recomputer.poll(_matches()) is None
    assert recomputer.has_pending

    clock.now = 0.5
    overview = recomputer.poll(_matches())

    assert overview is not None
    assert overview.date_range == latest
    assert overview.decisive_matches == 2
    assert not recomputer.has_pending
    assert recomputer.poll(_matches()) is None


def test_recomputer_accepts_open_window() -> None:
    clock = _FakeClock()
    recomputer = OverviewRecomputer(RecomputeDebouncer(0.0, clock=clock))

    recomputer.request(None)
    overview = recomputer.poll(_matches())

    assert overview is not None
    assert overview.date_range is None
    assert overview.decisive_matches == 3
