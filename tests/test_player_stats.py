"""Unit tests for per-player statistics."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.stats.common import (
    DateRange,
    MatchOrder,
    MatchRecord,
    Participant,
    StatsParameters,
)
from domain.stats.player_calculator import PlayerStatsCalculator, calculate_player_stats


def _player(player_id: str, *, mmr: float = 1000.0, mmr_change: float = 0.0, **kwargs) -> Participant:
    return Participant(
        player_id=player_id,
        name=kwargs.pop("name", player_id.lower()),
        mmr=mmr,
        mmr_change=mmr_change,
        **kwargs,
    )


def _match(
    side0: list[Participant],
    side1: list[Participant],
    *,
    winner: int,
    day: int = 1,
    game: str = "dota",
    game_num: int | None = None,
) -> MatchRecord:
    return MatchRecord(
        game=game,
        time=datetime(2025, 9, day, 20, 0, 0),
        teams=(tuple(side0), tuple(side1)),
        winner=winner,
        game_num=game_num,
    )


def _example_matches() -> list[MatchRecord]:
    a, b, c, d = (_player(pid) for pid in "ABCD")
    return [
        _match([a, b], [c, d], winner=0, day=1, game_num=1),
        _match([a, c], [b, d], winner=1, day=2, game_num=2),
        _match([a, d], [b, c], winner=0, day=3, game_num=3),
    ]


def test_example_record_for_player_a() -> None:
    stats = calculate_player_stats(_example_matches())

    assert set(stats) == {"A", "B", "C", "D"}
    player_a = stats["A"]
    assert player_a.wins == 2
    assert player_a.losses == 1
    assert player_a.total_matches == 3
    assert player_a.win_rate == pytest.approx(200.0 / 3.0)


def test_wins_plus_losses_equals_total_for_every_player() -> None:
    stats = calculate_player_stats(_example_matches())

    for player in stats.values():
        assert player.wins + player.losses == player.total_matches


def test_non_decisive_and_other_game_matches_are_excluded() -> None:
    a, b = _player("A"), _player("B")
    matches = [
        *_example_matches(),
        _match([a], [b], winner=-1, day=4),
        _match([a], [b], winner=2, day=5),
        _match([a], [b], winner=0, day=6, game="cs2"),
    ]

    stats = calculate_player_stats(matches)

    assert stats["A"].total_matches == 3
    assert stats["B"].total_matches == 3


def test_average_mmr_is_running_mean_and_mmr_change_is_summed() -> None:
    matches = [
        _match([_player("A", mmr=1000.0, mmr_change=25.0)], [_player("B")], winner=0, game_num=1),
        _match([_player("A", mmr=1025.0, mmr_change=-24.0)], [_player("B")], winner=1, game_num=2),
        _match([_player("A", mmr=1001.0, mmr_change=26.0)], [_player("B")], winner=0, game_num=3),
    ]

    stats = calculate_player_stats(matches)

    assert stats["A"].average_mmr == pytest.approx((1000.0 + 1025.0 + 1001.0) / 3.0)
    assert stats["A"].mmr_change == pytest.approx(27.0)


def test_mmr_change_is_seeded_from_baseline() -> None:
    matches = [_match([_player("A", mmr_change=10.0)], [_player("B", mmr_change=-10.0)], winner=0)]

    stats = PlayerStatsCalculator(StatsParameters(mmr_change_baseline=100.0)).calculate(matches)

    assert stats["A"].mmr_change == pytest.approx(110.0)
    assert stats["B"].mmr_change == pytest.approx(90.0)


def test_last_processed_appearance_sets_name_and_mmr() -> None:
    matches = [
        _match([_player("A", mmr=1100.0, name="new")], [_player("B")], winner=0, game_num=2),
        _match([_player("A", mmr=1000.0, name="old")], [_player("B")], winner=0, game_num=1),
    ]

    ascending = PlayerStatsCalculator(StatsParameters(match_order=MatchOrder.ASCENDING))
    descending = PlayerStatsCalculator(StatsParameters(match_order=MatchOrder.DESCENDING))

    assert ascending.calculate(matches)["A"].player_name == "new"
    assert ascending.calculate(matches)["A"].mmr == pytest.approx(1100.0)
    assert descending.calculate(matches)["A"].player_name == "old"
    assert descending.calculate(matches)["A"].mmr == pytest.approx(1000.0)


def test_malformed_records_are_skipped_without_raising() -> None:
    a, b = _player("A"), _player("B")
    matches = [
        _match([a], [], winner=0),
        MatchRecord(game="dota", time=None, teams=((a,), (b,)), winner=0),
        MatchRecord(game="dota", time=datetime(2025, 9, 1), teams=((a,),), winner=0),
        _match([a, _player("")], [b], winner=0),
    ]

    stats = calculate_player_stats(matches)

    assert set(stats) == {"A", "B"}
    assert stats["A"].total_matches == 1
    assert stats["B"].losses == 1


def test_unpicked_participants_follow_configuration() -> None:
    matches = [
        _match([_player("A"), _player("X", picked=False)], [_player("B")], winner=0),
    ]

    included = calculate_player_stats(matches)
    excluded = PlayerStatsCalculator(StatsParameters(include_unpicked=False)).calculate(matches)

    assert "X" in included
    assert "X" not in excluded
    assert excluded["A"].wins == 1


def test_empty_input_yields_empty_result() -> None:
    assert calculate_player_stats([]) == {}


def test_date_range_narrowing_never_increases_counts() -> None:
    matches = _example_matches()
    wide = calculate_player_stats(matches, DateRange(start=datetime(2025, 9, 1)))
    narrow = calculate_player_stats(matches, DateRange(start=datetime(2025, 9, 2)))

    assert set(narrow) <= set(wide)
    for player_id, player in narrow.items():
        assert player.total_matches <= wide[player_id].total_matches
    assert narrow["A"].total_matches == 2


def test_repeated_calls_are_identical() -> None:
    calculator = PlayerStatsCalculator()
    matches = _example_matches()

    assert calculator.calculate(matches) == calculator.calculate(matches)
