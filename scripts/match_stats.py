#!/usr/bin/env python3
"""Browse player statistics, head-to-head records and team matchups from match history."""

from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.stats.common import DateRange, MatchRecord
from domain.stats.config import DEFAULT_CONFIG_DIR, StatsSystemConfig, load_stats_system_configs
from domain.stats.overview import (
    PlayerSortKey,
    build_overview,
    player_detail,
    rank_players,
    search_players,
    win_rate_tier,
)
from domain.stats.player_calculator import PlayerStatsCalculator
from domain.stats.team_composition import MAX_ROSTER_SIZE, TeamCompositionQuery
from log import configure_logging
from repositories.match_feed import MatchFeedError, fetch_matches, load_snapshot

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match history statistics commands.",
)

SnapshotOption = Annotated[
    Path | None,
    typer.Option("--snapshot", help="Read matches from a saved {\"data\": [...]} JSON file."),
]
UrlOption = Annotated[
    str | None,
    typer.Option("--url", help="Override the feed URL from the config."),
]
ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory of stats TOML configs."),
]
ConfigNameOption = Annotated[
    str | None,
    typer.Option("--config-name", help="Optional single config filename (for example: default.toml)."),
]
FromOption = Annotated[
    str | None,
    typer.Option("--from", help="Inclusive start date (YYYY-MM-DD)."),
]
ToOption = Annotated[
    str | None,
    typer.Option("--to", help="Inclusive end date (YYYY-MM-DD), through the end of that day."),
]
LogLevelOption = Annotated[
    str,
    typer.Option("--log-level", help="structlog level for diagnostics on stderr."),
]


def _parse_day(value: str | None, option: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"{option} must be an ISO date (YYYY-MM-DD)") from None


def _select_config(config_dir: Path, config_name: str | None) -> StatsSystemConfig:
    configs = load_stats_system_configs(config_dir)
    if config_name is not None:
        configs = [config for config in configs if config.file_path.name == config_name]
        if not configs:
            raise typer.BadParameter(
                f"No config named '{config_name}' found in {config_dir}",
                param_hint="--config-name",
            )
    return configs[0]


def load_context(
    *,
    snapshot: Path | None,
    url: str | None,
    config_dir: Path,
    config_name: str | None,
    date_from: str | None,
    date_to: str | None,
    log_level: str,
) -> tuple[StatsSystemConfig, list[MatchRecord], DateRange]:
    """Resolve config, date window and the full match list for one command."""
    configure_logging(log_level)
    config = _select_config(config_dir, config_name)

    start_day = _parse_day(date_from, "--from")
    end_day = _parse_day(date_to, "--to")
    if start_day is not None and end_day is not None and start_day > end_day:
        raise typer.BadParameter("--from must not be after --to")
    date_range = DateRange(
        start=None if start_day is None else datetime.combine(start_day, time.min),
        end=None if end_day is None else datetime.combine(end_day, time.max),
    )

    try:
        if snapshot is not None:
            matches = load_snapshot(snapshot)
        else:
            feed = config.feed if url is None else replace(config.feed, url=url)
            matches = fetch_matches(feed, start_date=start_day, end_date=end_day)
    except MatchFeedError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    return config, matches, date_range


@app.command()
def players(
    search: Annotated[
        str,
        typer.Option("--search", help="Case-insensitive name filter."),
    ] = "",
    sort: Annotated[
        PlayerSortKey,
        typer.Option("--sort", help="Sort key (mmr, win_rate, total_matches)."),
    ] = PlayerSortKey.MMR,
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to print. Use 0 for all."),
    ] = 0,
    snapshot: SnapshotOption = None,
    url: UrlOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    date_from: FromOption = None,
    date_to: ToOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print the player overview table."""
    if top_n < 0:
        raise typer.BadParameter("--top-n must be >= 0")

    config, matches, date_range = load_context(
        snapshot=snapshot,
        url=url,
        config_dir=config_dir,
        config_name=config_name,
        date_from=date_from,
        date_to=date_to,
        log_level=log_level,
    )
    stats = PlayerStatsCalculator(config.parameters).calculate(matches, date_range)
    rows = rank_players(search_players(stats, search), sort)
    if top_n:
        rows = rows[:top_n]

    if not rows:
        typer.echo("No players found.")
        return

    typer.echo(f"config={config.name} players={len(stats)} shown={len(rows)} sort={sort.value}")
    for index, player in enumerate(rows, start=1):
        typer.echo(
            f"#{index:<3d} {player.player_name:<20} "
            f"matches={player.total_matches:4d} "
            f"win_rate={player.win_rate:5.1f}% ({player.wins}W-{player.losses}L) "
            f"mmr={player.mmr:7.1f} avg_mmr={player.average_mmr:7.1f} "
            f"mmr_change={player.mmr_change:+.0f}"
        )


@app.command()
def player(
    player_id: Annotated[str, typer.Argument(help="Player id to inspect.")],
    snapshot: SnapshotOption = None,
    url: UrlOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    date_from: FromOption = None,
    date_to: ToOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print one player's summary and head-to-head performance."""
    config, matches, date_range = load_context(
        snapshot=snapshot,
        url=url,
        config_dir=config_dir,
        config_name=config_name,
        date_from=date_from,
        date_to=date_to,
        log_level=log_level,
    )
    overview = build_overview(matches, config.parameters, date_range)
    selected = overview.player_stats.get(player_id)
    if selected is None:
        typer.echo(f"No decisive matches found for player '{player_id}'.")
        raise typer.Exit(code=1)

    typer.echo(
        f"{selected.player_name} matches={selected.total_matches} "
        f"win_rate={selected.win_rate:.1f}% mmr={selected.mmr:.0f} "
        f"avg_mmr={selected.average_mmr:.1f} mmr_change={selected.mmr_change:+.0f}"
    )
    for row in player_detail(player_id, overview.player_stats, overview.head_to_head):
        record = row.stats
        typer.echo(
            f"  vs {row.opponent.player_name:<20} together={record.matches_with_both:3d} "
            f"with={record.win_rate_with:5.1f}% "
            f"({record.player1_wins_with_player2}W-{record.player1_losses_with_player2}L) "
            f"against={record.win_rate_against:5.1f}% "
            f"({record.player1_wins_against_player2}W-{record.player1_losses_against_player2}L) "
            f"[{win_rate_tier(record.win_rate_against, record.games_against)}]"
        )


@app.command()
def matrix(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players (by win rate) in the grid."),
    ] = 15,
    search: Annotated[
        str,
        typer.Option("--search", help="Case-insensitive name filter."),
    ] = "",
    snapshot: SnapshotOption = None,
    url: UrlOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    date_from: FromOption = None,
    date_to: ToOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print the opposing-side head-to-head grid (row player's W-L against column player)."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")

    config, matches, date_range = load_context(
        snapshot=snapshot,
        url=url,
        config_dir=config_dir,
        config_name=config_name,
        date_from=date_from,
        date_to=date_to,
        log_level=log_level,
    )
    overview = build_overview(matches, config.parameters, date_range)
    shown = rank_players(search_players(overview.player_stats, search), PlayerSortKey.WIN_RATE)[:top_n]
    if not shown:
        typer.echo("No players found.")
        return

    typer.echo(f"decisive_matches={overview.decisive_matches} players={len(shown)}")
    typer.echo(" " * 16 + "".join(f"{p.player_name[:8]:>9}" for p in shown))
    for row_player in shown:
        cells = []
        for column_player in shown:
            if row_player.player_id == column_player.player_id:
                cells.append(f"{'-':>9}")
                continue
            record = overview.head_to_head[row_player.player_id][column_player.player_id]
            if record.games_against == 0:
                cells.append(f"{'.':>9}")
            else:
                cells.append(
                    f"{record.player1_wins_against_player2}-{record.player1_losses_against_player2}".rjust(9)
                )
        typer.echo(f"{row_player.player_name[:15]:<16}" + "".join(cells))


@app.command()
def teams(
    team1: Annotated[
        list[str],
        typer.Option("--team1", help="Player id on roster 1 (repeat for more)."),
    ],
    team2: Annotated[
        list[str],
        typer.Option("--team2", help="Player id on roster 2 (repeat for more)."),
    ],
    suggest: Annotated[
        bool,
        typer.Option("--suggest", help="Also rank candidates to add to roster 1."),
    ] = False,
    snapshot: SnapshotOption = None,
    url: UrlOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = None,
    date_from: FromOption = None,
    date_to: ToOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print how roster 1 fared against roster 2 when they met on opposing sides."""
    if len(team1) > MAX_ROSTER_SIZE or len(team2) > MAX_ROSTER_SIZE:
        raise typer.BadParameter(f"rosters hold at most {MAX_ROSTER_SIZE} players")
    if set(team1) & set(team2):
        raise typer.BadParameter("a player cannot be on both rosters")

    config, matches, date_range = load_context(
        snapshot=snapshot,
        url=url,
        config_dir=config_dir,
        config_name=config_name,
        date_from=date_from,
        date_to=date_to,
        log_level=log_level,
    )
    query = TeamCompositionQuery(config.parameters)
    result = query.compare(matches, team1, team2, date_range)
    if result.total_games == 0:
        typer.echo("No games found with these rosters on opposing sides.")
    else:
        typer.echo(
            f"games={result.total_games} team1_wins={result.team1_wins} "
            f"team2_wins={result.team2_wins} team1_win_rate={result.team1_win_rate:.1f}%"
        )

    if not suggest:
        return

    stats = PlayerStatsCalculator(config.parameters).calculate(matches, date_range)
    candidates = [p.player_id for p in rank_players(stats.values(), PlayerSortKey.MMR)]
    for suggestion in query.suggest_teammates(matches, team1, team2, candidates, date_range):
        name = stats[suggestion.player_id].player_name
        typer.echo(
            f"  + {name:<20} games={suggestion.total_games:3d} "
            f"win_rate={suggestion.win_rate:.0f}% "
            f"({suggestion.result.team1_wins}-{suggestion.result.team2_wins})"
        )


if __name__ == "__main__":
    app()
