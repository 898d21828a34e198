"""Load statistics configurations from TOML files."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs, parse_system_section
from domain.stats.common import (
    DEFAULT_GAME,
    DateRange,
    MMR_CHANGE_BASELINE,
    HeadToHeadMethod,
    MatchOrder,
    StatsParameters,
)
from domain.stats.debounce import RecomputeDebouncer
from domain.stats.overview import OverviewRecomputer
from repositories.match_feed import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT_S, FeedSettings

ROOT_DIR = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "stats"


@dataclass(frozen=True)
class StatsSystemConfig(BaseSystemConfig):
    """One named engine configuration plus its data source."""

    parameters: StatsParameters
    feed: FeedSettings
    debounce_seconds: float = 0.3

    def overview_recomputer(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> OverviewRecomputer:
        debouncer: RecomputeDebouncer[DateRange | None] = RecomputeDebouncer(
            self.debounce_seconds, clock=clock
        )
        return OverviewRecomputer(debouncer, self.parameters)


def load_stats_system_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[StatsSystemConfig]:
    """Load and validate all statistics TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_stats_system_config,
        duplicate_name_label="stats",
    )


def _parse_stats_system_config(raw: dict[str, Any], file_path: Path) -> StatsSystemConfig:
    name, description = parse_system_section(raw, file_path)
    stats_raw = raw.get("stats", {})
    feed_raw = raw.get("feed", {})

    game = str(stats_raw.get("game", DEFAULT_GAME)).strip()
    if not game:
        raise ValueError(f"{file_path}: [stats].game must not be empty")

    match_order_value = str(stats_raw.get("match_order", MatchOrder.DESCENDING.value))
    try:
        match_order = MatchOrder(match_order_value)
    except ValueError:
        raise ValueError(
            f"{file_path}: [stats].match_order must be one of "
            f"{[order.value for order in MatchOrder]}"
        ) from None

    method_value = str(stats_raw.get("head_to_head_method", HeadToHeadMethod.PAIRWISE.value))
    try:
        head_to_head_method = HeadToHeadMethod(method_value)
    except ValueError:
        raise ValueError(
            f"{file_path}: [stats].head_to_head_method must be one of "
            f"{[method.value for method in HeadToHeadMethod]}"
        ) from None

    debounce_seconds = float(stats_raw.get("debounce_seconds", 0.3))
    if debounce_seconds < 0.0:
        raise ValueError(f"{file_path}: [stats].debounce_seconds must be >= 0")

    parameters = StatsParameters(
        game=game,
        mmr_change_baseline=float(stats_raw.get("mmr_change_baseline", MMR_CHANGE_BASELINE)),
        include_unpicked=bool(stats_raw.get("include_unpicked", True)),
        match_order=match_order,
        head_to_head_method=head_to_head_method,
    )

    url_value = feed_raw.get("url")
    feed = FeedSettings(
        url=None if url_value is None else str(url_value),
        page_size=int(feed_raw.get("page_size", DEFAULT_PAGE_SIZE)),
        timeout_seconds=float(feed_raw.get("timeout_seconds", DEFAULT_TIMEOUT_S)),
        order=str(feed_raw.get("order", "asc")),
    )
    if feed.page_size <= 0:
        raise ValueError(f"{file_path}: [feed].page_size must be > 0")
    if feed.timeout_seconds <= 0.0:
        raise ValueError(f"{file_path}: [feed].timeout_seconds must be > 0")
    if feed.order not in ("asc", "desc"):
        raise ValueError(f"{file_path}: [feed].order must be 'asc' or 'desc'")

    return StatsSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
        feed=feed,
        debounce_seconds=debounce_seconds,
    )


__all__ = ["DEFAULT_CONFIG_DIR", "StatsSystemConfig", "load_stats_system_configs"]
