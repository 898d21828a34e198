"""Match history source: HTTP feed or static JSON snapshot.

Both entry points return a complete list of ``MatchRecord`` or raise
``MatchFeedError``; a failed load never yields a partial list. Malformed
records inside an otherwise valid document are skipped and logged.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import httpx
import structlog

from domain.stats.common import MatchRecord, Participant, parse_match_time

log = structlog.get_logger(__name__).bind(component="MatchFeed")

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_PAGE_SIZE = 1000


class MatchFeedError(RuntimeError): ...


@dataclass(frozen=True)
class FeedSettings:
    url: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    timeout_seconds: float = DEFAULT_TIMEOUT_S
    order: str = "asc"


def fetch_matches(
    settings: FeedSettings,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int | None = None,
    client: httpx.Client | None = None,
) -> list[MatchRecord]:
    """GET the match history document and parse it."""
    if not settings.url:
        raise MatchFeedError("No match feed URL configured")

    params: dict[str, Any] = {
        "page_size": settings.page_size,
        "limit": settings.page_size,
        "order": settings.order,
    }
    if start_date is not None:
        params["start_date"] = start_date.isoformat()
    if end_date is not None:
        params["end_date"] = end_date.isoformat()
    if page is not None:
        params["page"] = page

    session = client or httpx.Client(timeout=settings.timeout_seconds)
    log.info("fetching match history", url=settings.url, **params)
    try:
        response = session.get(settings.url, params=params)
        response.raise_for_status()
        document = response.json()
    except httpx.HTTPStatusError as exc:
        log.error("match feed returned error status", status=exc.response.status_code)
        raise MatchFeedError(f"Failed to fetch data: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        log.error("match feed request failed", err=str(exc))
        raise MatchFeedError(f"Failed to fetch data: {exc}") from exc
    except ValueError as exc:
        log.error("match feed returned invalid JSON", err=str(exc))
        raise MatchFeedError("Match feed returned invalid JSON") from exc
    finally:
        if client is None:
            session.close()

    matches = parse_document(document)
    log.info("match history fetched", matches=len(matches))
    return matches


def load_snapshot(path: Path) -> list[MatchRecord]:
    """Read a ``{"data": [...]}`` document saved to disk."""
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise MatchFeedError(f"Cannot read snapshot {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MatchFeedError(f"Snapshot {path} is not valid JSON: {exc}") from exc

    matches = parse_document(document)
    log.info("match snapshot loaded", path=str(path), matches=len(matches))
    return matches


def parse_document(document: Any) -> list[MatchRecord]:
    if not isinstance(document, dict) or not isinstance(document.get("data"), list):
        raise MatchFeedError('Match document must be an object with a "data" list')
    return parse_matches(document["data"])


def parse_matches(rows: Iterable[Any]) -> list[MatchRecord]:
    matches: list[MatchRecord] = []
    skipped = 0
    for index, row in enumerate(rows):
        match = parse_match(row)
        if match is None:
            skipped += 1
            log.warning("skip malformed match record", index=index)
            continue
        matches.append(match)

    if skipped:
        log.info("match records skipped", skipped=skipped, kept=len(matches))
    return matches


def parse_match(row: Any) -> MatchRecord | None:
    """Convert one raw record; ``None`` when it has no usable shape at all."""
    if not isinstance(row, dict):
        return None
    teams_raw = row.get("teams")
    if not isinstance(teams_raw, list):
        return None

    teams = tuple(
        tuple(
            participant
            for participant in (_parse_participant(item) for item in team)
            if participant is not None
        )
        if isinstance(team, list)
        else ()
        for team in teams_raw
    )

    return MatchRecord(
        game=str(row.get("game", "")),
        time=parse_match_time(row.get("time")),
        teams=teams,
        winner=_as_int(row.get("winner"), default=-1),
        game_num=_as_optional_int(row.get("game_num")),
    )


def _parse_participant(raw: Any) -> Participant | None:
    if not isinstance(raw, dict):
        return None
    player_id = raw.get("id")
    return Participant(
        # Blank ids are kept; the aggregators skip them.
        player_id="" if player_id is None else str(player_id).strip(),
        name=str(raw.get("name") or ""),
        mmr=_as_float(raw.get("mmr")),
        mmr_change=_as_float(raw.get("mmr_change")),
        picked=raw["picked"] if isinstance(raw.get("picked"), bool) else True,
        role=None if raw.get("role") is None else str(raw.get("role")),
        team_num=_as_optional_int(raw.get("team_num")),
    )


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, *, default: int) -> int:
    parsed = _as_optional_int(value)
    return default if parsed is None else parsed


def _as_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = [
    "FeedSettings",
    "MatchFeedError",
    "fetch_matches",
    "load_snapshot",
    "parse_document",
    "parse_match",
    "parse_matches",
]
