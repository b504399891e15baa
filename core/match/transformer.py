"""Turn raw upstream match records into canonical ``Match`` values."""

import hashlib
import logging
from collections.abc import Iterable
from typing import Any

from config.constants import DEFAULT_GAMEWEEK, DEFAULT_SEASON
from core.errors import UpstreamRecordError
from core.match.models import Match, MatchStatus
from core.utils.date_parser import parse_iso_datetime
from core.week_window import Window

logger = logging.getLogger(__name__)

# Hex digits of the content digest kept for a synthesized id
SYNTHETIC_ID_DIGITS = 15


def _full_time_score(record: dict[str, Any]) -> tuple[Any, Any]:
    score = record.get("score")
    if not isinstance(score, dict):
        return None, None
    full_time = score.get("fullTime")
    if not isinstance(full_time, dict):
        return None, None
    return full_time.get("home"), full_time.get("away")


def _team(record: dict[str, Any], side: str) -> tuple[str, str | None]:
    team = record.get(side)
    if not isinstance(team, dict):
        raise UpstreamRecordError(f"missing {side}", record.get("id"))
    name = team.get("name")
    if not isinstance(name, str) or not name.strip():
        raise UpstreamRecordError(f"missing {side} name", record.get("id"))
    crest = team.get("crest")
    return name, crest if isinstance(crest, str) and crest else None


def _score(value: Any, record_id: Any, side: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise UpstreamRecordError(
            f"invalid {side} full-time score {value!r}", record_id
        )
    return value


def _season(record: dict[str, Any]) -> str:
    season = record.get("season")
    if isinstance(season, dict):
        start_date = season.get("startDate")
        if isinstance(start_date, str) and len(start_date) >= 4:
            return start_date[:4]
    return DEFAULT_SEASON


def _gameweek(record: dict[str, Any]) -> int:
    matchday = record.get("matchday")
    if (
        isinstance(matchday, int)
        and not isinstance(matchday, bool)
        and matchday > 0
    ):
        return matchday
    return DEFAULT_GAMEWEEK


def synthetic_match_id(record: dict[str, Any]) -> int:
    """Derive a negative id for a record the upstream sent without one.

    The id is a digest of the kickoff and both team names, so the same
    match gets the same id on every fetch.
    """
    parts = [str(record.get("utcDate"))]
    for side in ("homeTeam", "awayTeam"):
        team = record.get(side)
        parts.append(str(team.get("name") if isinstance(team, dict) else None))
    digest = hashlib.sha1("|".join(parts).encode("utf-8")).hexdigest()
    return -(int(digest[:SYNTHETIC_ID_DIGITS], 16) + 1)


def is_finished_with_score(record: dict[str, Any]) -> bool:
    """Check the status and score half of the filter predicate."""
    if record.get("status") != MatchStatus.FINISHED.value:
        return False
    home, away = _full_time_score(record)
    return home is not None and away is not None


def parse_upstream_match(
    record: dict[str, Any], external_id: int | None = None
) -> Match:
    """Validate one upstream record and build a ``Match`` from it.

    Only the matchday and season are defaulted when absent; every other
    required field must be present.

    Args:
        record: Raw upstream match record.
        external_id: Id to use instead of ``record["id"]``, for records
            the upstream sent without one.

    Returns:
        The parsed match, without a store id.

    Raises:
        UpstreamRecordError: If a required field is missing or malformed.
    """
    record_id = record.get("id")
    if external_id is None:
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise UpstreamRecordError("missing match id", record_id)
        external_id = record_id

    home_team, home_crest = _team(record, "homeTeam")
    away_team, away_crest = _team(record, "awayTeam")

    utc_date = record.get("utcDate")
    if not isinstance(utc_date, str):
        raise UpstreamRecordError("missing utcDate", record_id)
    try:
        match_date = parse_iso_datetime(utc_date)
    except ValueError as e:
        raise UpstreamRecordError(str(e), record_id) from e

    status = MatchStatus.from_upstream(record.get("status"))
    home_score = away_score = None
    if status is MatchStatus.FINISHED:
        raw_home, raw_away = _full_time_score(record)
        home_score = _score(raw_home, record_id, "home")
        away_score = _score(raw_away, record_id, "away")

    return Match(
        external_id=external_id,
        home_team=home_team,
        away_team=away_team,
        home_team_crest=home_crest,
        away_team_crest=away_crest,
        home_score=home_score,
        away_score=away_score,
        match_date=match_date,
        status=status,
        gameweek=_gameweek(record),
        season=_season(record),
    )


def transform_matches(
    records: Iterable[dict[str, Any]],
    window: Window | None,
    was_fallback: bool = False,
) -> list[Match]:
    """Filter, map, deduplicate and sort a batch of upstream records.

    A record is kept when it is FINISHED, has both full-time scores and
    kicked off inside the window (both ends inclusive). The window filter
    is applied whatever the source, since the upstream date filter works
    on days rather than instants. ``window=None`` keeps every finished
    record.

    Records that fail validation are logged and skipped. When an external
    id repeats within the batch, the later record wins.

    Args:
        records: Raw upstream match records.
        window: Week window to keep, or None for no window.
        was_fallback: Whether the records came from the unbounded query.

    Returns:
        Matches sorted by kickoff, then external id.
    """
    by_external_id: dict[int, Match] = {}
    synthesized: set[int] = set()
    skipped = 0

    for position, record in enumerate(records):
        if not is_finished_with_score(record):
            continue

        synthetic_id = None
        if record.get("id") is None:
            synthetic_id = synthetic_match_id(record)
            # Identical content twice in one batch
            if synthetic_id in synthesized:
                synthetic_id -= position
            synthesized.add(synthetic_id)

        try:
            match = parse_upstream_match(record, external_id=synthetic_id)
        except UpstreamRecordError as e:
            skipped += 1
            logger.warning(f"Skipping upstream match {e.record_id}: {e}")
            continue

        if window is not None and not window.contains(match.match_date):
            continue

        by_external_id[match.external_id] = match

    matches = sorted(
        by_external_id.values(), key=lambda m: (m.match_date, m.external_id)
    )
    source = "fallback" if was_fallback else "primary"
    logger.info(
        f"Transformed {len(matches)} matches from {source} query"
        + (f" ({skipped} skipped)" if skipped else "")
    )
    return matches
