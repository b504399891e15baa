"""Match formatters - response payloads and Discord messages."""

import logging
from typing import Any

from config.constants import NO_MATCHES_FOUND, SPOILER_NOTICE
from core.errors import ValidationError
from core.match.models import (
    CurrentWeekView,
    Match,
    RefreshResult,
    WeekView,
)
from core.utils.date_parser import format_iso_utc, parse_iso_datetime

logger = logging.getLogger(__name__)

# Discord rejects messages longer than this
DISCORD_MESSAGE_LIMIT = 2000


def match_payload(match: Match) -> dict[str, Any]:
    """Serialize a match with the field names the presentation layer uses."""
    return {
        "id": match.id if match.id is not None else match.external_id,
        "externalId": match.external_id,
        "homeTeam": match.home_team,
        "awayTeam": match.away_team,
        "homeTeamCrest": match.home_team_crest,
        "awayTeamCrest": match.away_team_crest,
        "homeScore": match.home_score,
        "awayScore": match.away_score,
        "matchDate": format_iso_utc(match.match_date),
        "status": match.status.value,
        "gameweek": match.gameweek,
        "season": match.season,
        "isGoalless": match.is_goalless,
    }


def week_view_payload(view: WeekView) -> dict[str, Any]:
    """Build ``{matches, weekStart, weekEnd, offset, rateLimited?, message?}``."""
    payload: dict[str, Any] = {
        "matches": [match_payload(m) for m in view.matches],
        "weekStart": format_iso_utc(view.window.week_start),
        "weekEnd": format_iso_utc(view.window.week_end),
        "offset": view.window.offset,
    }
    if view.rate_limited:
        payload["rateLimited"] = True
    if view.message:
        payload["message"] = view.message
    return payload


def current_week_payload(
    view: CurrentWeekView,
) -> list[dict[str, Any]] | dict[str, Any]:
    """Build a match list, or ``{matches: [], message}`` on failure."""
    if view.message:
        payload: dict[str, Any] = {"matches": [], "message": view.message}
        if view.rate_limited:
            payload["rateLimited"] = True
        return payload
    return [match_payload(m) for m in view.matches]


def gameweek_payload(matches: list[Match]) -> list[dict[str, Any]]:
    return [match_payload(m) for m in matches]


def validation_error_payload(error: ValidationError) -> dict[str, str]:
    """Build the client-error body for rejected input."""
    return {"message": str(error)}


def refresh_payload(result: RefreshResult) -> dict[str, str]:
    return {"message": result.message}


def _spoiler_score(payload: dict[str, Any]) -> str:
    return f"||{payload['homeScore']} - {payload['awayScore']}||"


def _payload_line(payload: dict[str, Any]) -> str:
    # Discord renders <t:...:f> in the reader's own timezone
    timestamp = int(parse_iso_datetime(payload["matchDate"]).timestamp())
    return (
        f"<t:{timestamp}:f> **{payload['homeTeam']}** "
        f"{_spoiler_score(payload)} **{payload['awayTeam']}**"
    )


def format_match_line(match: Match) -> str:
    """Format one match with its score hidden behind a spoiler.

    Args:
        match: Finished match.

    Returns:
        Line with Discord timestamp, teams and spoilered score.
    """
    return _payload_line(match_payload(match))


def _window_title(week_start: str, week_end: str) -> str:
    start = int(parse_iso_datetime(week_start).timestamp())
    end = int(parse_iso_datetime(week_end).timestamp())
    return f"📅 **Results <t:{start}:d> - <t:{end}:d>**"


def _join_lines(lines: list[str]) -> str:
    """Join lines, cutting the tail off if Discord would reject the message."""
    message = "\n".join(lines)
    if len(message) <= DISCORD_MESSAGE_LIMIT:
        return message

    logger.warning(f"Message of {len(message)} chars truncated")
    kept: list[str] = []
    size = 0
    for line in lines:
        # Leave room for the ellipsis line
        if size + len(line) + 1 > DISCORD_MESSAGE_LIMIT - 4:
            break
        kept.append(line)
        size += len(line) + 1
    kept.append("…")
    return "\n".join(kept)


def format_matches_message(title: str, payloads: list[dict[str, Any]]) -> str:
    """Generate a message listing match payloads under a title.

    Args:
        title: First line of the message.
        payloads: Serialized matches, listed in the order given.

    Returns:
        Formatted string with one line per match.
    """
    if not payloads:
        return f"{title}\n{NO_MATCHES_FOUND}"

    lines = [title, f"_{SPOILER_NOTICE}_", ""]
    lines.extend(_payload_line(p) for p in payloads)
    return _join_lines(lines)


def format_week_message(view: WeekView) -> str:
    """Generate the Discord message for a week view."""
    payload = week_view_payload(view)
    title = _window_title(payload["weekStart"], payload["weekEnd"])
    if payload.get("rateLimited"):
        return f"{title}\n⏳ {payload.get('message')}"
    return format_matches_message(title, payload["matches"])


def format_current_week_message(view: CurrentWeekView) -> str:
    """Generate the Discord message for the current week."""
    title = _window_title(
        format_iso_utc(view.window.week_start),
        format_iso_utc(view.window.week_end),
    )
    payload = current_week_payload(view)
    if isinstance(payload, list):
        return format_matches_message(title, payload)
    if payload.get("rateLimited"):
        return f"{title}\n⏳ {payload.get('message')}"
    return f"{title}\n❌ {payload['message']}"


def format_gameweek_message(
    gameweek: int, season: str, matches: list[Match]
) -> str:
    """Generate the Discord message for a gameweek, ordered by kickoff."""
    ordered = sorted(matches, key=lambda m: (m.match_date, m.external_id))
    return format_matches_message(
        f"🏆 **Gameweek {gameweek} ({season})**", gameweek_payload(ordered)
    )


def format_refresh_message(result: RefreshResult) -> str:
    """Generate the reply for a failed manual refresh."""
    return f"❌ {refresh_payload(result)['message']}"


def format_validation_error(error: ValidationError) -> str:
    return f"❌ {validation_error_payload(error)['message']}"
