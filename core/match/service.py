"""Match service - composes window, provider, transformer and store per request."""

import logging
from datetime import datetime

import pendulum

from config.constants import (
    DEFAULT_SEASON,
    INVALID_GAMEWEEK_MESSAGE,
    RATE_LIMITED_MESSAGE,
    REFRESH_FAILED_MESSAGE,
    REFRESH_SUCCESS_MESSAGE,
    TIMEZONE,
    UNAVAILABLE_MESSAGE,
)
from core.errors import ValidationError
from core.match.coverage import CoverageLedger
from core.match.models import (
    CurrentWeekView,
    Match,
    ProviderOutcome,
    RefreshResult,
    WeekView,
)
from core.match.repository import MatchStore
from core.match.sources import MatchProvider
from core.match.transformer import transform_matches
from core.week_window import compute_week_window

logger = logging.getLogger(__name__)


def parse_gameweek(gameweek: int | str) -> int:
    """Validate a caller-supplied gameweek.

    Args:
        gameweek: Integer or decimal string (surrounding spaces allowed).

    Returns:
        The gameweek as an int.

    Raises:
        ValidationError: If the value is not an integer.
    """
    if isinstance(gameweek, bool):
        raise ValidationError(INVALID_GAMEWEEK_MESSAGE)
    if isinstance(gameweek, int):
        return gameweek
    if isinstance(gameweek, str):
        text = gameweek.strip()
        digits = text[1:] if text[:1] in "+-" else text
        if digits.isdecimal():
            return int(text)
    raise ValidationError(INVALID_GAMEWEEK_MESSAGE)


class MatchService:
    """Serves week, current-week and gameweek views, and refreshes the store.

    The store is read through: a week already fetched completely is served
    from it, anything else goes to the provider and is written back before
    being read from the store.
    """

    def __init__(
        self,
        provider: MatchProvider,
        store: MatchStore,
        coverage: CoverageLedger | None = None,
    ):
        self.provider = provider
        self.store = store
        self.coverage = coverage or CoverageLedger()

    @staticmethod
    def _now(now: datetime | None) -> pendulum.DateTime:
        if now is None:
            return pendulum.now(TIMEZONE)
        return pendulum.instance(now).in_timezone(TIMEZONE)

    def week_view(self, offset: int, now: datetime | None = None) -> WeekView:
        """Get the finished matches of the week ``offset`` weeks from now.

        Args:
            offset: Signed week offset, 0 being the last seven days.
            now: Reference instant, defaults to the current time.

        Returns:
            WeekView; rate limiting and upstream failures give an empty list.
        """
        now = self._now(now)
        window = compute_week_window(offset, now)

        if self.coverage.covers(window.week_start, window.week_end):
            matches = self.store.get_by_date_range(
                window.week_start, window.week_end
            )
            logger.info(
                f"Serving week {offset} from store ({len(matches)} matches)",
                extra={"offset": offset, "outcome": "store"},
            )
            return WeekView(matches=matches, window=window, from_store=True)

        result = self.provider.fetch_week(window)

        if result.outcome is ProviderOutcome.RATE_LIMITED:
            logger.warning(
                f"Week {offset} rate limited",
                extra={"offset": offset, "outcome": result.outcome.value},
            )
            return WeekView(
                matches=[],
                window=window,
                rate_limited=True,
                message=RATE_LIMITED_MESSAGE,
            )

        if result.outcome is ProviderOutcome.UNAVAILABLE:
            logger.error(
                f"Week {offset} unavailable, returning no matches",
                extra={"offset": offset, "outcome": result.outcome.value},
            )
            return WeekView(matches=[], window=window)

        matches = transform_matches(
            result.records, window, was_fallback=result.was_fallback
        )
        for match in matches:
            self.store.upsert(match)
        self.coverage.record(window.week_start, window.week_end, now)

        stored = self.store.get_by_date_range(
            window.week_start, window.week_end
        )
        logger.info(
            f"Week {offset}: {len(stored)} matches",
            extra={"offset": offset, "outcome": result.outcome.value},
        )
        return WeekView(matches=stored, window=window)

    def current_week_view(self, now: datetime | None = None) -> CurrentWeekView:
        """Get the current week's matches, adding unseen ones to the store.

        Matches already stored are left as they are; use ``refresh`` to
        pick up score corrections.
        """
        now = self._now(now)
        window = compute_week_window(0, now)
        result = self.provider.fetch_finished()

        if result.outcome is ProviderOutcome.RATE_LIMITED:
            return CurrentWeekView(
                matches=[],
                window=window,
                message=RATE_LIMITED_MESSAGE,
                rate_limited=True,
            )
        if result.outcome is ProviderOutcome.UNAVAILABLE:
            logger.error("Current week unavailable, returning no matches")
            return CurrentWeekView(
                matches=[], window=window, message=UNAVAILABLE_MESSAGE
            )

        inserted = 0
        for match in transform_matches(
            result.records, window, was_fallback=result.was_fallback
        ):
            if self.store.get_by_external_id(match.external_id) is None:
                self.store.upsert(match)
                inserted += 1
        self.coverage.record(window.week_start, window.week_end, now)

        matches = self.store.get_by_date_range(
            window.week_start, window.week_end
        )
        logger.info(
            f"Current week: {len(matches)} matches ({inserted} new)"
        )
        return CurrentWeekView(matches=matches, window=window)

    def gameweek_view(
        self, gameweek: int | str, season: str | None = None
    ) -> list[Match]:
        """Get stored matches of a gameweek.

        Raises:
            ValidationError: If ``gameweek`` is not an integer. The
                provider is not called in that case, nor in any other.
        """
        number = parse_gameweek(gameweek)
        season = (season or DEFAULT_SEASON).strip()
        matches = self.store.get_by_gameweek(number, season)
        logger.info(
            f"Gameweek {number} of {season}: {len(matches)} stored matches"
        )
        return matches

    def refresh(self, now: datetime | None = None) -> RefreshResult:
        """Fetch every finished match and overwrite the stored copies."""
        now = self._now(now)
        result = self.provider.fetch_finished()

        if result.outcome is ProviderOutcome.RATE_LIMITED:
            logger.warning("Refresh rate limited")
            return RefreshResult(
                message=RATE_LIMITED_MESSAGE, ok=False, rate_limited=True
            )
        if result.outcome is ProviderOutcome.UNAVAILABLE:
            logger.error("Refresh failed, upstream unavailable")
            return RefreshResult(message=REFRESH_FAILED_MESSAGE, ok=False)

        matches = transform_matches(result.records, None, was_fallback=True)
        for match in matches:
            self.store.upsert(match)
        self.coverage.record(None, now, now)

        logger.info(
            f"Refreshed {len(matches)} matches, store holds {len(self.store)}"
        )
        return RefreshResult(
            message=REFRESH_SUCCESS_MESSAGE, refreshed=len(matches)
        )
