"""Match data source - football-data.org (date-range primary, finished fallback)."""

import logging

import requests

from config.constants import (
    AUTH_HEADER,
    DEFAULT_COMPETITION,
    DEFAULT_REQUEST_TIMEOUT,
    FOOTBALL_API_BASE,
)
from core.match.models import ProviderResult
from core.week_window import Window

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429


class _RateLimited(Exception):
    """Upstream answered with its rate-limit status."""


class _RequestFailed(Exception):
    """Upstream call failed for any other reason."""


class MatchProvider:
    """Client for the upstream "matches in competition" resource.

    Every public method resolves to a ``ProviderResult``; nothing raised by
    the HTTP layer escapes. At most two requests are issued per call and
    they are strictly sequential.
    """

    def __init__(
        self,
        api_key: str,
        competition: str = DEFAULT_COMPETITION,
        base_url: str = FOOTBALL_API_BASE,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.competition = competition
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def matches_url(self) -> str:
        return f"{self.base_url}/competitions/{self.competition}/matches"

    def _get_matches(self, params: dict) -> list[dict]:
        """Issue one upstream request and return its match records.

        Raises:
            _RateLimited: Upstream signalled overload.
            _RequestFailed: Any other failure, including timeouts and
                malformed payloads.
        """
        try:
            response = self.session.get(
                self.matches_url,
                params=params,
                headers={AUTH_HEADER: self.api_key},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise _RequestFailed(f"timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise _RequestFailed(f"request failed: {e}") from e

        if response.status_code == RATE_LIMIT_STATUS:
            raise _RateLimited()

        if not response.ok:
            raise _RequestFailed(
                f"HTTP {response.status_code} {response.reason}: "
                f"{response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise _RequestFailed(f"invalid JSON payload: {e}") from e

        if not isinstance(data, dict):
            raise _RequestFailed("payload is not an object")

        if "matches" not in data:
            raise _RequestFailed("payload has no 'matches'")

        matches = data["matches"]
        if not isinstance(matches, list):
            raise _RequestFailed("payload 'matches' is not a list")

        return [m for m in matches if isinstance(m, dict)]

    def fetch_finished(self) -> ProviderResult:
        """Fetch every finished match in the competition (unbounded).

        Returns:
            OK with ``was_fallback=True``, RATE_LIMITED or UNAVAILABLE.
        """
        try:
            records = self._get_matches({"status": "FINISHED"})
        except _RateLimited:
            logger.warning("Rate limited on finished-matches query")
            return ProviderResult.rate_limited()
        except _RequestFailed as e:
            logger.error(f"Finished-matches query failed: {e}")
            return ProviderResult.unavailable()

        logger.info(f"Fetched {len(records)} finished matches")
        return ProviderResult.ok(records, was_fallback=True)

    def fetch_week(self, window: Window) -> ProviderResult:
        """Fetch matches for a week window, falling back once on failure.

        Tries the date-range query first. A rate-limit answer returns
        immediately; any other failure falls back to the unbounded
        finished-matches query, whose records the caller must still filter
        to the window.

        Args:
            window: Week window, reduced to its UTC days for the query.

        Returns:
            ProviderResult with the raw upstream records on success.
        """
        date_from, date_to = window.date_from, window.date_to
        logger.info(f"Fetching matches for {date_from} to {date_to}")

        try:
            records = self._get_matches(
                {"dateFrom": date_from, "dateTo": date_to}
            )
        except _RateLimited:
            logger.warning(
                f"Rate limited, returning empty for {date_from} to {date_to}"
            )
            return ProviderResult.rate_limited()
        except _RequestFailed as e:
            logger.warning(
                f"Date range query failed ({e}), "
                "falling back to finished matches"
            )
        else:
            logger.info(
                f"Fetched {len(records)} matches for {date_from} to {date_to}"
            )
            return ProviderResult.ok(records, was_fallback=False)

        return self.fetch_finished()
