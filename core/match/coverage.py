"""Bookkeeping of which kickoff ranges the store holds completely."""

import logging
import threading
from datetime import datetime, timedelta

import pendulum

from config.constants import SETTLE_PERIOD_HOURS

logger = logging.getLogger(__name__)

SETTLE_PERIOD = timedelta(hours=SETTLE_PERIOD_HOURS)

# Lower bound for "everything before" coverage from unbounded fetches
EARLIEST = pendulum.datetime(1900, 1, 1, tz="UTC")


class CoverageLedger:
    """Closed kickoff intervals for which every finished match is stored.

    A successful fetch at instant ``t`` vouches only for kickoffs up to
    ``t - SETTLE_PERIOD``: later matches may still be in play and turn up
    finished on the next fetch. Overlapping or touching intervals are
    merged.
    """

    def __init__(self, settle_period: timedelta = SETTLE_PERIOD):
        self.settle_period = settle_period
        self._lock = threading.Lock()
        self._intervals: list[tuple[datetime, datetime]] = []

    def record(
        self, start: datetime | None, end: datetime, fetched_at: datetime
    ) -> None:
        """Record that kickoffs in ``[start, end]`` were fetched at ``fetched_at``.

        Args:
            start: First covered instant, or None for no lower bound.
            end: Last covered instant.
            fetched_at: When the upstream answered.
        """
        start = EARLIEST if start is None else start
        end = min(end, fetched_at - self.settle_period)
        if end < start:
            logger.debug("Fetch too recent to cover any settled range")
            return

        with self._lock:
            intervals = sorted(self._intervals + [(start, end)])
            merged = [intervals[0]]
            for lo, hi in intervals[1:]:
                last_lo, last_hi = merged[-1]
                if lo <= last_hi:
                    merged[-1] = (last_lo, max(last_hi, hi))
                else:
                    merged.append((lo, hi))
            self._intervals = merged

    def covers(self, start: datetime, end: datetime) -> bool:
        """Check whether ``[start, end]`` lies inside one recorded interval."""
        with self._lock:
            return any(lo <= start and end <= hi for lo, hi in self._intervals)

    def clear(self) -> None:
        with self._lock:
            self._intervals = []
