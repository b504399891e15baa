"""Week window calculation.

Translates an integer week offset into the concrete instant range the
results for that week are looked up in.
"""

from dataclasses import dataclass
from datetime import datetime

import pendulum

from config.constants import TIMEZONE, WEEK_LENGTH_DAYS
from core.utils.date_parser import format_to_yyyy_mm_dd


@dataclass(frozen=True)
class Window:
    """Instant range ``[week_start, week_end]`` for one week offset.

    Both ends are inclusive, so windows for ``offset`` and ``offset + 1``
    share their boundary instant.
    """

    week_start: pendulum.DateTime
    week_end: pendulum.DateTime
    offset: int

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant falls inside the window (inclusive)."""
        return self.week_start <= instant <= self.week_end

    @property
    def date_from(self) -> str:
        """First UTC day of the window, for day-granularity queries."""
        return format_to_yyyy_mm_dd(self.week_start)

    @property
    def date_to(self) -> str:
        """Last UTC day of the window, for day-granularity queries."""
        return format_to_yyyy_mm_dd(self.week_end)


def compute_week_window(
    offset: int, now: datetime | None = None
) -> Window:
    """Compute the window for a week offset.

    The window ends ``offset`` weeks away from ``now`` and starts seven days
    before its end. Offset 0 is the seven days up to now, -1 the seven days
    before that, and so on.

    Args:
        offset: Signed number of weeks relative to now.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        Window with ``week_end - week_start`` equal to seven days.
    """
    reference = (
        pendulum.now(TIMEZONE)
        if now is None
        else pendulum.instance(now).in_timezone(TIMEZONE)
    )
    week_end = reference.add(weeks=offset)
    week_start = week_end.subtract(days=WEEK_LENGTH_DAYS)
    return Window(week_start=week_start, week_end=week_end, offset=offset)
