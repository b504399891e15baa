"""Scheduled task keeping the match store current."""

import asyncio
import logging

from apscheduler.triggers.interval import IntervalTrigger

from config.constants import TIMEZONE
from core.match import MatchService, RefreshResult

logger = logging.getLogger(__name__)


async def scheduled_refresh(service: MatchService) -> RefreshResult | None:
    """Refresh every finished match so score corrections reach the store.

    Args:
        service: Match service owning the store.

    Returns:
        The refresh acknowledgement, or None if the run crashed.
    """
    try:
        logger.info("Scheduled refresh started")
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(None, service.refresh)

        if result.ok:
            logger.info(
                f"Scheduled refresh stored {result.refreshed} matches"
            )
        elif result.rate_limited:
            logger.warning(
                "Scheduled refresh rate limited, will retry next run"
            )
        else:
            logger.error(f"Scheduled refresh failed: {result.message}")
        return result

    except Exception as e:
        logger.error(f"Error in scheduled refresh task: {e}", exc_info=True)
        return None


def build_refresh_trigger(hours: int) -> IntervalTrigger:
    """Build the scheduler trigger firing every ``hours`` hours."""
    return IntervalTrigger(hours=hours, timezone=TIMEZONE)
