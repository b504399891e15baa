"""Command rate limiting, protecting the upstream request quota."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import wraps
from typing import Any

import discord

from config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """In-memory tracker of the last allowed call per key.

    Keys are built from the command name plus the guild and/or user the
    call came from. State lives in the process only.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or (lambda: datetime.now(UTC))
        self._last_calls: dict[str, datetime] = {}

    def is_allowed(self, key: str, min_interval: timedelta) -> bool:
        """Check and record a call.

        Args:
            key: Rate limit key (e.g., "results:1234").
            min_interval: Minimum time between allowed calls.

        Returns:
            True if the call is allowed (and is now the last call), False
            if it came too soon after the previous allowed one.
        """
        now = self._clock()
        last_call = self._last_calls.get(key)

        if last_call is None or (now - last_call) >= min_interval:
            self._last_calls[key] = now
            return True

        return False

    def get_remaining_time(self, key: str, min_interval: timedelta) -> int:
        """Seconds until ``key`` is allowed again, 0 if it already is."""
        last_call = self._last_calls.get(key)
        if last_call is None:
            return 0

        remaining = min_interval - (self._clock() - last_call)
        return max(0, int(remaining.total_seconds()))

    def reset(self, key: str) -> None:
        self._last_calls.pop(key, None)


# Shared by every decorated command
_rate_limiter = RateLimiter()


def _format_remaining_time(seconds: int) -> str:
    """Format remaining seconds (e.g., "2h", "45m", "30s")."""
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    elif seconds >= 60:
        return f"{seconds // 60}m"
    else:
        return f"{seconds}s"


def _build_key(
    name: str,
    interaction: discord.Interaction,
    per_user: bool,
    per_guild: bool,
) -> str:
    key_parts = [name]
    if per_guild and interaction.guild_id:
        key_parts.append(f"g{interaction.guild_id}")
    if per_user:
        key_parts.append(f"u{interaction.user.id}")
    return ":".join(key_parts)


def rate_limit(
    *,
    per_user: bool = True,
    per_guild: bool = False,
    interval: timedelta = timedelta(minutes=1),
    message: str = "⏳ Slow down, try again later.",
):
    """Decorator for rate-limiting Discord commands.

    Users listed in ``BYPASS_USER_IDS`` are never limited. In DMs a
    per-guild limit falls back to the command-wide key.

    Args:
        per_user: Limit each user separately.
        per_guild: Limit each guild separately.
        interval: Minimum time between allowed calls.
        message: Reply sent when a call is refused.

    Example:
        @rate_limit(per_user=False, per_guild=True, interval=timedelta(hours=1))
        async def refresh_command(interaction, service) -> None:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(
            interaction: discord.Interaction, *args: Any, **kwargs: Any
        ) -> Any:
            if interaction.user.id in settings.get_bypass_user_ids():
                logger.info(
                    f"User {interaction.user.id} bypassing rate limit "
                    f"for {func.__name__}"
                )
                return await func(interaction, *args, **kwargs)

            key = _build_key(func.__name__, interaction, per_user, per_guild)

            if not _rate_limiter.is_allowed(key, interval):
                remaining = _rate_limiter.get_remaining_time(key, interval)
                formatted_time = _format_remaining_time(remaining)

                logger.info(
                    f"Rate limit hit for {func.__name__} (key={key}, "
                    f"{formatted_time} remaining)",
                    extra={
                        "command": func.__name__,
                        "user_id": interaction.user.id,
                    },
                )

                await interaction.followup.send(
                    f"{message} ({formatted_time} remaining)", ephemeral=True
                )
                return None

            return await func(interaction, *args, **kwargs)

        return wrapper

    return decorator
