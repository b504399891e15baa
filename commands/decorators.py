"""Decorators for Discord command handlers."""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

import discord

from core.errors import ValidationError
from core.match.formatter import format_validation_error

logger = logging.getLogger(__name__)


def results_command(*, error_message: str):
    """Decorator mapping command failures onto replies.

    Handles:
    - ValidationError: the caller sent bad input, reply with its message
    - Any other exception: log with traceback, reply with error_message

    Upstream outages never reach this point, the service reports them as
    empty views.

    Args:
        error_message: Reply sent when the command fails unexpectedly.

    Example:
        @results_command(error_message="Failed to fetch results")
        async def results_cmd(interaction, service, offset) -> None:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(
            interaction: discord.Interaction, *args: Any, **kwargs: Any
        ) -> None:
            try:
                await func(interaction, *args, **kwargs)

            except ValidationError as e:
                logger.info(
                    f"Rejected input in {func.__name__}: {e}",
                    extra={"command": func.__name__},
                )
                await interaction.followup.send(
                    format_validation_error(e), ephemeral=True
                )
            except Exception as e:
                logger.error(
                    f"Error in {func.__name__}: {e}",
                    exc_info=True,
                    extra={"command": func.__name__},
                )
                await interaction.followup.send(error_message)

        return wrapper

    return decorator
