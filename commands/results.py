"""Discord slash commands for spoiler-free results."""

import asyncio
import logging
from datetime import timedelta

import discord

from commands.decorators import results_command
from config.constants import (
    DEFAULT_SEASON,
    ERROR_GAMEWEEK_FETCH,
    ERROR_REFRESH,
    ERROR_RESULTS_FETCH,
    SUCCESS_REFRESH,
)
from core.match import MatchService, parse_gameweek
from core.match.formatter import (
    format_current_week_message,
    format_gameweek_message,
    format_refresh_message,
    format_week_message,
)
from core.rate_limit import rate_limit

logger = logging.getLogger(__name__)


@results_command(error_message=ERROR_RESULTS_FETCH)
async def results_cmd(
    interaction: discord.Interaction, service: MatchService, offset: int = 0
) -> None:
    """Handle /results slash command.

    Args:
        interaction: Discord interaction from slash command.
        service: Match service owning the store.
        offset: Week offset, 0 for the last seven days.
    """
    logger.info(
        f"Results for week {offset} requested by {interaction.user}",
        extra={"offset": offset, "command": "results"},
    )
    loop = asyncio.get_event_loop()
    view = await loop.run_in_executor(None, service.week_view, offset)
    await interaction.followup.send(format_week_message(view))


@results_command(error_message=ERROR_RESULTS_FETCH)
async def this_week_cmd(
    interaction: discord.Interaction, service: MatchService
) -> None:
    """Handle /this_week slash command."""
    loop = asyncio.get_event_loop()
    view = await loop.run_in_executor(None, service.current_week_view)
    await interaction.followup.send(format_current_week_message(view))


@results_command(error_message=ERROR_GAMEWEEK_FETCH)
async def gameweek_cmd(
    interaction: discord.Interaction,
    service: MatchService,
    gameweek: str,
    season: str | None = None,
) -> None:
    """Handle /gameweek slash command.

    Only reads the store; gameweeks not fetched yet come back empty until
    a refresh has run.

    Args:
        interaction: Discord interaction from slash command.
        service: Match service owning the store.
        gameweek: Gameweek number as typed by the user.
        season: Season start year, defaults to the configured season.
    """
    number = parse_gameweek(gameweek)
    season = season or DEFAULT_SEASON
    loop = asyncio.get_event_loop()
    matches = await loop.run_in_executor(
        None, service.gameweek_view, number, season
    )
    await interaction.followup.send(
        format_gameweek_message(number, season, matches)
    )


@rate_limit(
    per_user=False,
    per_guild=True,
    interval=timedelta(minutes=10),
    message="⏳ Results were refreshed recently.",
)
@results_command(error_message=ERROR_REFRESH)
async def refresh_results_cmd(
    interaction: discord.Interaction, service: MatchService
) -> None:
    """Handle /refresh_results slash command."""
    loop = asyncio.get_event_loop()
    result = await loop.run_in_executor(None, service.refresh)
    if result.ok:
        await interaction.followup.send(
            SUCCESS_REFRESH.format(count=result.refreshed)
        )
    else:
        await interaction.followup.send(format_refresh_message(result))
