"""Matchweek results bot - Main entry point.

A Discord bot that posts the week's finished football results with the
scores hidden behind spoilers.
"""

import asyncio
import logging
import signal

import discord
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from discord import app_commands
from discord.ext import commands

from commands.results import (
    gameweek_cmd,
    refresh_results_cmd,
    results_cmd,
    this_week_cmd,
)
from config import settings
from config.paths import LOG_FILE
from config.validation import validate_config
from core.logging_config import setup_logging
from core.match import MatchService, build_service
from tasks.refresh import build_refresh_trigger, scheduled_refresh

setup_logging(LOG_FILE)
logger = logging.getLogger(__name__)

# Configure bot with minimal required intents
intents = discord.Intents.default()
description = "Spoiler-free weekly football results."
bot = commands.Bot(
    command_prefix="!", description=description, intents=intents
)

# Created once at startup, shared by every command
service: MatchService
refresh_hours: int


def load_configuration() -> tuple[str, MatchService, int]:
    """Load configuration from .env file or run setup wizard.

    Returns:
        Tuple of (discord token, match service, refresh interval hours).

    Raises:
        ValueError: If configuration is invalid.
    """
    if not settings.exists():
        logger.info("No configuration found, running setup wizard")
        settings.setup_interactive()

    try:
        token = settings.get_required("DISCORD_TOKEN")
        api_key = settings.get_api_key()
        competition = settings.get_competition()

        config = {
            "DISCORD_TOKEN": token,
            "FOOTBALL_API_KEY": api_key,
            "COMPETITION_CODE": competition,
            "REQUEST_TIMEOUT_SECONDS": settings.get(
                "REQUEST_TIMEOUT_SECONDS", "10"
            ),
            "REFRESH_HOURS": settings.get("REFRESH_HOURS", "6"),
        }
        validation_errors = validate_config(config)

        if validation_errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {err}" for err in validation_errors
            )
            logger.error(error_msg)
            raise ValueError(error_msg)

        match_service = build_service(
            api_key=api_key,
            competition=competition,
            timeout=settings.get_request_timeout(),
        )
        logger.info(
            f"Configuration loaded, following competition {competition}"
        )
        return token, match_service, settings.get_refresh_hours()

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise


async def safe_defer(interaction: discord.Interaction) -> bool:
    """Safely defer an interaction.

    Returns:
        True if defer succeeded, False if it failed.
    """
    try:
        await interaction.response.defer()
        return True
    except discord.NotFound:
        # Interaction expired before we could acknowledge it
        logger.warning(f"Interaction {interaction.id} expired (10062)")
        return False
    except discord.HTTPException as e:
        logger.error(f"HTTP error deferring interaction {interaction.id}: {e}")
        return False


@bot.tree.command(name="results", description="Finished matches of a week")
@app_commands.describe(
    offset="Weeks from now: 0 is the last seven days, -1 the week before"
)
async def results(interaction: discord.Interaction, offset: int = 0) -> None:
    """Show a week's results with hidden scores."""
    if not await safe_defer(interaction):
        return
    await results_cmd(interaction, service, offset)


@bot.tree.command(name="this_week", description="Results of the last 7 days")
async def this_week(interaction: discord.Interaction) -> None:
    """Show the current week's results with hidden scores."""
    if not await safe_defer(interaction):
        return
    await this_week_cmd(interaction, service)


@bot.tree.command(name="gameweek", description="Stored results of a gameweek")
@app_commands.describe(
    gameweek="Gameweek number", season="Season start year, e.g. 2024"
)
async def gameweek(
    interaction: discord.Interaction,
    gameweek: str,
    season: str | None = None,
) -> None:
    """Show a gameweek's results with hidden scores."""
    if not await safe_defer(interaction):
        return
    await gameweek_cmd(interaction, service, gameweek, season)


@bot.tree.command(
    name="refresh_results", description="Fetch the latest results now"
)
async def refresh_results(interaction: discord.Interaction) -> None:
    """Refresh stored results from the upstream provider."""
    if not await safe_defer(interaction):
        return
    await refresh_results_cmd(interaction, service)


@bot.event
async def on_ready() -> None:
    """Event handler for bot ready state."""
    logger.info(f"Logged in as {bot.user} (ID: {bot.user.id})")

    try:
        synced = await bot.tree.sync()
        logger.info(f"Synced {len(synced)} slash command(s)")
    except discord.HTTPException as e:
        logger.error(f"Failed to sync commands: {e}")

    scheduler = AsyncIOScheduler()

    async def refresh_job():
        await scheduled_refresh(service)

    scheduler.add_job(
        refresh_job,
        build_refresh_trigger(refresh_hours),
    )
    scheduler.start()
    logger.info(f"Scheduler started, refreshing every {refresh_hours}h")

    # Warm the store so /gameweek has data before the first scheduled run
    await scheduled_refresh(service)


@bot.tree.error
async def on_app_command_error(
    interaction: discord.Interaction,
    error: app_commands.AppCommandError,
) -> None:
    """Global error handler for slash commands."""
    if isinstance(error, app_commands.CommandNotFound):
        return

    logger.error(f"App command error: {error}", exc_info=True)

    try:
        error_msg = "Something went wrong running this command."
        if not interaction.response.is_done():
            await interaction.response.send_message(error_msg, ephemeral=True)
        else:
            await interaction.followup.send(error_msg, ephemeral=True)
    except discord.HTTPException as e:
        logger.error(f"Failed to send error message: {e}")


async def shutdown(sig):
    """Cleanup tasks on shutdown.

    Args:
        sig: Signal received (SIGTERM or SIGINT).
    """
    logger.info(f"Received exit signal {sig.name}...")

    tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    logger.info(f"Cancelling {len(tasks)} outstanding tasks")
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)

    await bot.close()
    logger.info("Bot shutdown complete")


async def main(token: str) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig, lambda s=sig: asyncio.create_task(shutdown(s))
        )
    async with bot:
        await bot.start(token)


if __name__ == "__main__":
    token, service, refresh_hours = load_configuration()

    try:
        asyncio.run(main(token))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    finally:
        logger.info("Bot stopped")
