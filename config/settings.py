"""Environment-based configuration.

Values come from the process environment, with a ``.env`` file at the
project root loaded on import (existing environment variables win).
"""

import logging
import os

from dotenv import load_dotenv, set_key

from config.constants import (
    DEFAULT_COMPETITION,
    DEFAULT_REFRESH_HOURS,
    DEFAULT_REQUEST_TIMEOUT,
)
from config.paths import ENV_FILE

logger = logging.getLogger(__name__)

env_path = ENV_FILE

load_dotenv(env_path)


def get(key: str, default: str | None = None) -> str | None:
    """Get a configuration value.

    Args:
        key: Environment variable name.
        default: Value returned when the variable is not set.

    Returns:
        The configured value or the default.
    """
    return os.environ.get(key, default)


def get_required(key: str) -> str:
    """Get a configuration value that must be set.

    Args:
        key: Environment variable name.

    Returns:
        The configured value.

    Raises:
        ValueError: If the variable is missing or empty.
    """
    value = os.environ.get(key)
    if not value:
        raise ValueError(f"Required environment variable {key} is not set")
    return value


def exists() -> bool:
    """Check whether a .env file is present at the project root."""
    return env_path.exists()


def get_api_key() -> str:
    """Get the upstream credential.

    ``FOOTBALL_API_KEY`` is preferred, ``FOOTBALL_DATA_API_KEY`` is accepted
    as an alias. Returns an empty string when neither is set.
    """
    return get("FOOTBALL_API_KEY") or get("FOOTBALL_DATA_API_KEY") or ""


def get_competition() -> str:
    """Get the competition code to query (e.g. "PL")."""
    return (get("COMPETITION_CODE") or DEFAULT_COMPETITION).strip().upper()


def get_request_timeout() -> float:
    """Get the upstream request timeout in seconds.

    Falls back to the default when the value is missing or not a positive
    number.
    """
    raw = get("REQUEST_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(
            f"Invalid REQUEST_TIMEOUT_SECONDS={raw!r}, using default"
        )
        return DEFAULT_REQUEST_TIMEOUT
    if timeout <= 0:
        logger.warning(
            f"Non-positive REQUEST_TIMEOUT_SECONDS={raw!r}, using default"
        )
        return DEFAULT_REQUEST_TIMEOUT
    return timeout


def get_refresh_hours() -> int:
    """Get the interval in hours between scheduled refreshes."""
    raw = get("REFRESH_HOURS", str(DEFAULT_REFRESH_HOURS)).strip()
    if raw.isdigit() and int(raw) > 0:
        return int(raw)
    logger.warning(f"Invalid REFRESH_HOURS={raw!r}, using default")
    return DEFAULT_REFRESH_HOURS


def get_bypass_user_ids() -> set[int]:
    """Get Discord user IDs that bypass command rate limits.

    Reads a comma-separated list from ``BYPASS_USER_IDS``. Any malformed
    entry invalidates the whole list.

    Returns:
        Set of user IDs, empty when unset or invalid.
    """
    raw = get("BYPASS_USER_IDS", "") or ""
    if not raw.strip():
        return set()

    try:
        return {int(part.strip()) for part in raw.split(",") if part.strip()}
    except ValueError:
        logger.error(f"Invalid BYPASS_USER_IDS format: {raw!r}")
        return set()


def setup_interactive() -> None:
    """Prompt for the required settings and write them to the .env file."""
    print("No configuration found. Let's set up the bot.")
    token = input("Discord bot token: ").strip()
    api_key = input("football-data.org API key: ").strip()
    competition = (
        input(f"Competition code [{DEFAULT_COMPETITION}]: ").strip()
        or DEFAULT_COMPETITION
    )

    env_path.touch(exist_ok=True)
    set_key(str(env_path), "DISCORD_TOKEN", token)
    set_key(str(env_path), "FOOTBALL_API_KEY", api_key)
    set_key(str(env_path), "COMPETITION_CODE", competition.upper())

    load_dotenv(env_path, override=True)
    logger.info(f"Configuration written to {env_path}")
