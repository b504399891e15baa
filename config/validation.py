"""Configuration validation utilities."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def validate_discord_token(token: str) -> bool:
    """Validate Discord bot token format.

    Args:
        token: Discord bot token to validate.

    Returns:
        True if token format is valid, False otherwise.
    """
    # Discord tokens are base64 encoded, typically 59+ chars
    # Should not start with placeholder text
    return (
        len(token) > 50
        and not token.startswith("your_")
        and not token.startswith("YOUR_")
    )


def validate_api_key(api_key: str) -> bool:
    """Validate football-data.org API key format.

    Args:
        api_key: Credential sent as X-Auth-Token.

    Returns:
        True if the key looks like a real token, False otherwise.
    """
    # Keys are 32 hex characters
    return (
        len(api_key) == 32
        and all(c in "0123456789abcdefABCDEF" for c in api_key)
    )


def validate_competition_code(code: str) -> bool:
    """Validate competition code (e.g. "PL", "BL1", "SA").

    Args:
        code: Competition code to validate.

    Returns:
        True if the code is 2-4 uppercase letters or digits.
    """
    return 2 <= len(code) <= 4 and code.isalnum() and code.upper() == code


def validate_request_timeout(timeout: str) -> bool:
    """Validate request timeout is a positive number of seconds.

    Args:
        timeout: Timeout value to validate.

    Returns:
        True if timeout parses as a positive float, False otherwise.
    """
    try:
        return float(timeout) > 0
    except ValueError:
        return False


def validate_refresh_hours(hours: str) -> bool:
    """Validate refresh interval is a whole number of hours in 1-24.

    Args:
        hours: Hours value to validate.

    Returns:
        True if hours is valid, False otherwise.
    """
    if not hours.isdigit():
        return False

    hours_int = int(hours)
    return 1 <= hours_int <= 24


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate all configuration values.

    Args:
        config: Dictionary of configuration key-value pairs.

    Returns:
        List of validation error messages (empty if all valid).

    Example:
        >>> config = {
        ...     "DISCORD_TOKEN": "valid_token_here",
        ...     "FOOTBALL_API_KEY": "0123456789abcdef0123456789abcdef",
        ...     "COMPETITION_CODE": "PL",
        ... }
        >>> errors = validate_config(config)
        >>> if errors:
        ...     print("Config errors:", errors)
    """
    errors = []

    token = config.get("DISCORD_TOKEN", "")
    if not validate_discord_token(token):
        errors.append(
            "Invalid DISCORD_TOKEN format (must be >50 chars "
            "and not be a placeholder)"
        )

    api_key = config.get("FOOTBALL_API_KEY", "")
    if not validate_api_key(api_key):
        errors.append(
            "Invalid FOOTBALL_API_KEY format (must be 32 hex characters)"
        )

    code = config.get("COMPETITION_CODE", "PL")
    if not validate_competition_code(code):
        errors.append(
            "COMPETITION_CODE must be 2-4 uppercase letters or digits"
        )

    timeout = config.get("REQUEST_TIMEOUT_SECONDS", "10")
    if not validate_request_timeout(timeout):
        errors.append("REQUEST_TIMEOUT_SECONDS must be a positive number")

    hours = config.get("REFRESH_HOURS", "6")
    if not validate_refresh_hours(hours):
        errors.append("REFRESH_HOURS must be a number between 1 and 24")

    if errors:
        logger.error(f"Configuration validation failed: {errors}")
    else:
        logger.info("Configuration validation passed")

    return errors
