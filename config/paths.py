"""Centralized file path configuration.

All file paths used by the bot are defined here for easy maintenance
and testing.
"""

from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Environment file with credentials and settings
ENV_FILE = PROJECT_ROOT / ".env"

# Log files (stored in project root)
LOG_FILE = PROJECT_ROOT / "bot.log"
