"""Immutable constants for the matchweek results bot."""

# Upstream provider (football-data.org v4)
FOOTBALL_API_BASE = "https://api.football-data.org/v4"
AUTH_HEADER = "X-Auth-Token"
DEFAULT_COMPETITION = "PL"
DEFAULT_REQUEST_TIMEOUT = 10.0

# Timezone of every instant in the system
TIMEZONE = "UTC"

# Week windows
WEEK_LENGTH_DAYS = 7

# Defaults for fields the upstream may omit
DEFAULT_GAMEWEEK = 1
DEFAULT_SEASON = "2024"

# A match kicked off more than this long before a fetch is settled
SETTLE_PERIOD_HOURS = 3

# Scheduled refresh
DEFAULT_REFRESH_HOURS = 6

# Response messages
RATE_LIMITED_MESSAGE = (
    "Rate limited - please wait 1 minute before navigating further"
)
UNAVAILABLE_MESSAGE = "Failed to fetch matches"
REFRESH_SUCCESS_MESSAGE = "Matches refreshed successfully"
REFRESH_FAILED_MESSAGE = "Failed to refresh matches"
INVALID_GAMEWEEK_MESSAGE = "Invalid gameweek number"

# Discord messages
ERROR_RESULTS_FETCH = "❌ Could not fetch results."
ERROR_GAMEWEEK_FETCH = "❌ Could not fetch gameweek results."
ERROR_REFRESH = "❌ Could not refresh results."
NO_MATCHES_FOUND = "No finished matches in this period."
SUCCESS_REFRESH = "✅ Results refreshed ({count} matches stored)."
SPOILER_NOTICE = "Scores are hidden, click a score to reveal it."
