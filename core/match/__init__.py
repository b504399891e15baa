"""Match module - Handles match data fetching, storage, and formatting.

This module provides a clean API for the weekly results pipeline:
- Fetching from football-data.org (date-range query, finished-matches fallback)
- Filtering and normalizing upstream records
- Storing matches keyed by their upstream id
- Formatting payloads and Discord messages
"""

from core.match.coverage import CoverageLedger
from core.match.models import (
    CurrentWeekView,
    Match,
    MatchStatus,
    ProviderOutcome,
    ProviderResult,
    RefreshResult,
    WeekView,
)
from core.match.repository import InMemoryMatchStore, MatchStore
from core.match.service import MatchService, parse_gameweek
from core.match.sources import MatchProvider
from core.match.transformer import parse_upstream_match, transform_matches

__all__ = [
    "CoverageLedger",
    "CurrentWeekView",
    "InMemoryMatchStore",
    "Match",
    "MatchProvider",
    "MatchService",
    "MatchStatus",
    "MatchStore",
    "ProviderOutcome",
    "ProviderResult",
    "RefreshResult",
    "WeekView",
    "parse_gameweek",
    "parse_upstream_match",
    "transform_matches",
]


def build_service(
    api_key: str, competition: str, timeout: float
) -> MatchService:
    """Wire a service with a fresh provider and in-memory store.

    Called once at process start; the returned service owns the store for
    the life of the process.
    """
    provider = MatchProvider(
        api_key=api_key, competition=competition, timeout=timeout
    )
    return MatchService(provider=provider, store=InMemoryMatchStore())
