"""Match data types shared by the provider, transformer, store and service."""

from dataclasses import dataclass, field
from enum import Enum

import pendulum

from config.constants import DEFAULT_GAMEWEEK, DEFAULT_SEASON
from core.week_window import Window


class MatchStatus(str, Enum):
    """Lifecycle state of a match."""

    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    FINISHED = "FINISHED"

    @classmethod
    def from_upstream(cls, status: str | None) -> "MatchStatus":
        """Map an upstream status code onto the three known states."""
        if status == "FINISHED":
            return cls.FINISHED
        if status in ("IN_PLAY", "PAUSED", "LIVE"):
            return cls.LIVE
        return cls.SCHEDULED


@dataclass(frozen=True)
class Match:
    """A football match as stored and served.

    ``id`` is assigned by the store and stays ``None`` until the match has
    been upserted. Scores are only present on finished matches.
    """

    external_id: int
    home_team: str
    away_team: str
    match_date: pendulum.DateTime
    status: MatchStatus
    home_score: int | None = None
    away_score: int | None = None
    home_team_crest: str | None = None
    away_team_crest: str | None = None
    gameweek: int = DEFAULT_GAMEWEEK
    season: str = DEFAULT_SEASON
    id: int | None = None

    def __post_init__(self):
        if self.match_date.tzinfo is None:
            raise ValueError("match_date must be timezone-aware")
        has_scores = (
            self.home_score is not None or self.away_score is not None
        )
        if self.status is MatchStatus.FINISHED:
            if self.home_score is None or self.away_score is None:
                raise ValueError(
                    f"Finished match {self.external_id} needs both scores"
                )
        elif has_scores:
            raise ValueError(
                f"Match {self.external_id} has scores but is {self.status.value}"
            )

    @property
    def is_goalless(self) -> bool:
        return (
            self.status is MatchStatus.FINISHED
            and self.home_score == 0
            and self.away_score == 0
        )


class ProviderOutcome(str, Enum):
    """Closed set of results an upstream query can end in."""

    OK = "ok"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of an upstream query plus the raw records on success.

    ``was_fallback`` is True when the records came from the unbounded
    finished-matches query and still need the window filter.
    """

    outcome: ProviderOutcome
    records: list[dict] = field(default_factory=list)
    was_fallback: bool = False

    @classmethod
    def ok(cls, records: list[dict], was_fallback: bool) -> "ProviderResult":
        return cls(ProviderOutcome.OK, list(records), was_fallback)

    @classmethod
    def rate_limited(cls) -> "ProviderResult":
        return cls(ProviderOutcome.RATE_LIMITED)

    @classmethod
    def unavailable(cls) -> "ProviderResult":
        return cls(ProviderOutcome.UNAVAILABLE)


@dataclass(frozen=True)
class WeekView:
    """Matches for one week window."""

    matches: list[Match]
    window: Window
    rate_limited: bool = False
    message: str | None = None
    from_store: bool = False


@dataclass(frozen=True)
class CurrentWeekView:
    """Matches of the current week as held by the store."""

    matches: list[Match]
    window: Window
    message: str | None = None
    rate_limited: bool = False


@dataclass(frozen=True)
class RefreshResult:
    """Acknowledgement of a refresh run."""

    message: str
    ok: bool = True
    refreshed: int = 0
    rate_limited: bool = False
