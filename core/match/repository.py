"""Match data repository - storage contract and in-memory implementation."""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime

from core.errors import StoreError
from core.match.models import Match

logger = logging.getLogger(__name__)


class MatchStore(ABC):
    """Storage contract the match service depends on.

    Matches are keyed by their upstream external id; the store assigns its
    own internal id on first insert and keeps it for the match's lifetime.
    """

    @abstractmethod
    def get_by_external_id(self, external_id: int) -> Match | None:
        """Return the stored match with this external id, if any."""

    @abstractmethod
    def get_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[Match]:
        """Return matches kicking off in ``[start, end]``, by kickoff."""

    @abstractmethod
    def get_by_gameweek(self, gameweek: int, season: str) -> list[Match]:
        """Return matches of one gameweek in one season."""

    @abstractmethod
    def upsert(self, match: Match) -> Match:
        """Insert a match or overwrite the one with the same external id.

        Returns:
            The stored match, carrying its internal id.
        """

    @abstractmethod
    def get_all(self) -> list[Match]:
        """Return every stored match."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored matches."""


class InMemoryMatchStore(MatchStore):
    """Process-local match store.

    Every operation holds the same lock, so each one is atomic with respect
    to the others. Nothing survives a restart.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._matches: dict[int, Match] = {}
        self._ids_by_external_id: dict[int, int] = {}
        self._next_id = itertools.count(1)

    def _lookup(self, external_id: int) -> Match | None:
        match_id = self._ids_by_external_id.get(external_id)
        if match_id is None:
            return None
        match = self._matches.get(match_id)
        if match is None or match.external_id != external_id:
            raise StoreError(
                f"External id {external_id} indexes missing match {match_id}"
            )
        return match

    def get_by_external_id(self, external_id: int) -> Match | None:
        with self._lock:
            return self._lookup(external_id)

    def get_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[Match]:
        with self._lock:
            found = [
                m
                for m in self._matches.values()
                if start <= m.match_date <= end
            ]
        return sorted(found, key=lambda m: (m.match_date, m.external_id))

    def get_by_gameweek(self, gameweek: int, season: str) -> list[Match]:
        with self._lock:
            return [
                m
                for m in self._matches.values()
                if m.gameweek == gameweek and m.season == season
            ]

    def upsert(self, match: Match) -> Match:
        with self._lock:
            existing = self._lookup(match.external_id)
            if existing is not None:
                stored = replace(match, id=existing.id)
                if stored != existing:
                    logger.debug(
                        f"Updating match {existing.id} "
                        f"(external {match.external_id})"
                    )
            else:
                stored = replace(match, id=next(self._next_id))
                self._ids_by_external_id[match.external_id] = stored.id
                logger.debug(
                    f"Inserted match {stored.id} "
                    f"(external {match.external_id})"
                )
            self._matches[stored.id] = stored
            return stored

    def get_all(self) -> list[Match]:
        with self._lock:
            return list(self._matches.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._matches)
