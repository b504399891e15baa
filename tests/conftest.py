"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pendulum
import pytest
import requests

from core.match import InMemoryMatchStore, MatchProvider, MatchService


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    monkeypatch.setenv("DISCORD_TOKEN", "test_token_123")
    monkeypatch.setenv("FOOTBALL_API_KEY", "0123456789abcdef0123456789abcdef")
    monkeypatch.setenv("COMPETITION_CODE", "PL")


@pytest.fixture
def now():
    """Reference instant used across pipeline tests."""
    return pendulum.datetime(2024, 3, 15, tz="UTC")


@pytest.fixture
def make_record():
    """Factory for upstream match records in the football-data.org shape."""

    def _make(
        match_id=1,
        utc_date="2024-03-10T15:00:00Z",
        home="Arsenal FC",
        away="Chelsea FC",
        home_score=2,
        away_score=1,
        status="FINISHED",
        matchday=28,
        season_start="2023-08-11",
    ):
        record = {
            "id": match_id,
            "utcDate": utc_date,
            "status": status,
            "matchday": matchday,
            "homeTeam": {
                "name": home,
                "crest": f"https://crests.example/{home[:3].lower()}.png",
            },
            "awayTeam": {
                "name": away,
                "crest": f"https://crests.example/{away[:3].lower()}.png",
            },
            "score": {"fullTime": {"home": home_score, "away": away_score}},
        }
        if season_start is not None:
            record["season"] = {"startDate": season_start}
        return record

    return _make


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""

    def _make(status_code=200, payload=None, json_error=False):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.reason = "OK" if response.ok else "Error"
        response.text = "" if payload is None else str(payload)
        if json_error:
            response.json.side_effect = ValueError("Expecting value")
        else:
            response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def session():
    """Mock HTTP session handed to the provider."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def provider(session):
    return MatchProvider(
        api_key="test-key", competition="PL", timeout=5, session=session
    )


@pytest.fixture
def store():
    return InMemoryMatchStore()


@pytest.fixture
def service(provider, store):
    return MatchService(provider=provider, store=store)
