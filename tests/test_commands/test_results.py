"""Tests for commands.results module."""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pendulum
import pytest

from commands.results import (
    gameweek_cmd,
    refresh_results_cmd,
    results_cmd,
    this_week_cmd,
)
from config.constants import (
    ERROR_GAMEWEEK_FETCH,
    ERROR_REFRESH,
    ERROR_RESULTS_FETCH,
    NO_MATCHES_FOUND,
    RATE_LIMITED_MESSAGE,
)
from core.match import MatchService, RefreshResult
from core.rate_limit import _rate_limiter


@pytest.fixture
def mock_interaction():
    interaction = MagicMock(spec=discord.Interaction)
    interaction.user = MagicMock()
    interaction.user.id = 12345
    interaction.guild_id = 67890
    interaction.followup = AsyncMock()
    return interaction


@pytest.fixture
def mock_service():
    return MagicMock(spec=MatchService)


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    _rate_limiter._last_calls.clear()
    with patch(
        "core.rate_limit.settings.get_bypass_user_ids", return_value=set()
    ):
        yield
    _rate_limiter._last_calls.clear()


def _sent(interaction):
    return interaction.followup.send.call_args[0][0]


@pytest.mark.asyncio
async def test_results_cmd_hides_scores(
    mock_interaction, service, session, make_response, make_record
):
    """Test /results end to end with a fake upstream."""
    session.get.return_value = make_response(
        200,
        {
            "matches": [
                make_record(
                    1, "2024-03-02T15:00:00Z", home_score=3, away_score=2
                )
            ]
        },
    )

    with patch(
        "pendulum.now", return_value=pendulum.datetime(2024, 3, 15, tz="UTC")
    ):
        await results_cmd(mock_interaction, service, offset=-1)

    message = _sent(mock_interaction)
    assert "**Arsenal FC** ||3 - 2|| **Chelsea FC**" in message


@pytest.mark.asyncio
async def test_results_cmd_rate_limited(
    mock_interaction, service, session, make_response
):
    session.get.return_value = make_response(429)

    await results_cmd(mock_interaction, service, offset=0)

    assert RATE_LIMITED_MESSAGE in _sent(mock_interaction)
    assert session.get.call_count == 1


@pytest.mark.asyncio
async def test_results_cmd_passes_offset(mock_interaction, mock_service):
    mock_service.week_view.side_effect = RuntimeError("boom")

    await results_cmd(mock_interaction, mock_service, offset=-3)

    mock_service.week_view.assert_called_once_with(-3)
    mock_interaction.followup.send.assert_called_once_with(ERROR_RESULTS_FETCH)


@pytest.mark.asyncio
async def test_this_week_cmd_empty(
    mock_interaction, service, session, make_response
):
    session.get.return_value = make_response(200, {"matches": []})

    await this_week_cmd(mock_interaction, service)

    assert _sent(mock_interaction).endswith(NO_MATCHES_FOUND)


@pytest.mark.asyncio
async def test_this_week_cmd_unavailable(
    mock_interaction, service, session, make_response
):
    session.get.return_value = make_response(503)

    await this_week_cmd(mock_interaction, service)

    assert "❌ Failed to fetch matches" in _sent(mock_interaction)


@pytest.mark.asyncio
async def test_gameweek_cmd_invalid_number(mock_interaction, mock_service):
    """Test that a bad gameweek is answered without touching the service."""
    await gameweek_cmd(mock_interaction, mock_service, "twelve")

    mock_service.gameweek_view.assert_not_called()
    args, kwargs = mock_interaction.followup.send.call_args
    assert args[0] == "❌ Invalid gameweek number"
    assert kwargs["ephemeral"] is True


@pytest.mark.asyncio
async def test_gameweek_cmd_defaults_season(mock_interaction, mock_service):
    mock_service.gameweek_view.return_value = []

    await gameweek_cmd(mock_interaction, mock_service, "12")

    mock_service.gameweek_view.assert_called_once_with(12, "2024")
    assert _sent(mock_interaction).startswith("🏆 **Gameweek 12 (2024)**")


@pytest.mark.asyncio
async def test_gameweek_cmd_unexpected_error(mock_interaction, mock_service):
    mock_service.gameweek_view.side_effect = RuntimeError("boom")

    await gameweek_cmd(mock_interaction, mock_service, "12", "2023")

    mock_interaction.followup.send.assert_called_once_with(ERROR_GAMEWEEK_FETCH)


@pytest.mark.asyncio
async def test_refresh_results_cmd_success(mock_interaction, mock_service):
    mock_service.refresh.return_value = RefreshResult(
        message="Matches refreshed successfully", refreshed=380
    )

    await refresh_results_cmd(mock_interaction, mock_service)

    assert _sent(mock_interaction) == "✅ Results refreshed (380 matches stored)."


@pytest.mark.asyncio
async def test_refresh_results_cmd_failure(mock_interaction, mock_service):
    mock_service.refresh.return_value = RefreshResult(
        message="Failed to refresh matches", ok=False
    )

    await refresh_results_cmd(mock_interaction, mock_service)

    assert _sent(mock_interaction) == "❌ Failed to refresh matches"


@pytest.mark.asyncio
async def test_refresh_results_cmd_error(mock_interaction, mock_service):
    mock_service.refresh.side_effect = RuntimeError("boom")

    await refresh_results_cmd(mock_interaction, mock_service)

    mock_interaction.followup.send.assert_called_once_with(ERROR_REFRESH)


@pytest.mark.asyncio
async def test_refresh_results_cmd_rate_limited_per_guild(
    mock_interaction, mock_service
):
    """Test that a second refresh in the same guild is refused."""
    mock_service.refresh.return_value = RefreshResult(message="ok", refreshed=1)

    await refresh_results_cmd(mock_interaction, mock_service)
    await refresh_results_cmd(mock_interaction, mock_service)

    assert mock_service.refresh.call_count == 1
    assert "refreshed recently" in _sent(mock_interaction)
