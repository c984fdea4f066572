"""Tests for the run-once membership renewal job entry point."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from jobs import membership_renewal


RESULTS = {
    "startTime": "2026-03-10T00:00:00+00:00",
    "endTime": "2026-03-10T00:00:02+00:00",
    "durationSeconds": 2.0,
    "remindersSent": 3,
    "remindersSkipped": 1,
    "remindersFailed": 0,
    "membershipsExpired": 2,
    "malformedSkipped": 0,
    "errors": [],
}


@pytest.fixture
def mock_database():
    database = MagicMock()
    database.connect = AsyncMock()
    database.disconnect = AsyncMock()
    return database


class TestRunOnce:
    @pytest.mark.asyncio
    async def test_connects_sweeps_and_disconnects(self, mock_database):
        renewal_service = MagicMock()
        renewal_service.run_sweep = AsyncMock(return_value=RESULTS)

        with patch.object(membership_renewal, "MongoDB", return_value=mock_database), \
                patch.object(membership_renewal, "build_renewal_service", return_value=renewal_service):
            results = await membership_renewal.run_once()

        assert results == RESULTS
        mock_database.connect.assert_awaited_once()
        assert mock_database.connect.call_args.kwargs["document_models"][0].__name__ == "Client"
        mock_database.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disconnects_when_sweep_setup_fails(self, mock_database):
        with patch.object(membership_renewal, "MongoDB", return_value=mock_database), \
                patch.object(membership_renewal, "build_renewal_service", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                await membership_renewal.run_once()

        mock_database.disconnect.assert_awaited_once()


class TestMain:
    @pytest.mark.asyncio
    async def test_exit_code_reflects_errors(self, capsys):
        failing = dict(RESULTS, errors=["Failed to expire membership of client 1: write conflict"])

        with patch.object(membership_renewal, "run_once", new=AsyncMock(return_value=failing)):
            with pytest.raises(SystemExit) as exc_info:
                await membership_renewal.main()

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "Memberships Expired: 2" in output
        assert "write conflict" in output

    @pytest.mark.asyncio
    async def test_clean_run_exits_zero(self, capsys):
        with patch.object(membership_renewal, "run_once", new=AsyncMock(return_value=RESULTS)):
            with pytest.raises(SystemExit) as exc_info:
                await membership_renewal.main()

        assert exc_info.value.code == 0
        assert "Reminders Sent: 3" in capsys.readouterr().out
