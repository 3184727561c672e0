"""Tests for the run_matching operator script."""

import importlib
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

SCRIPTS_DIR = Path(__file__).resolve().parents[2] / "scripts"


@pytest.fixture
def script(monkeypatch):
    """Import scripts/run_matching.py the way it runs from the command line."""
    monkeypatch.syspath_prepend(str(SCRIPTS_DIR))
    return importlib.import_module("run_matching")


def fake_connection(conn):
    @asynccontextmanager
    async def _get_connection():
        yield conn
    return _get_connection


def make_rows():
    availability = {
        1: ["Weekday Lunch"],
        2: ["Weekday Lunch"],
        3: ["Weekday Dinner", "Weekday Lunch"],
        4: ["Weekday Dinner"],
    }
    return [
        {
            "participant_id": participant_id,
            "practice_areas": ["Employment"],
            "experience_level": "8-15 years",
            "availability": slots,
            "locations": ["Irvine"],
            "uses_separate_locations": False,
            "status": "pending",
        }
        for participant_id, slots in availability.items()
    ]


async def run_preview(script, single_membership):
    mock_conn = AsyncMock()
    with patch("matchmaking.runner.get_connection", fake_connection(mock_conn)), patch(
        "matchmaking.runner.participant_queries.get_participants_for_cycle",
        new=AsyncMock(return_value=make_rows()),
    ), patch.object(script, "close_engine", new=AsyncMock()) as mock_close:
        exit_code = await script.preview("March 2025", ["pending"], single_membership)
    mock_close.assert_awaited_once()
    return exit_code


class TestPreview:
    """Tests for the --dry-run path."""

    @pytest.mark.asyncio
    async def test_honours_single_membership_setting(self, script, monkeypatch, capsys):
        monkeypatch.setenv("MATCHING_SINGLE_MEMBERSHIP", "true")

        assert await run_preview(script, None) == 0

        out = capsys.readouterr().out
        assert "4 participants, 1 groups" in out
        assert out.count("Participant 3 ") == 1
        assert "Unplaced participants: 1" in out

    @pytest.mark.asyncio
    async def test_honours_single_membership_flag(self, script, monkeypatch, capsys):
        monkeypatch.delenv("MATCHING_SINGLE_MEMBERSHIP", raising=False)

        assert await run_preview(script, True) == 0

        assert "4 participants, 1 groups" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_default_keeps_repeat_memberships(self, script, monkeypatch, capsys):
        monkeypatch.delenv("MATCHING_SINGLE_MEMBERSHIP", raising=False)

        assert await run_preview(script, None) == 0

        out = capsys.readouterr().out
        assert "4 participants, 2 groups" in out
        assert out.count("Participant 3 ") == 2
