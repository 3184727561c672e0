"""Tests for participant and match group queries (mocked connection)."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from matchmaking.enums import ParticipantStatus, Slot
from matchmaking.queries.match_groups import (
    create_match_group,
    get_match_groups_for_cycle,
    set_group_finalized,
    update_meeting_details,
)
from matchmaking.queries.participants import (
    get_participants_for_cycle,
    get_status_counts,
    mark_participants_matched,
)


def mock_result(rows=None, first=None):
    """Test helper: result whose mappings() iterates rows and .first() returns first."""
    result = MagicMock()
    mappings = MagicMock()
    mappings.__iter__.return_value = iter(rows or [])
    mappings.first.return_value = first
    result.mappings.return_value = mappings
    return result


class TestGetParticipantsForCycle:
    """Test loading a cycle's participants."""

    @pytest.mark.asyncio
    async def test_returns_rows_as_dicts(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(rows=[
            {"participant_id": 1, "cycle": "March 2025"},
            {"participant_id": 2, "cycle": "March 2025"},
        ]))

        result = await get_participants_for_cycle(
            mock_conn, "March 2025", [ParticipantStatus.pending]
        )

        assert [r["participant_id"] for r in result] == [1, 2]
        mock_conn.execute.assert_awaited_once()


class TestMarkParticipantsMatched:
    """Test the batched status update."""

    @pytest.mark.asyncio
    async def test_empty_updates_skip_database(self):
        mock_conn = AsyncMock()

        count = await mark_participants_matched(mock_conn, {})

        assert count == 0
        mock_conn.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_single_executemany(self):
        """All participants are updated in one statement."""
        mock_conn = AsyncMock()

        count = await mark_participants_matched(mock_conn, {1: 10, 2: 10, 3: 11})

        assert count == 3
        mock_conn.execute.assert_awaited_once()
        params = mock_conn.execute.call_args.args[1]
        assert params == [
            {"b_participant_id": 1, "b_match_group_id": 10},
            {"b_participant_id": 2, "b_match_group_id": 10},
            {"b_participant_id": 3, "b_match_group_id": 11},
        ]


class TestGetStatusCounts:
    """Test counting participants by status."""

    @pytest.mark.asyncio
    async def test_fills_missing_statuses_with_zero(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(rows=[
            {"status": ParticipantStatus.matched, "count": 3},
            {"status": "pending", "count": 2},
        ]))

        counts = await get_status_counts(mock_conn, "March 2025")

        assert counts == {"pending": 2, "matched": 3, "emailed": 0}


class TestCreateMatchGroup:
    """Test creating a group with its members."""

    @pytest.mark.asyncio
    async def test_inserts_group_and_members(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(side_effect=[
            mock_result(first={"match_group_id": 7, "cycle": "March 2025"}),
            MagicMock(),
        ])

        group = await create_match_group(
            mock_conn, "March 2025", Slot.weekday_lunch, "Tustin", [1, 2, 3]
        )

        assert group["match_group_id"] == 7
        assert group["participant_ids"] == [1, 2, 3]
        assert mock_conn.execute.await_count == 2
        member_params = mock_conn.execute.call_args_list[1].args[1]
        assert member_params == [
            {"match_group_id": 7, "participant_id": 1},
            {"match_group_id": 7, "participant_id": 2},
            {"match_group_id": 7, "participant_id": 3},
        ]

    @pytest.mark.asyncio
    async def test_no_members_single_insert(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(first={"match_group_id": 8}))

        group = await create_match_group(mock_conn, "March 2025", Slot.weekend_dinner, "Irvine", [])

        assert group["participant_ids"] == []
        mock_conn.execute.assert_awaited_once()


class TestGetMatchGroupsForCycle:
    """Test listing a cycle's groups with members."""

    @pytest.mark.asyncio
    async def test_no_groups(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(rows=[]))

        assert await get_match_groups_for_cycle(mock_conn, "March 2025") == []
        mock_conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_attaches_members_to_groups(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(side_effect=[
            mock_result(rows=[
                {"match_group_id": 1, "slot": Slot.weekday_lunch, "location": "Tustin"},
                {"match_group_id": 2, "slot": Slot.weekend_dinner, "location": "Irvine"},
            ]),
            mock_result(rows=[
                {"match_group_id": 1, "participant_id": 10, "name": "A"},
                {"match_group_id": 2, "participant_id": 11, "name": "B"},
                {"match_group_id": 1, "participant_id": 12, "name": "C"},
            ]),
        ])

        groups = await get_match_groups_for_cycle(mock_conn, "March 2025")

        assert [g["match_group_id"] for g in groups] == [1, 2]
        assert [m["participant_id"] for m in groups[0]["members"]] == [10, 12]
        assert [m["participant_id"] for m in groups[1]["members"]] == [11]
        assert "match_group_id" not in groups[0]["members"][0]


class TestAdminUpdates:
    """Test finalization and meeting detail updates."""

    @pytest.mark.asyncio
    async def test_set_group_finalized(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(
            return_value=mock_result(first={"match_group_id": 3, "is_finalized": True})
        )

        group = await set_group_finalized(mock_conn, 3, True)

        assert group["is_finalized"] is True

    @pytest.mark.asyncio
    async def test_set_group_finalized_missing(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(first=None))

        assert await set_group_finalized(mock_conn, 99, True) is None

    @pytest.mark.asyncio
    async def test_update_meeting_details(self):
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(first={
            "match_group_id": 3,
            "meeting_time": "Tuesday 12:00",
            "meeting_location": "Tustin",
        }))

        group = await update_meeting_details(mock_conn, 3, meeting_time="Tuesday 12:00")

        assert group["meeting_time"] == "Tuesday 12:00"
        mock_conn.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_meeting_details_nothing_to_change(self):
        """No fields given just reads the group back."""
        mock_conn = AsyncMock()
        mock_conn.execute = AsyncMock(return_value=mock_result(first=None))

        assert await update_meeting_details(mock_conn, 99) is None
