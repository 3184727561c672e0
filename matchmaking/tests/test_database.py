"""Tests for connection management and database URL handling."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from matchmaking import database


class TestDatabaseUrls:
    """Tests for driver selection on DATABASE_URL."""

    def test_async_url_uses_asyncpg(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost:5432/matching")
        assert (
            database._get_async_database_url()
            == "postgresql+asyncpg://user:pw@localhost:5432/matching"
        )

    def test_async_url_requires_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValueError):
            database._get_async_database_url()

    def test_sync_url_strips_asyncpg(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://localhost/matching")
        assert database.get_sync_database_url() == "postgresql://localhost/matching"


class TestGetConnection:
    """Tests for the get_connection context manager."""

    @pytest.mark.asyncio
    async def test_does_not_commit_or_open_transaction(self):
        """Commits are left to the caller so each group can be saved on its own."""
        mock_conn = AsyncMock()
        mock_engine = MagicMock()

        @asynccontextmanager
        async def connect():
            yield mock_conn

        mock_engine.connect = connect

        with patch("matchmaking.database.get_engine", return_value=mock_engine):
            async with database.get_connection() as conn:
                assert conn is mock_conn

        mock_conn.commit.assert_not_awaited()
        mock_engine.begin.assert_not_called()
