"""
Unit tests for engine configuration.
"""

import pytest

from signal_league.config import settings
from signal_league.storage.database import SQLITE_BUSY_TIMEOUT, engine_options


class TestEngineOptions:

    @pytest.mark.unit
    def test_sqlite_waits_on_locked_file(self):
        """Should give concurrent SQLite writers a busy timeout instead of a pool."""
        options = engine_options("sqlite+aiosqlite:///signal_league.db")
        assert options == {"connect_args": {"timeout": SQLITE_BUSY_TIMEOUT}}

    @pytest.mark.unit
    def test_server_pool_fits_concurrent_groups(self, monkeypatch):
        monkeypatch.setattr(settings, "recalc_concurrency", 16)
        options = engine_options("postgresql+asyncpg://user:pw@db/signal_league")
        assert options["pool_size"] == 16
        assert options["pool_pre_ping"] is True
