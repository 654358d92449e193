"""
Unit tests for FastAPI application lifespan management.

Tests verify that application startup initializes the database and that
shutdown completes cleanly.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

pytestmark = pytest.mark.asyncio


class TestLifespan:
    """Test application lifespan events."""

    async def test_lifespan_startup_initializes_database(self):
        """Test that lifespan startup calls init_db exactly once."""
        from agrilink.server.main import lifespan

        with patch("agrilink.server.main.init_db", new_callable=AsyncMock) as mock_init_db:
            async with lifespan(FastAPI()):
                mock_init_db.assert_awaited_once()

        mock_init_db.assert_awaited_once()

    async def test_lifespan_logs_startup_and_shutdown(self):
        from agrilink.server.main import lifespan

        with patch("agrilink.server.main.init_db", new_callable=AsyncMock), patch(
            "agrilink.server.main.logger"
        ) as mock_logger:
            async with lifespan(FastAPI()):
                pass

        messages = [c[0][0] for c in mock_logger.info.call_args_list]
        assert any("Starting up AgriLink" in m for m in messages)
        assert any("Shutting down AgriLink" in m for m in messages)

    async def test_startup_failure_propagates(self):
        from agrilink.server.main import lifespan

        with patch("agrilink.server.main.init_db", new_callable=AsyncMock, side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError, match="db down"):
                async with lifespan(FastAPI()):
                    pass
