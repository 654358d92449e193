import uuid
from typing import AsyncGenerator, Dict, Iterable
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from agrilink.core.database import get_session
    from agrilink.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("agrilink.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build an ``Authorization`` header for a user id and role list."""
    from agrilink.server.security import create_access_token

    def _headers(user_id: uuid.UUID, roles: Iterable[str] = ("CUSTOMER",), email: str = "user@example.com") -> Dict[str, str]:
        token = create_access_token(user_id, email, list(roles))
        return {"Authorization": f"Bearer {token}"}

    return _headers
