"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from pokemon_bingo.core.security import create_access_token
from pokemon_bingo.database import Database
from pokemon_bingo.main import app


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Points the Database singleton at the test database; the lifespan is not
    run, so no real connection is attempted.
    """
    original_db = Database.db
    Database.db = test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Restore original db
    Database.db = original_db


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def auth_headers(seeded_db):
    """Valid token for a regular user (ash)."""
    return bearer("user-ash")


@pytest.fixture
def moderator_headers(seeded_db):
    """Valid token for a moderator (oak)."""
    return bearer("user-oak")


@pytest.fixture
def token_headers():
    """Build auth headers for any user id."""
    return bearer
