"""Shared test fixtures for CSE Whiteboard."""

import os
import pytest
from httpx import ASGITransport, AsyncClient

from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.database import DatabaseManager


SECRET_KEY = "test-secret-key-for-unit-tests"
USER_A = "user_alice"
USER_B = "user_bob"


def make_settings(**overrides) -> WhiteboardSettings:
    defaults = {
        "secret_key": SECRET_KEY,
        "db_url": "sqlite+aiosqlite://",
        "summary_api_key": "",
    }
    defaults.update(overrides)
    return WhiteboardSettings(**defaults)


@pytest.fixture
async def db():
    manager = DatabaseManager(make_settings())
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def app():
    """Create a test app with in-memory DB."""
    os.environ["WHITEBOARD_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["WHITEBOARD_SECRET_KEY"] = SECRET_KEY
    os.environ["WHITEBOARD_SUMMARY_API_KEY"] = ""

    # Clear caches and singletons so new env vars take effect
    from cse_whiteboard.common.config import get_settings
    get_settings.cache_clear()

    from cse_whiteboard.deps import reset_singletons
    reset_singletons()

    from cse_whiteboard.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from cse_whiteboard.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


def _auth(user_id: str) -> dict:
    from cse_whiteboard.common.security import create_identity_token
    return {"Authorization": f"Bearer {create_identity_token(user_id)}"}


@pytest.fixture
def alice_headers(app):
    return _auth(USER_A)


@pytest.fixture
def bob_headers(app):
    return _auth(USER_B)
