"""API test fixtures: in-memory SQLite database + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database, already connected (state ready)
    - The app is built by create_app() exactly as in production; only app.state.db
      is injected, because httpx's ASGITransport does not run the lifespan
    - static_dir points at a temp directory holding an index.html
"""

import pytest
from httpx import ASGITransport, AsyncClient

from user_registry.config import Settings
from user_registry.infrastructure.database import DatabaseSessionManager
from user_registry.main import create_app

INDEX_HTML = "<!doctype html><title>User Registry</title>"


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.connect()
    yield manager
    await manager.dispose()


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text(INDEX_HTML)
    return public


@pytest.fixture
def settings(static_dir):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        static_dir=static_dir,
        environment="development",
        _env_file=None,
    )


@pytest.fixture
def app(settings, db_manager):
    application = create_app(settings)
    application.state.db = db_manager
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def create_user(client):
    """POST a user and return the response."""
    async def _create(name: str, email: str):
        return await client.post("/api/users", json={"name": name, "email": email})
    return _create
