"""Infrastructure fixtures: a connected in-memory database and a gateway over it."""

import pytest

from user_registry.infrastructure.database import DatabaseSessionManager
from user_registry.infrastructure.user_gateway import UserGateway


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.connect()
    yield manager
    await manager.dispose()


@pytest.fixture
async def gateway(db_manager):
    async with db_manager.session() as session:
        yield UserGateway(session)
