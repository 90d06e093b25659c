"""Route Dependencies: readiness guard and per-request gateway.

Invariants:
    - require_db_ready runs before any handler that touches the database and
      raises DatabaseUnavailableError (503) unless the manager is ready
    - get_user_gateway yields a gateway bound to a fresh session, closed after the response
    - read_payload accepts JSON or HTML form bodies; an empty body is None

Design Decisions:
    - Manager read from request.app.state: the app owns its connection, tests
      swap it by assigning app.state.db
"""

import json
from typing import Any, AsyncGenerator

from fastapi import Request

from user_registry.core.errors import DatabaseUnavailableError, InvalidInputError
from user_registry.core.domain_types import ConnectionState
from user_registry.infrastructure.database import DatabaseSessionManager
from user_registry.infrastructure.user_gateway import UserGateway


def get_db_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db", None)


async def require_db_ready(request: Request) -> None:
    manager = get_db_manager(request)
    if manager is None:
        raise DatabaseUnavailableError(ConnectionState.UNINITIALIZED.value)
    await manager.ensure_ready()


async def get_user_gateway(request: Request) -> AsyncGenerator[UserGateway, None]:
    manager = get_db_manager(request)
    if manager is None:
        raise DatabaseUnavailableError(ConnectionState.UNINITIALIZED.value)
    async with manager.session() as session:
        yield UserGateway(session)


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
MALFORMED_BODY = "Invalid body: malformed JSON."


async def read_payload(request: Request) -> Any:
    """Request body as parsed JSON, or form fields as a dict of strings."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise InvalidInputError(MALFORMED_BODY)
