"""Error Handlers: global exception handlers for the user registry API.

Invariants:
    - Every error response body is JSON of the form {"error": <message>}
    - UserRegistryError -> its own http_status and message
    - RequestValidationError (query/path coercion) -> 400 naming the bad parameter
    - HTTPException (unknown route, wrong method) -> its status, detail as message
    - Exception (catch-all) -> 500 "Internal Server Error"
    - "detail" is added to 500-level bodies only outside production

Design Decisions:
    - Four-layer handler: domain, framework validation, framework HTTP, catch-all
    - include_detail fixed at registration time from Settings.is_production
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry.core.errors import UserRegistryError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


def register_error_handlers(app: FastAPI, include_detail: bool) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app, include_detail)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app, include_detail)


def _register_domain_error_handler(app: FastAPI, include_detail: bool) -> None:

    @app.exception_handler(UserRegistryError)
    async def user_registry_error_handler(request: Request, exc: UserRegistryError):
        extra = {
            "error_code": exc.code, "path": request.url.path,
            "method": request.method, "status_code": exc.http_status,
            "user_id": exc.context.user_id,
        }
        if exc.is_client_error:
            logger.info(f"{exc.code}: {exc.message}", extra=extra)
        else:
            logger.error(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(include_detail=include_detail),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        errors = exc.errors()
        logger.warning(
            f"Validation error on {request.url.path}: {errors}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _describe_validation_error(errors)},
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI, include_detail: bool) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: detail only outside production."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        content = {"error": INTERNAL_ERROR}
        if include_detail:
            content["detail"] = repr(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content,
        )


def _describe_validation_error(errors: list[dict]) -> str:
    if not errors:
        return "Invalid request data"
    loc = errors[0].get("loc", ())
    if len(loc) >= 2:
        return f"Invalid {loc[-1]}"
    return "Invalid request data"
