"""Global exception handling.

Business-rule failures never reach this handler; they are returned as
outcome bodies by the routes. What arrives here is bad input, missing
records, datastore failures and bugs.
"""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from src.shared.errors import CollaboratorError

logger = structlog.get_logger()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, CollaboratorError):
        logger.error(
            "collaborator_error",
            request_id=request_id,
            operation=exc.operation,
            error=str(exc),
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": "collaborator_error",
                "message": "The datastore is unavailable",
                "request_id": request_id,
            },
        )

    if isinstance(exc, ValueError):
        logger.warning("bad_request", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={"error": "bad_request", "message": str(exc), "request_id": request_id},
        )

    if isinstance(exc, (KeyError, LookupError)):
        logger.warning("not_found", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "message": str(exc), "request_id": request_id},
        )

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": request_id,
        },
    )
