"""
Centralized error handlers for the Agent Demo API.

Every error leaves the API in the same envelope:
``{"error": {"code": ..., "message": ..., "status_code": ...}}``.
"""

import logging
from typing import Any, Dict, List, Optional

from agent_demo.core.exceptions import BaseAppException
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def _error_body(
    code: str,
    message: str,
    status_code: int,
    details: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {
        "code": code,
        "message": message,
        "status_code": status_code,
    }
    if details:
        error["details"] = details
    return {"error": error}


async def base_exception_handler(
    request: Request, exc: BaseAppException
) -> JSONResponse:
    """Handle all application-specific exceptions.

    Args:
        request: The incoming request that caused the exception
        exc: The application exception that was raised

    Returns:
        JSON response with standardized error format
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application error: {exc.error_code} - {exc.detail}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, str(exc.detail), exc.status_code),
        headers=exc.headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body/query validation failures in the shared envelope."""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info(
        f"Validation failed on {request.method} {request.url.path}: {len(details)} error(s)"
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "VALIDATION_ERROR",
            "Validation failed",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            details,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors.

    Args:
        request: The incoming request that caused the exception
        exc: The unhandled exception that was raised

    Returns:
        JSON response with generic error message (no sensitive details)
    """
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application's exception handlers to a FastAPI instance."""
    app.add_exception_handler(BaseAppException, base_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
