"""
Error handlers - map exceptions to JSON bodies ``{error, details}``.

Status codes:
    400  request validation / business rule (DomainError)
    404  NotFoundError
    409  ConflictError
    500  anything else (logged with traceback, reported generically)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.services.errors import InternalError, ServiceError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Erreur interne du serveur"


def _field_path(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "requete"


def _error_response(status_code: int, error: str, details) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


def register_error_handlers(app: FastAPI, *, expose_internal_details: bool = False) -> None:
    """Install the exception handlers on ``app``."""

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [{"champ": _field_path(tuple(err.get("loc", ()))), "message": err.get("msg", "")} for err in exc.errors()]
        return _error_response(status.HTTP_400_BAD_REQUEST, "Données invalides", details)

    @app.exception_handler(ServiceError)
    async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if isinstance(exc, InternalError) or exc.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.label, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Erreur non gérée sur %s %s", request.method, request.url.path)
        details = str(exc) if expose_internal_details else "Une erreur est survenue"
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR, details)
