"""Enveloppe d'erreur de l'API: `{"error": <message>}`.

Ce module fournit la réponse d'erreur standard du protocole et le gestionnaire des exceptions HTTP
levées par le framework (route inconnue, méthode non autorisée).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from updates_server.core.http_constants import HTTP_METHOD_NOT_ALLOWED

log = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_MESSAGE = "Expected GET."


def create_error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP exceptions with the protocol error envelope."""
    if exc.status_code == HTTP_METHOD_NOT_ALLOWED:
        message = METHOD_NOT_ALLOWED_MESSAGE
    else:
        message = str(exc.detail)

    log.info(
        "HTTP exception occurred",
        extra={
            "error_message": message,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )
    return create_error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
