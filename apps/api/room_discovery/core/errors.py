"""Domain error taxonomy and its HTTP rendering."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> dict[str, object]:
        return {"error": {"code": self.code, "message": self.message}}


class InvalidInput(DiscoveryError):
    code = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []

    def to_payload(self) -> dict[str, object]:
        payload = super().to_payload()
        payload["error"]["fields"] = self.fields  # type: ignore[index]
        return payload


class DuplicateIdentity(DiscoveryError):
    code = "DUPLICATE_IDENTITY"
    status_code = status.HTTP_409_CONFLICT


class NotFound(DiscoveryError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class Unauthenticated(DiscoveryError):
    code = "UNAUTHENTICATED"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidToken(DiscoveryError):
    code = "INVALID_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredential(DiscoveryError):
    code = "INVALID_CREDENTIAL"
    status_code = status.HTTP_401_UNAUTHORIZED


class StorageError(DiscoveryError):
    """Record store unreachable or a write failed. Never retried here."""

    code = "STORAGE_ERROR"


class ConfigurationError(DiscoveryError):
    """Raised at startup when required settings are absent."""

    code = "CONFIGURATION_ERROR"


GENERIC_SERVER_MESSAGE = "Internal server error"


def _auth_headers(exc: DiscoveryError) -> dict[str, str] | None:
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        return {"WWW-Authenticate": "Bearer"}
    return None


async def discovery_error_handler(request: Request, exc: DiscoveryError) -> JSONResponse:
    """Render a domain error, hiding server-side detail from the client."""

    if exc.status_code >= 500:
        logger.error("%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc.message)
        payload = {"error": {"code": exc.code, "message": GENERIC_SERVER_MESSAGE}}
    else:
        payload = exc.to_payload()
    return JSONResponse(status_code=exc.status_code, content=payload, headers=_auth_headers(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Translate FastAPI body validation failures into INVALID_INPUT."""

    fields: list[str] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        name = ".".join(location) or "body"
        if name not in fields:
            fields.append(name)
    error = InvalidInput(f"Invalid or missing fields: {', '.join(fields)}", fields=fields)
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": GENERIC_SERVER_MESSAGE}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DiscoveryError, discovery_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
