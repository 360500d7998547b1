"""Domain error → HTTP response mapping."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.errors import ConfigurationError, NotFoundError, PartnerDeskError, ValidationError


def status_for(exc: PartnerDeskError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (ValidationError, ConfigurationError)):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_400_BAD_REQUEST


async def _handle_domain_error(request: Request, exc: PartnerDeskError) -> JSONResponse:
    return JSONResponse(status_code=status_for(exc), content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors raised by any route to 4xx JSON responses."""
    app.add_exception_handler(PartnerDeskError, _handle_domain_error)  # type: ignore[arg-type]
