"""Error envelope schemas written to the client."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    message: str
    status_code: int
    type: str | None = None


class ErrorResponse(BaseModel):
    """Top-level error response envelope."""

    error: ErrorObject
