"""Application exceptions and FastAPI exception handler registration."""

from __future__ import annotations

from http import HTTPStatus
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from error_envelope.core.config import FormatterConfig
from error_envelope.core.config import get_formatter_config
from error_envelope.formatting.formatter import DEFAULT_MESSAGE
from error_envelope.formatting.formatter import format_failure
from error_envelope.formatting.validation import details_from_validation_errors
from error_envelope.schemas.outcome import Failure

logger = logging.getLogger(__name__)

VALIDATION_ERROR_NAME = "ValidationError"


class FormattedError(Exception):
    """Base application exception rendered with its own status and message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(FormattedError):
    """Convenience exception for malformed requests."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FormattedError):
    """Convenience exception for missing resources."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ConflictError(FormattedError):
    """Convenience exception for state conflicts."""

    status_code = status.HTTP_409_CONFLICT


def _error_name(exc: BaseException) -> str | None:
    # Builtins such as NameError expose unrelated ``name`` members; only instance attributes count.
    attributes = getattr(exc, "__dict__", {})
    if "name" in attributes:
        name = attributes["name"]
        return name if isinstance(name, str) and name else None
    return type(exc).__name__


def _http_error_name(status_code: int) -> str | None:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return None
    return "".join(word.capitalize() for word in phrase.replace("-", " ").split())


def _config_for(request: Request) -> FormatterConfig:
    return request.app.state.error_formatter_config


def _build_error_response(
    request: Request,
    failure: Failure,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    payload = format_failure(failure, _config_for(request))
    return JSONResponse(
        status_code=payload.error.status_code,
        content=payload.model_dump(exclude_none=True),
        headers=headers,
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse request validation errors into a single message."""

    failure = Failure(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Request validation failed",
        details=details_from_validation_errors(exc.errors()),
        name=VALIDATION_ERROR_NAME,
        exc=exc,
    )
    return _build_error_response(request, failure)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap HTTP exceptions raised by routing or handlers."""

    message = exc.detail if isinstance(exc.detail, str) and exc.detail else None
    failure = Failure(
        status_code=exc.status_code,
        message=message,
        name=_http_error_name(exc.status_code),
        exc=exc,
    )
    return _build_error_response(request, failure, headers=getattr(exc, "headers", None))


async def formatted_error_handler(request: Request, exc: FormattedError) -> JSONResponse:
    """Render explicit application errors."""

    failure = Failure(
        status_code=exc.status_code,
        message=exc.message,
        name=_error_name(exc),
        exc=exc,
    )
    return _build_error_response(request, failure)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    failure = Failure(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=DEFAULT_MESSAGE,
        name=_error_name(exc),
        exc=exc,
    )
    return _build_error_response(request, failure)


def register_error_handlers(app: FastAPI, config: FormatterConfig | None = None) -> None:
    """Attach the error formatter to a FastAPI app instance."""

    config = config or get_formatter_config()
    app.state.error_formatter_config = config

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(FormattedError, formatted_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.info("Registered error formatter with config=%s", config.safe_for_logging())
