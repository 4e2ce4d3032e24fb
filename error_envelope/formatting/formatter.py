"""Reshape failed request outcomes into the shared error envelope."""

from __future__ import annotations

from collections.abc import Sequence
import contextlib
from http import HTTPStatus
import logging
import re

from error_envelope.core.config import FormatterConfig
from error_envelope.formatting.templates import TemplateScope
from error_envelope.formatting.templates import TemplateTree
from error_envelope.formatting.templates import lookup_template
from error_envelope.formatting.templates import render_template
from error_envelope.schemas.error import ErrorObject
from error_envelope.schemas.error import ErrorResponse
from error_envelope.schemas.outcome import Failure
from error_envelope.schemas.outcome import RequestOutcome
from error_envelope.schemas.outcome import ValidationDetail

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = 500
BAD_REQUEST = 400
DEFAULT_MESSAGE = "An internal server error occurred"
MESSAGE_SEPARATOR = " or "
QUOTED_PATTERN = re.compile(r'"\w+"')

_LOWER_UPPER = re.compile(r"([a-z\d])([A-Z])")
_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z\d]+)")


def decamelize(name: str) -> str:
    """Convert ``MethodNotAllowed`` style names to ``method_not_allowed``."""
    name = _LOWER_UPPER.sub(r"\1_\2", name)
    name = _UPPER_RUN.sub(r"\1_\2", name)
    return name.lower()


def _group_by_kind(details: Sequence[ValidationDetail]) -> dict[str, list[ValidationDetail]]:
    groups: dict[str, list[ValidationDetail]] = {}
    for detail in details:
        groups.setdefault(detail.type, []).append(detail)
    return groups


def _fallback_message(detail: ValidationDetail) -> str:
    if QUOTED_PATTERN.search(detail.message):
        return detail.dotted_path + QUOTED_PATTERN.sub("", detail.message)
    return detail.message


def _render_group(kind: str, group: list[ValidationDetail], language: TemplateTree) -> list[str]:
    template = lookup_template(language, kind)

    if template is not None and template.plural and len(group) > 1:
        scope = TemplateScope(
            paths_str=", ".join(detail.dotted_path for detail in group),
            details=tuple(group),
        )
        return [render_template(template.plural, scope)]

    if template is not None:
        return [
            render_template(
                template.singular,
                TemplateScope(
                    path=detail.dotted_path,
                    separator="." if detail.path else "",
                    detail=detail,
                ),
            )
            for detail in group
        ]

    return [_fallback_message(detail) for detail in group]


def aggregate_details(details: Sequence[ValidationDetail], language: TemplateTree) -> str:
    """Collapse validation details into one message, grouped by error kind."""
    messages: list[str] = []
    for kind, group in _group_by_kind(details).items():
        messages.extend(_render_group(kind, group, language))
    return MESSAGE_SEPARATOR.join(messages)


def _default_message(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return DEFAULT_MESSAGE


def _log_server_error(failure: Failure) -> None:
    exc = failure.exc
    exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
    # A failing log sink must not change the response.
    with contextlib.suppress(Exception):
        logger.error("Server error: %s", failure.message or failure.name or DEFAULT_MESSAGE, exc_info=exc_info)


def format_failure(failure: Failure, config: FormatterConfig) -> ErrorResponse:
    """Build the replacement payload for a failed request."""
    if failure.status_code == INTERNAL_SERVER_ERROR and config.log_server_error:
        _log_server_error(failure)

    status_code = failure.status_code
    if config.validation_status_code and status_code == BAD_REQUEST:
        status_code = config.validation_status_code

    if status_code == INTERNAL_SERVER_ERROR and config.server_error_message:
        message = config.server_error_message
    elif failure.details:
        message = aggregate_details(failure.details, config.language)
    elif failure.message:
        message = failure.message
    else:
        message = _default_message(status_code)

    error_type: str | None = None
    if config.permeate_error_name and isinstance(failure.name, str) and failure.name:
        error_type = decamelize(failure.name) if config.decamelize_error_name else failure.name

    return ErrorResponse(error=ErrorObject(message=message, status_code=status_code, type=error_type))


def format_outcome(outcome: RequestOutcome, config: FormatterConfig) -> ErrorResponse | None:
    """Return the error envelope for a failure, or ``None`` to pass through."""
    if not isinstance(outcome, Failure):
        return None
    return format_failure(outcome, config)
