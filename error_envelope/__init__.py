"""Uniform JSON error envelopes for FastAPI applications."""

from error_envelope.core.config import FormatterConfig
from error_envelope.core.config import build_formatter_config
from error_envelope.core.config import get_formatter_config
from error_envelope.core.errors import BadRequestError
from error_envelope.core.errors import ConflictError
from error_envelope.core.errors import FormattedError
from error_envelope.core.errors import NotFoundError
from error_envelope.core.errors import register_error_handlers
from error_envelope.formatting.formatter import aggregate_details
from error_envelope.formatting.formatter import decamelize
from error_envelope.formatting.formatter import format_failure
from error_envelope.formatting.formatter import format_outcome
from error_envelope.formatting.templates import DEFAULT_LANGUAGE
from error_envelope.formatting.templates import Template
from error_envelope.schemas.error import ErrorObject
from error_envelope.schemas.error import ErrorResponse
from error_envelope.schemas.outcome import Failure
from error_envelope.schemas.outcome import RequestOutcome
from error_envelope.schemas.outcome import Success
from error_envelope.schemas.outcome import ValidationDetail

__all__ = [
    "BadRequestError",
    "ConflictError",
    "DEFAULT_LANGUAGE",
    "ErrorObject",
    "ErrorResponse",
    "Failure",
    "FormattedError",
    "FormatterConfig",
    "NotFoundError",
    "RequestOutcome",
    "Success",
    "Template",
    "ValidationDetail",
    "aggregate_details",
    "build_formatter_config",
    "decamelize",
    "format_failure",
    "format_outcome",
    "get_formatter_config",
    "register_error_handlers",
]
