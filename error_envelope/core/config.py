"""Formatter configuration helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from functools import lru_cache
import os
from typing import Any

from error_envelope.formatting.templates import DEFAULT_LANGUAGE
from error_envelope.formatting.templates import TemplateTree
from error_envelope.formatting.templates import merge_language

DEFAULT_LOG_SERVER_ERROR = True
DEFAULT_PERMEATE_ERROR_NAME = False
DEFAULT_DECAMELIZE_ERROR_NAME = False

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _get_optional_int_env(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


def _get_optional_str_env(name: str) -> str | None:
    raw = os.getenv(name)
    return raw or None


@dataclass(frozen=True)
class FormatterConfig:
    """Read-only settings shared by every formatting call of one app."""

    log_server_error: bool = DEFAULT_LOG_SERVER_ERROR
    validation_status_code: int | None = None
    server_error_message: str | None = None
    permeate_error_name: bool = DEFAULT_PERMEATE_ERROR_NAME
    decamelize_error_name: bool = DEFAULT_DECAMELIZE_ERROR_NAME
    language: TemplateTree = field(default_factory=lambda: DEFAULT_LANGUAGE)

    def __post_init__(self) -> None:
        code = self.validation_status_code
        if code is not None and not 100 <= code <= 599:
            raise ValueError("validation_status_code must be a valid HTTP status code")
        if not isinstance(self.language, Mapping):
            raise ValueError("language must be a mapping")
        if self.language is not DEFAULT_LANGUAGE:
            object.__setattr__(self, "language", merge_language(self.language))

    def safe_for_logging(self) -> dict[str, Any]:
        """Return formatter settings suitable for log lines."""
        return {
            "log_server_error": self.log_server_error,
            "validation_status_code": self.validation_status_code,
            "server_error_message": self.server_error_message is not None,
            "permeate_error_name": self.permeate_error_name,
            "decamelize_error_name": self.decamelize_error_name,
            "language_kinds": sorted(self.language),
        }


def build_formatter_config(
    *,
    language: Mapping[str, Any] | None = None,
    **options: Any,
) -> FormatterConfig:
    """Build a config, merging ``language`` over the built-in templates."""
    return FormatterConfig(language=DEFAULT_LANGUAGE if language is None else language, **options)


@lru_cache(maxsize=1)
def get_formatter_config() -> FormatterConfig:
    """Load formatter settings from the environment."""
    return FormatterConfig(
        log_server_error=_get_bool_env("ERROR_ENVELOPE_LOG_SERVER_ERROR", DEFAULT_LOG_SERVER_ERROR),
        validation_status_code=_get_optional_int_env("ERROR_ENVELOPE_VALIDATION_STATUS_CODE"),
        server_error_message=_get_optional_str_env("ERROR_ENVELOPE_SERVER_ERROR_MESSAGE"),
        permeate_error_name=_get_bool_env("ERROR_ENVELOPE_PERMEATE_ERROR_NAME", DEFAULT_PERMEATE_ERROR_NAME),
        decamelize_error_name=_get_bool_env(
            "ERROR_ENVELOPE_DECAMELIZE_ERROR_NAME",
            DEFAULT_DECAMELIZE_ERROR_NAME,
        ),
    )
