"""Translate pydantic validation errors into formatter validation details."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from error_envelope.schemas.outcome import ValidationDetail

LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})

# pydantic error type -> (error kind, default phrase following the quoted label)
KIND_MAP: dict[str, tuple[str, str]] = {
    "extra_forbidden": ("object.allowUnknown", "is not allowed"),
    "missing": ("any.required", "is required"),
    "int_parsing": ("number.base", "must be a number"),
    "int_type": ("number.base", "must be a number"),
    "float_parsing": ("number.base", "must be a number"),
    "float_type": ("number.base", "must be a number"),
    "string_type": ("string.base", "must be a string"),
    "bool_parsing": ("boolean.base", "must be a boolean"),
    "bool_type": ("boolean.base", "must be a boolean"),
    "literal_error": ("any.allowOnly", "must be one of [{expected}]"),
    "enum": ("any.allowOnly", "must be one of [{expected}]"),
    "model_type": ("object.base", "must be an object"),
    "dict_type": ("object.base", "must be an object"),
}


def _strip_location(location: Iterable[Any]) -> tuple[str | int, ...]:
    parts = list(location)
    if parts and parts[0] in LOCATION_PREFIXES:
        parts = parts[1:]
    return tuple(part if isinstance(part, int) else str(part) for part in parts)


def _expected_values(context: Mapping[str, Any]) -> str:
    expected = str(context.get("expected", ""))
    return ", ".join(part.strip().strip("'\"") for part in expected.replace(" or ", ",").split(",") if part.strip())


def detail_from_error(error: Mapping[str, Any]) -> ValidationDetail:
    """Convert one pydantic error dict into a ``ValidationDetail``."""
    path = _strip_location(error.get("loc", ()))
    raw_type = str(error.get("type", "unknown"))
    context = MappingProxyType(dict(error.get("ctx") or {}))

    kind = raw_type
    message = str(error.get("msg", "Invalid value"))
    if raw_type in KIND_MAP:
        kind, phrase = KIND_MAP[raw_type]
        label = str(path[-1]) if path else "value"
        message = f'"{label}" ' + phrase.format(expected=_expected_values(context))

    return ValidationDetail(path=path, type=kind, message=message, context=context)


def details_from_validation_errors(errors: Iterable[Mapping[str, Any]]) -> tuple[ValidationDetail, ...]:
    """Convert ``RequestValidationError.errors()`` output into details."""
    return tuple(detail_from_error(error) for error in errors)
