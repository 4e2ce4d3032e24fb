"""Request outcomes handed to the error formatter."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any
from typing import Union


@dataclass(frozen=True)
class ValidationDetail:
    """Single field-level failure reported by the validation layer."""

    path: tuple[str | int, ...]
    type: str
    message: str
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def dotted_path(self) -> str:
        return ".".join(str(segment) for segment in self.path)


@dataclass(frozen=True)
class Success:
    """The request completed without an error."""


@dataclass(frozen=True)
class Failure:
    """The request terminated in an error that should be reshaped."""

    status_code: int
    message: str | None = None
    details: tuple[ValidationDetail, ...] = ()
    name: str | None = None
    exc: BaseException | None = field(default=None, compare=False, repr=False)


RequestOutcome = Union[Success, Failure]
