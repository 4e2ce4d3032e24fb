"""Message templates keyed by validation error kind, and their interpreter."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
import logging
import re
from types import MappingProxyType
from typing import Any
from typing import Union

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")
DETAIL_FIELDS = frozenset({"path", "type", "message", "context"})
INDEX_PATTERN = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class Template:
    """Message pattern for one error kind with an optional plural form."""

    singular: str
    plural: str | None = None


TemplateTree = Mapping[str, Union[Template, "TemplateTree"]]

DEFAULT_LANGUAGE: TemplateTree = MappingProxyType(
    {
        "object": MappingProxyType(
            {
                "missing": Template(
                    singular=(
                        "{path}{separator}{detail.context.peers.0} or "
                        "{path}{separator}{detail.context.peers.1} is required"
                    ),
                ),
                "xor": Template(
                    singular=(
                        "either {path}{separator}{detail.context.peers.0} or "
                        "{path}{separator}{detail.context.peers.1} is required, but not both"
                    ),
                ),
                "allowUnknown": Template(
                    singular="{path} is not allowed",
                    plural="the following parameters are not allowed: {paths_str}",
                ),
            }
        ),
    }
)


def _coerce_template(key: str, value: Mapping[str, Any], base: Template | None) -> Template:
    singular = value.get("singular", base.singular if base else None)
    plural = value.get("plural", base.plural if base else None)
    if not isinstance(singular, str):
        raise ValueError(f"template {key!r} requires a 'singular' string")
    if plural is not None and not isinstance(plural, str):
        raise ValueError(f"template {key!r} has a non-string 'plural'")
    return Template(singular=singular, plural=plural)


def _is_template_mapping(value: Mapping[str, Any]) -> bool:
    return bool(value) and set(value) <= {"singular", "plural"}


def merge_language(
    overrides: Mapping[str, Any] | None,
    base: TemplateTree = DEFAULT_LANGUAGE,
) -> TemplateTree:
    """Merge a user template tree over ``base`` and return a read-only tree.

    Only the paths present in ``overrides`` change. A template override may
    name just ``singular`` or just ``plural``; the other form is kept from
    ``base``. Leaves may be given as ``Template`` instances or as mappings.
    """
    merged: dict[str, Any] = dict(base)
    for key, value in (overrides or {}).items():
        current = merged.get(key)
        if isinstance(value, Template):
            merged[key] = value
        elif isinstance(value, Mapping) and _is_template_mapping(value):
            merged[key] = _coerce_template(key, value, current if isinstance(current, Template) else None)
        elif isinstance(value, Mapping):
            subtree = current if isinstance(current, Mapping) else MappingProxyType({})
            merged[key] = merge_language(value, subtree)
        else:
            raise ValueError(f"language entry {key!r} must be a template or a mapping")
    return MappingProxyType(merged)


def lookup_template(language: TemplateTree, kind: str) -> Template | None:
    """Resolve a dotted error kind such as ``object.xor`` to its template."""
    node: Any = language
    for segment in kind.split("."):
        if not isinstance(node, Mapping) or segment not in node:
            return None
        node = node[segment]
    return node if isinstance(node, Template) else None


def _reach(value: Any, segments: Sequence[str]) -> Any:
    for segment in segments:
        if isinstance(value, Mapping):
            value = value.get(segment)
        elif isinstance(value, Sequence) and not isinstance(value, str):
            if not INDEX_PATTERN.fullmatch(segment):
                return None
            index = int(segment)
            if not -len(value) <= index < len(value):
                return None
            value = value[index]
        else:
            return None
        if value is None:
            return None
    return value


def _reach_detail(detail: Any, segments: Sequence[str]) -> Any:
    if not segments or segments[0] not in DETAIL_FIELDS:
        return None
    return _reach(getattr(detail, segments[0], None), segments[1:])


def _dotted(detail: Any) -> str:
    return ".".join(str(segment) for segment in getattr(detail, "path", ()))


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


@dataclass(frozen=True)
class TemplateScope:
    """Values a template may reference.

    ``path``, ``separator`` and ``detail`` are set when rendering a singular
    template for one detail; ``paths_str`` and ``details`` when rendering a
    plural template for a whole group.
    """

    path: str = ""
    separator: str = ""
    paths_str: str = ""
    detail: Any = None
    details: Sequence[Any] = ()

    def resolve(self, reference: str) -> Any:
        segments = reference.strip().split(".")
        head, rest = segments[0], segments[1:]
        if head in {"path", "separator", "paths_str"} and not rest:
            return getattr(self, head)
        if head == "detail" and self.detail is not None:
            return _reach_detail(self.detail, rest)
        if head == "details" and not rest:
            return ", ".join(_dotted(item) for item in self.details)
        if head == "details":
            if rest == ["length"]:
                return len(self.details)
            item = _reach(list(self.details), rest[:1])
            return _reach_detail(item, rest[1:]) if item is not None else None
        return None


def render_template(pattern: str, scope: TemplateScope) -> str:
    """Substitute ``{reference}`` tokens; unresolved references render empty."""

    def substitute(match: re.Match[str]) -> str:
        value = scope.resolve(match.group(1))
        if value is None:
            logger.debug("Template reference %r did not resolve in %r", match.group(1), pattern)
        return _stringify(value)

    return PLACEHOLDER_PATTERN.sub(substitute, pattern)
