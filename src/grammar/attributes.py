"""Annotation grammar: raw ``prc(...)`` groups to tagged attributes.

Struct-level groups accept only ``path``; field-level groups accept ``name``
or ``hash``. Unknown keys raise the matching invalid-name error, malformed
entries raise ``AnnotationSyntaxError`` pinned to the entry.
"""

from __future__ import annotations

import ast
import re
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from contract.constants import (
    DOTTED_PATH_RE,
    HASH40_LIMIT,
    INVALID_FIELD_ATTR_NAME,
    INVALID_STRUCT_ATTR_NAME,
)
from contract.errors import (
    AnnotationSyntaxError,
    InvalidFieldAttributeName,
    InvalidStructAttributeName,
)
from contract.models import SourceSpan

if TYPE_CHECKING:
    from contract.models import AnnotationEntry, AnnotationGroup

_INT_LITERAL_RE = re.compile(
    r"^(0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|[0-9][0-9_]*)$"
)


class PathAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["path"] = "path"
    path: str
    span: SourceSpan


class NameAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["name"] = "name"
    name: str
    span: SourceSpan


class HashAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["hash"] = "hash"
    value: int
    literal: str = Field(description="Integer literal as it appears in source")
    span: SourceSpan


StructAttribute = PathAttribute


def _require_key(entry: AnnotationEntry) -> str:
    if entry.key is None:
        msg = f"expected `key = value` inside annotation group, found `{entry.value_source}`"
        raise AnnotationSyntaxError(msg, entry.span)
    return entry.key


def _literal_value(entry: AnnotationEntry) -> object:
    try:
        # Parenthesized so implicitly concatenated strings may span lines.
        return ast.literal_eval(f"({entry.value_source})")
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError) as exc:
        msg = f"expected a literal for `{entry.key}`, found `{entry.value_source}`"
        raise AnnotationSyntaxError(msg, entry.span) from exc


def _parse_path(entry: AnnotationEntry) -> PathAttribute:
    value = _literal_value(entry)
    if not isinstance(value, str) or not DOTTED_PATH_RE.match(value):
        msg = (
            "expected a dotted module path string for `path`, "
            f"found `{entry.value_source}`"
        )
        raise AnnotationSyntaxError(msg, entry.span)
    return PathAttribute(path=value, span=entry.span)


def _parse_name(entry: AnnotationEntry) -> NameAttribute:
    value = _literal_value(entry)
    if not isinstance(value, str):
        msg = f"expected a string literal for `name`, found `{entry.value_source}`"
        raise AnnotationSyntaxError(msg, entry.span)
    return NameAttribute(name=value, span=entry.span)


def _parse_hash(entry: AnnotationEntry) -> HashAttribute:
    value = _literal_value(entry)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"expected an integer literal for `hash`, found `{entry.value_source}`"
        raise AnnotationSyntaxError(msg, entry.span)
    if not 0 <= value < HASH40_LIMIT:
        msg = f"`hash` literal {entry.value_source} does not fit in 40 bits"
        raise AnnotationSyntaxError(msg, entry.span)

    literal = entry.value_source.strip()
    if not _INT_LITERAL_RE.match(literal):
        literal = f"{value:#x}"
    return HashAttribute(value=value, literal=literal, span=entry.span)


def parse_struct_group(group: AnnotationGroup) -> list[StructAttribute]:
    """Parse one struct-level group into its attributes, in source order."""
    attributes: list[StructAttribute] = []
    for entry in group.entries:
        key = _require_key(entry)
        if key == "path":
            attributes.append(_parse_path(entry))
        else:
            raise InvalidStructAttributeName(INVALID_STRUCT_ATTR_NAME, entry.span)
    return attributes


def parse_field_group(group: AnnotationGroup) -> list[NameAttribute | HashAttribute]:
    """Parse one field-level group into its attributes, in source order.

    An empty group is malformed: a field-level ``prc()`` must name its key.
    """
    if not group.entries:
        msg = "expected `name` or `hash` inside field annotation group `prc()`"
        raise AnnotationSyntaxError(msg, group.span)

    attributes: list[NameAttribute | HashAttribute] = []
    for entry in group.entries:
        key = _require_key(entry)
        if key == "name":
            attributes.append(_parse_name(entry))
        elif key == "hash":
            attributes.append(_parse_hash(entry))
        else:
            raise InvalidFieldAttributeName(INVALID_FIELD_ATTR_NAME, entry.span)
    return attributes


__all__ = [
    "HashAttribute",
    "NameAttribute",
    "PathAttribute",
    "StructAttribute",
    "parse_field_group",
    "parse_struct_group",
]
