"""Per-field key resolution.

Precedence for a field's key:

1. ``hash = K``: the literal ``K``, not hashed.
2. ``name = "s"``: ``hash40("s")``.
3. no annotation: ``hash40(<field identifier>)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.constants import DUPLICATE_FIELD_ATTR
from contract.errors import DuplicateFieldAttribute
from contract.models import FieldKey, HashKey
from derive.hash40 import hash40
from grammar.attributes import HashAttribute, NameAttribute, parse_field_group

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import FieldDefinition


def _collect_attributes(field: FieldDefinition) -> list[NameAttribute | HashAttribute]:
    # Every group is parsed before counting, so an unknown key wins over a
    # duplicate on the same field.
    attributes: list[NameAttribute | HashAttribute] = []
    for group in field.groups:
        attributes.extend(parse_field_group(group))
    return attributes


def resolve_field_key(field: FieldDefinition) -> FieldKey:
    attributes = _collect_attributes(field)
    if len(attributes) > 1:
        raise DuplicateFieldAttribute(DUPLICATE_FIELD_ATTR, attributes[1].span)

    attribute = attributes[0] if attributes else None
    if isinstance(attribute, HashAttribute):
        key = HashKey(source="hash", value=attribute.value, literal=attribute.literal)
    elif isinstance(attribute, NameAttribute):
        key = HashKey(source="name", value=hash40(attribute.name), text=attribute.name)
    else:
        key = HashKey(source="ident", value=hash40(field.name), text=field.name)

    return FieldKey(name=field.name, type_expr=field.type_expr, key=key)


def resolve_field_keys(fields: Iterable[FieldDefinition]) -> list[FieldKey]:
    """Resolve every field in declaration order; the first failure aborts."""
    return [resolve_field_key(field) for field in fields]


__all__ = ["resolve_field_key", "resolve_field_keys"]
