"""Struct-level attribute resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.constants import DEFAULT_RUNTIME_PATH, DUPLICATE_STRUCT_ATTR
from contract.errors import DuplicateStructAttribute
from contract.models import StructConfig
from grammar.attributes import PathAttribute, parse_struct_group

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import AnnotationGroup


def resolve_struct_config(groups: Iterable[AnnotationGroup]) -> StructConfig:
    """Fold every struct-level group of a record into one ``StructConfig``.

    Groups are parsed in source order; the first invalid entry or the
    second ``path`` across all groups aborts resolution.
    """
    path: PathAttribute | None = None

    for group in groups:
        for attribute in parse_struct_group(group):
            if path is not None:
                raise DuplicateStructAttribute(DUPLICATE_STRUCT_ATTR, attribute.span)
            path = attribute

    if path is None:
        return StructConfig(path=DEFAULT_RUNTIME_PATH)
    return StructConfig(path=path.path, overridden=True)


__all__ = ["resolve_struct_config"]
