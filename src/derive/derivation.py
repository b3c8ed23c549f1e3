"""Derivation entry point.

``derive_record`` runs the linear pipeline for one record: shape check,
struct attributes, field keys, emission. Any ``DerivationError`` ends it and
nothing is emitted for that record. ``derive_source`` applies it to every
record of one source file and turns errors into diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.constants import MODULE_LEVEL_ONLY_ERR, NAMED_RECORD_ONLY_ERR
from contract.errors import DerivationError, UnsupportedShape
from derive.emitter import emit_implementation, render_module
from derive.field_keys import resolve_field_keys
from derive.struct_attributes import resolve_struct_config
from parse.treesitter_records import extract_records

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.errors import Diagnostic
    from contract.models import GeneratedImplementation, RecordDefinition

_SHAPE_DETAILS = {
    "unit": "{name} declares no fields",
    "tuple": "{name} is tuple-like",
    "enum": "{name} is an enum",
    "function": "{name} is not a class",
}


def _check_shape(record: RecordDefinition) -> None:
    if record.shape != "named":
        detail = _SHAPE_DETAILS[record.shape].format(name=record.name)
        raise UnsupportedShape(f"{NAMED_RECORD_ONLY_ERR} ({detail})", record.span)
    if not record.module_level:
        raise UnsupportedShape(
            f"{MODULE_LEVEL_ONLY_ERR} ({record.name} is nested)", record.span
        )


def derive_record(record: RecordDefinition) -> GeneratedImplementation:
    """Derive the deserialization implementation of a single record.

    Raises:
        DerivationError: the record's shape or annotations are invalid.
    """
    _check_shape(record)
    config = resolve_struct_config(record.groups)
    keys = resolve_field_keys(record.fields)
    return emit_implementation(record, config, keys)


@dataclass
class ModuleDerivation:
    relative_path: str
    module: str
    implementations: list[GeneratedImplementation] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def render(self) -> str | None:
        """Generated module text, or None unless every record derived cleanly."""
        if not self.ok or not self.implementations:
            return None
        return render_module(self.relative_path, self.implementations)


def derive_records(
    records: Iterable[RecordDefinition],
    *,
    relative_path: str,
    module: str,
) -> ModuleDerivation:
    result = ModuleDerivation(relative_path=relative_path, module=module)
    for record in records:
        try:
            result.implementations.append(derive_record(record))
        except DerivationError as exc:
            result.diagnostics.append(exc.to_diagnostic(record.name))
    return result


def derive_source(
    source: str | bytes,
    *,
    relative_path: str,
    module: str,
) -> ModuleDerivation:
    """Discover and derive every marked record in one module's source."""
    try:
        records = extract_records(source, relative_path=relative_path, module=module)
    except DerivationError as exc:
        result = ModuleDerivation(relative_path=relative_path, module=module)
        result.diagnostics.append(exc.to_diagnostic())
        return result
    return derive_records(records, relative_path=relative_path, module=module)


__all__ = [
    "ModuleDerivation",
    "derive_record",
    "derive_records",
    "derive_source",
]
