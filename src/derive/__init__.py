"""Record derivation: attribute resolution, key resolution and emission."""

from derive.derivation import (
    ModuleDerivation,
    derive_record,
    derive_records,
    derive_source,
)
from derive.emitter import emit_implementation, render_module
from derive.field_keys import resolve_field_key, resolve_field_keys
from derive.hash40 import format_hash40, hash40
from derive.struct_attributes import resolve_struct_config

__all__ = [
    "ModuleDerivation",
    "derive_record",
    "derive_records",
    "derive_source",
    "emit_implementation",
    "format_hash40",
    "hash40",
    "render_module",
    "resolve_field_key",
    "resolve_field_keys",
    "resolve_struct_config",
]
