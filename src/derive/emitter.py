"""Source emission for derived records.

Emission is template expansion over a small intermediate form: the record
name, its runtime path and the ordered ``(field, key, type)`` triples. The
output depends only on that input, so re-deriving an unchanged record gives
byte-identical text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from contract.constants import GENERATED_HEADER_PREFIX
from contract.models import GeneratedImplementation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contract.models import FieldKey, HashKey, RecordDefinition, StructConfig

_INDENT = "    "


def key_expression(runtime_path: str, key: HashKey) -> str:
    """Expression that evaluates to ``key`` through the runtime's hash module."""
    if key.source == "hash":
        return f"{runtime_path}.hash40.Hash40({key.literal})"
    return f"{runtime_path}.hash40.hash40({key.text!r})"


def reader_function_name(record_name: str) -> str:
    return f"_read_{record_name}"


def _field_line(runtime_path: str, field: FieldKey) -> str:
    key = key_expression(runtime_path, field.key)
    return (
        f"{_INDENT * 2}{field.name}=_data.read_child("
        f"reader, {key}, offsets, {field.type_expr}),"
    )


def emit_implementation(
    record: RecordDefinition,
    config: StructConfig,
    keys: Sequence[FieldKey],
) -> GeneratedImplementation:
    """Emit the ``read_param`` implementation of one record.

    The record is built by a single constructor call whose keyword arguments
    are evaluated in declaration order, so the first failing read aborts the
    call and no partially built record escapes.
    """
    runtime = config.path
    function_name = reader_function_name(record.name)

    lines = [
        f"def {function_name}(",
        f"{_INDENT}cls: type[{record.name}],",
        f"{_INDENT}reader: BinaryIO,",
        f"{_INDENT}offsets: {runtime}.FileOffsets,",
        f") -> {record.name}:",
        f"{_INDENT}_data = {runtime}.StructData.from_stream(reader)",
        f"{_INDENT}return cls(",
        *(_field_line(runtime, field) for field in keys),
        f"{_INDENT})",
        "",
        "",
        f"{record.name}.read_param = classmethod({function_name})",
    ]

    runtime_root = runtime.split(".")[0]
    imported = {record.name}
    for field in record.fields:
        imported.update(name for name in field.type_names if name != runtime_root)

    return GeneratedImplementation(
        record=record.name,
        module=record.module,
        runtime_path=runtime,
        imported_names=tuple(sorted(imported)),
        fields=tuple(keys),
        source="\n".join(lines) + "\n",
    )


def render_module(
    relative_path: str,
    implementations: Sequence[GeneratedImplementation],
) -> str:
    """Assemble the implementations derived from one source file."""
    if not implementations:
        msg = f"No implementations to render for {relative_path}"
        raise ValueError(msg)

    modules = {impl.module for impl in implementations}
    if len(modules) != 1:
        msg = f"Implementations from several modules cannot share a file: {sorted(modules)}"
        raise ValueError(msg)
    (source_module,) = modules

    runtime_paths = sorted({impl.runtime_path for impl in implementations})
    names = sorted({name for impl in implementations for name in impl.imported_names})

    header = [
        f"{GENERATED_HEADER_PREFIX}{relative_path}. Do not edit.",
        "from __future__ import annotations",
        "",
        "from typing import BinaryIO",
        "",
        *(f"import {path}" for path in runtime_paths),
        "",
        f"from {source_module} import {', '.join(names)}",
    ]
    body = "\n\n".join(impl.source for impl in implementations)
    return "\n".join(header) + "\n\n\n" + body


__all__ = [
    "emit_implementation",
    "key_expression",
    "reader_function_name",
    "render_module",
]
