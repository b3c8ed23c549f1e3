"""Data model for record derivation.

A ``RecordDefinition`` is what discovery hands to the derivation pipeline.
Annotation groups stay raw here: keys and verbatim value source text. The
grammar turns them into tagged attributes later.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RecordShape = Literal["named", "unit", "tuple", "enum", "function"]
KeySource = Literal["hash", "name", "ident"]


class SourceSpan(BaseModel):
    """1-based source location of a record, field or annotation."""

    model_config = ConfigDict(frozen=True)

    path: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def location(self) -> str:
        return f"{self.path}:{self.start_line}:{self.start_col}"


class AnnotationEntry(BaseModel):
    """One ``key=value`` inside an annotation group.

    ``key`` is None for positional or ``**`` arguments, which the grammar
    rejects as malformed.
    """

    model_config = ConfigDict(frozen=True)

    key: str | None
    value_source: str
    span: SourceSpan


class AnnotationGroup(BaseModel):
    """A single ``prc(...)`` call attached to a record or a field."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[AnnotationEntry, ...] = ()
    span: SourceSpan


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type_expr: str = Field(description="Normalized field type expression")
    type_names: tuple[str, ...] = Field(
        default=(),
        description="Non-builtin root names the type expression refers to",
    )
    groups: tuple[AnnotationGroup, ...] = ()
    span: SourceSpan


class RecordDefinition(BaseModel):
    """A marked class (or other marked definition) found in a source module."""

    model_config = ConfigDict(frozen=True)

    name: str
    module: str
    shape: RecordShape
    module_level: bool = True
    fields: tuple[FieldDefinition, ...] = ()
    groups: tuple[AnnotationGroup, ...] = ()
    span: SourceSpan


class StructConfig(BaseModel):
    """Resolved struct-level configuration."""

    model_config = ConfigDict(frozen=True)

    path: str
    overridden: bool = False


class HashKey(BaseModel):
    """Lookup key of one field, and the rule that produced it."""

    model_config = ConfigDict(frozen=True)

    source: KeySource
    value: int = Field(ge=0, description="Resolved 40-bit key")
    text: str | None = Field(
        default=None, description="Hashed string for 'name' and 'ident' keys"
    )
    literal: str | None = Field(
        default=None, description="Verbatim integer literal for 'hash' keys"
    )


class FieldKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type_expr: str
    key: HashKey


class GeneratedImplementation(BaseModel):
    """Emitted source for one record plus what its module must import."""

    model_config = ConfigDict(frozen=True)

    record: str
    module: str
    runtime_path: str
    imported_names: tuple[str, ...]
    fields: tuple[FieldKey, ...]
    source: str


__all__ = [
    "AnnotationEntry",
    "AnnotationGroup",
    "FieldDefinition",
    "FieldKey",
    "GeneratedImplementation",
    "HashKey",
    "KeySource",
    "RecordDefinition",
    "RecordShape",
    "SourceSpan",
    "StructConfig",
]
