"""Stable surface shared by discovery, derivation and the build tooling.

The models import pydantic, so they are exposed lazily to keep the
constants importable on their own.
"""

from contract.constants import (
    DEFAULT_MODULE_SUFFIX,
    DEFAULT_RUNTIME_PATH,
    MANIFEST_JSON,
    MARKER_NAME,
)
from contract.errors import (
    AnnotationSyntaxError,
    DerivationError,
    Diagnostic,
    DuplicateFieldAttribute,
    DuplicateStructAttribute,
    InvalidFieldAttributeName,
    InvalidStructAttributeName,
    UnsupportedShape,
)

_MODEL_NAMES = {
    "AnnotationEntry",
    "AnnotationGroup",
    "FieldDefinition",
    "FieldKey",
    "GeneratedImplementation",
    "HashKey",
    "RecordDefinition",
    "SourceSpan",
    "StructConfig",
}


def __getattr__(name: str) -> object:
    if name in _MODEL_NAMES:
        from contract import models

        return getattr(models, name)

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "DEFAULT_MODULE_SUFFIX",
    "DEFAULT_RUNTIME_PATH",
    "MANIFEST_JSON",
    "MARKER_NAME",
    "AnnotationEntry",
    "AnnotationGroup",
    "AnnotationSyntaxError",
    "DerivationError",
    "Diagnostic",
    "DuplicateFieldAttribute",
    "DuplicateStructAttribute",
    "FieldDefinition",
    "FieldKey",
    "GeneratedImplementation",
    "HashKey",
    "InvalidFieldAttributeName",
    "InvalidStructAttributeName",
    "RecordDefinition",
    "SourceSpan",
    "StructConfig",
    "UnsupportedShape",
]
