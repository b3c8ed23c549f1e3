"""Derivation error taxonomy and the diagnostics they turn into."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Literal

if TYPE_CHECKING:
    from contract.models import SourceSpan

DiagnosticKind = Literal[
    "unsupported-shape",
    "invalid-struct-attribute",
    "duplicate-struct-attribute",
    "invalid-field-attribute",
    "duplicate-field-attribute",
    "syntax-error",
]


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    path: str
    line: int
    col: int
    message: str
    record: str | None = None

    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.col}"

    def render(self) -> str:
        return f"{self.location()}: error[{self.kind}]: {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "path": self.path,
            "line": self.line,
            "col": self.col,
            "record": self.record,
            "message": self.message,
        }


class DerivationError(Exception):
    """Base class for every condition that aborts a record's derivation."""

    kind: ClassVar[DiagnosticKind]

    def __init__(self, message: str, span: SourceSpan) -> None:
        super().__init__(f"{span.location()}: {message}")
        self.message = message
        self.span = span

    def to_diagnostic(self, record: str | None = None) -> Diagnostic:
        return Diagnostic(
            kind=self.kind,
            path=self.span.path,
            line=self.span.start_line,
            col=self.span.start_col,
            message=self.message,
            record=record,
        )


class UnsupportedShape(DerivationError):
    """The marked definition is not a module-level class with named fields."""

    kind = "unsupported-shape"


class InvalidStructAttributeName(DerivationError):
    kind = "invalid-struct-attribute"


class DuplicateStructAttribute(DerivationError):
    kind = "duplicate-struct-attribute"


class InvalidFieldAttributeName(DerivationError):
    kind = "invalid-field-attribute"


class DuplicateFieldAttribute(DerivationError):
    kind = "duplicate-field-attribute"


class AnnotationSyntaxError(DerivationError):
    """Malformed key or literal inside an annotation group, or unparsable source."""

    kind = "syntax-error"


__all__ = [
    "AnnotationSyntaxError",
    "DerivationError",
    "Diagnostic",
    "DiagnosticKind",
    "DuplicateFieldAttribute",
    "DuplicateStructAttribute",
    "InvalidFieldAttributeName",
    "InvalidStructAttributeName",
    "UnsupportedShape",
]
