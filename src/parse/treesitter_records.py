"""Discovery of ``prc``-marked records in Python source.

Tree-sitter finds the decorated definitions carrying the marker and tells
whether they sit at module level. The stdlib ``ast`` tree of the same source
supplies literal text, spans and normalized field types.
"""

from __future__ import annotations

import ast
import builtins
import codecs
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from contract.constants import MARKER_NAME
from contract.errors import AnnotationSyntaxError
from contract.models import (
    AnnotationEntry,
    AnnotationGroup,
    FieldDefinition,
    RecordDefinition,
    SourceSpan,
)

if TYPE_CHECKING:
    from contract.models import RecordShape

_PARSER: Parser | None = None

_MARKER_BYTES = MARKER_NAME.encode("utf-8")
_BUILTIN_NAMES = frozenset(dir(builtins))
_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum"})
_TUPLE_BASES = frozenset({"NamedTuple", "tuple", "Tuple"})

_DefinitionNode = ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_python_language())
        _PARSER = Parser(lang)

    return _PARSER


# ---------------------------------------------------------------------------
# Tree-sitter: locate marked definitions
# ---------------------------------------------------------------------------


def _decorator_expression(decorator: Node) -> Node | None:
    for child in decorator.named_children:
        if child.type != "comment":
            return child
    return None


def _is_marker_node(node: Node | None) -> bool:
    if node is not None and node.type == "call":
        node = node.child_by_field_name("function")
    if node is None:
        return False
    if node.type == "identifier":
        return node.text == _MARKER_BYTES
    if node.type == "attribute":
        attribute = node.child_by_field_name("attribute")
        return attribute is not None and attribute.text == _MARKER_BYTES
    return False


def _collect_marked(node: Node, found: list[tuple[Node, bool]]) -> None:
    if node.type == "decorated_definition":
        decorators = [child for child in node.children if child.type == "decorator"]
        definition = node.child_by_field_name("definition")
        if definition is not None and any(
            _is_marker_node(_decorator_expression(decorator))
            for decorator in decorators
        ):
            parent = node.parent
            found.append((definition, parent is not None and parent.type == "module"))

    for child in node.children:
        _collect_marked(child, found)


def find_marked_definitions(source_bytes: bytes) -> list[tuple[int, int, bool]]:
    """Return ``(line, byte_col, module_level)`` of every marked definition.

    Lines are 1-based and columns 0-based, matching ``ast`` positions of the
    ``class``/``def`` keyword.
    """
    if _MARKER_BYTES not in source_bytes:
        return []

    tree = _get_parser().parse(source_bytes)
    found: list[tuple[Node, bool]] = []
    _collect_marked(tree.root_node, found)
    return [
        (node.start_point[0] + 1, node.start_point[1], module_level)
        for node, module_level in found
    ]


# ---------------------------------------------------------------------------
# ast: build RecordDefinitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _SourceText:
    """Text that ast positions refer to.

    ``anchor`` is set while reading a string annotation: positions inside the
    string are not file positions, so spans fall back to the string literal.
    """

    path: str
    text: str
    anchor: ast.AST | None = None

    def span(self, node: ast.AST) -> SourceSpan:
        target = self.anchor or node
        line = target.lineno
        col = target.col_offset
        return SourceSpan(
            path=self.path,
            start_line=line,
            start_col=col + 1,
            end_line=target.end_lineno or line,
            end_col=(target.end_col_offset or col) + 1,
        )

    def segment(self, node: ast.AST) -> str:
        return ast.get_source_segment(self.text, node) or ast.unparse(node)


def _tail_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Subscript):
        return _tail_name(node.value)
    return None


def _is_marker(node: ast.expr) -> bool:
    target = node.func if isinstance(node, ast.Call) else node
    return _tail_name(target) == MARKER_NAME and not isinstance(target, ast.Subscript)


def _group(call: ast.Call, src: _SourceText) -> AnnotationGroup:
    entries = [
        AnnotationEntry(key=None, value_source=src.segment(arg), span=src.span(arg))
        for arg in call.args
    ]
    entries.extend(
        AnnotationEntry(
            key=keyword.arg,
            value_source=src.segment(keyword.value),
            span=src.span(keyword),
        )
        for keyword in call.keywords
    )
    return AnnotationGroup(entries=tuple(entries), span=src.span(call))


def _unwrap_string(node: ast.expr, src: _SourceText) -> tuple[ast.expr, _SourceText]:
    if not (isinstance(node, ast.Constant) and isinstance(node.value, str)):
        return node, src
    try:
        inner = ast.parse(node.value.strip(), mode="eval").body
    except SyntaxError as exc:
        msg = f"field annotation {node.value!r} is not a valid expression"
        raise AnnotationSyntaxError(msg, src.span(node)) from exc
    return inner, _SourceText(src.path, node.value.strip(), anchor=src.anchor or node)


def _is_classvar(node: ast.expr) -> bool:
    return _tail_name(node) == "ClassVar"


def _split_annotated(
    node: ast.expr, src: _SourceText
) -> tuple[ast.expr, tuple[AnnotationGroup, ...]]:
    if not (isinstance(node, ast.Subscript) and _tail_name(node.value) == "Annotated"):
        return node, ()
    if not isinstance(node.slice, ast.Tuple) or not node.slice.elts:
        return node.slice, ()

    type_node, *metadata = node.slice.elts
    groups = tuple(
        _group(item, src)
        for item in metadata
        if isinstance(item, ast.Call) and _is_marker(item)
    )
    return type_node, groups


def _reject_nested_markers(type_node: ast.expr, src: _SourceText) -> None:
    for child in ast.walk(type_node):
        if isinstance(child, ast.Call) and _is_marker(child):
            msg = (
                f"`{src.segment(child)}` must be top-level `Annotated` metadata "
                "of the field annotation"
            )
            raise AnnotationSyntaxError(msg, src.span(child))


def _type_names(node: ast.expr) -> tuple[str, ...]:
    names = {
        child.id
        for child in ast.walk(node)
        if isinstance(child, ast.Name) and child.id not in _BUILTIN_NAMES
    }
    return tuple(sorted(names))


def _field(stmt: ast.AnnAssign, src: _SourceText) -> FieldDefinition | None:
    if not stmt.simple or not isinstance(stmt.target, ast.Name):
        return None

    annotation, annotation_src = _unwrap_string(stmt.annotation, src)
    if _is_classvar(annotation):
        return None

    type_node, groups = _split_annotated(annotation, annotation_src)
    _reject_nested_markers(type_node, annotation_src)
    return FieldDefinition(
        name=stmt.target.id,
        type_expr=ast.unparse(type_node),
        type_names=_type_names(type_node),
        groups=groups,
        span=src.span(stmt),
    )


def _shape(node: _DefinitionNode, fields: list[FieldDefinition]) -> RecordShape:
    if not isinstance(node, ast.ClassDef):
        return "function"
    bases = {_tail_name(base) for base in node.bases}
    if bases & _ENUM_BASES:
        return "enum"
    if bases & _TUPLE_BASES:
        return "tuple"
    return "named" if fields else "unit"


def _build_record(
    node: _DefinitionNode,
    src: _SourceText,
    *,
    module: str,
    module_level: bool,
) -> RecordDefinition:
    fields: list[FieldDefinition] = []
    if isinstance(node, ast.ClassDef):
        for stmt in node.body:
            if isinstance(stmt, ast.AnnAssign):
                field = _field(stmt, src)
                if field is not None:
                    fields.append(field)

    groups = tuple(
        _group(decorator, src)
        for decorator in node.decorator_list
        if isinstance(decorator, ast.Call) and _is_marker(decorator)
    )
    return RecordDefinition(
        name=node.name,
        module=module,
        shape=_shape(node, fields),
        module_level=module_level,
        fields=tuple(fields),
        groups=groups,
        span=src.span(node),
    )


def _parse_module(text: str, relative_path: str) -> ast.Module:
    try:
        return ast.parse(text, relative_path)
    except SyntaxError as exc:
        line = exc.lineno or 1
        col = exc.offset or 1
        span = SourceSpan(
            path=relative_path,
            start_line=line,
            start_col=col,
            end_line=exc.end_lineno or line,
            end_col=exc.end_offset or col,
        )
        raise AnnotationSyntaxError(f"cannot parse module: {exc.msg}", span) from exc


def extract_records(
    source: str | bytes,
    *,
    relative_path: str,
    module: str,
) -> list[RecordDefinition]:
    """Extract every marked record of one module, in source order.

    Args:
        source: Module source text
        relative_path: Path relative to the scanned root (for spans)
        module: Importable module name of the source (e.g., "pkg.params")

    Raises:
        AnnotationSyntaxError: the module has marked records but cannot be
            parsed.
    """
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    # Python accepts a UTF-8 signature on line 1; neither parser does.
    source_bytes = source_bytes.removeprefix(codecs.BOM_UTF8)
    marked = find_marked_definitions(source_bytes)
    if not marked:
        return []

    try:
        text = source_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        span = SourceSpan(
            path=relative_path, start_line=1, start_col=1, end_line=1, end_col=1
        )
        raise AnnotationSyntaxError(f"source is not valid UTF-8: {exc}", span) from exc

    tree = _parse_module(text, relative_path)
    definitions: dict[tuple[int, int], _DefinitionNode] = {
        (node.lineno, node.col_offset): node
        for node in ast.walk(tree)
        if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef))
    }

    src = _SourceText(relative_path, text)
    records: list[RecordDefinition] = []
    for line, col, module_level in marked:
        node = definitions.get((line, col))
        if node is None:
            continue
        records.append(_build_record(node, src, module=module, module_level=module_level))
    return records


__all__ = [
    "extract_records",
    "find_marked_definitions",
]
