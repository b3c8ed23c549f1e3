"""Source file discovery for prcgen.

A scanned tree yields every ``*.py`` file that may declare records: regular
files inside the root, outside the output directory, not ignored by git,
matching the configured globs and not themselves generated by prcgen.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from contract.constants import GENERATED_HEADER_PREFIX

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path

_HEADER_BYTES = GENERATED_HEADER_PREFIX.encode("utf-8")


def is_generated_module(path: Path) -> bool:
    """Return True when the file starts with the prcgen generated header."""
    try:
        with path.open("rb") as handle:
            return handle.read(len(_HEADER_BYTES)) == _HEADER_BYTES
    except OSError:
        return False


def _resolves_inside(path: Path, root: Path) -> bool:
    try:
        return path.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def _gitignore_sources(root: Path, *, nested: bool) -> list[Path]:
    """Gitignore files that apply under root, root first then by path."""
    candidates = {root / ".gitignore"}
    if nested:
        candidates.update(root.rglob(".gitignore"))
    existing = [path for path in candidates if path.is_file()]
    return sorted(existing, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    sources = _gitignore_sources(root, nested=nested_gitignore)
    if not sources:
        return None
    if len(sources) == 1:
        return cast("Callable[[str], bool]", parse_gitignore(sources[0]))

    matchers = [parse_gitignore(path) for path in sources]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Path outside this .gitignore's base directory.
                continue
        return False

    return matches


@dataclass(frozen=True)
class _ScanFilter:
    root: Path
    output_dir: str
    ignored: Callable[[str], bool] | None
    include: Sequence[str]
    exclude: Sequence[str]

    def accepts(self, path: Path) -> bool:
        if path.is_symlink() or not path.is_file():
            return False
        if not _resolves_inside(path, self.root):
            return False

        rel_path = path.relative_to(self.root)
        if self.output_dir and rel_path.parts[0] == self.output_dir:
            return False
        if self.ignored is not None and self.ignored(str(path)):
            return False

        rel_posix = rel_path.as_posix()
        if self.include and not any(fnmatch(rel_posix, pat) for pat in self.include):
            return False
        if any(fnmatch(rel_posix, pat) for pat in self.exclude):
            return False

        return not is_generated_module(path)


def find_python_files(
    directory: Path,
    *,
    output_dir: str = "",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find Python source files to scan for records.

    Args:
        directory: Root of the scanned tree
        output_dir: Top-level directory name to skip ("" skips nothing)
        include_patterns: fnmatch patterns; when given, a file must match one
        exclude_patterns: fnmatch patterns; a matching file is skipped
        nested_gitignore: Compose every .gitignore under the directory
            instead of only the root one

    Yields:
        Paths sorted by their posix path relative to directory.
    """
    scan_filter = _ScanFilter(
        root=directory,
        output_dir=output_dir,
        ignored=_build_gitignore_matcher(directory, nested_gitignore=nested_gitignore),
        include=include_patterns or (),
        exclude=exclude_patterns or (),
    )

    yield from sorted(
        (path for path in directory.rglob("*.py") if scan_filter.accepts(path)),
        key=lambda p: p.relative_to(directory).as_posix(),
    )


__all__ = ["find_python_files", "is_generated_module"]
