"""Path helpers shared by scanning, derivation and writing."""

from __future__ import annotations

from pathlib import PurePosixPath


def _normalized_parts(relative_path: str) -> list[str]:
    return [part for part in relative_path.replace("\\", "/").split("/") if part]


def path_to_module(relative_path: str) -> str:
    """Convert a source path to the module name generated code imports from.

    Sources under ``src/`` are importable without that prefix.

    Examples:
        >>> path_to_module("src/game/params.py")
        'game.params'
        >>> path_to_module("game/__init__.py")
        'game'
        >>> path_to_module("records.py")
        'records'
    """
    parts = _normalized_parts(relative_path)
    if len(parts) >= 2 and parts[0] == "src":
        parts = parts[1:]

    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][:-3]
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]

    if not parts:
        msg = f"{relative_path!r} does not map to a non-empty module name"
        raise ValueError(msg)

    return ".".join(parts)


def generated_relative_path(relative_path: str, suffix: str) -> str:
    """Location of the generated module for a source file, relative to out_dir.

    A package's ``__init__.py`` maps to a module named by the bare suffix
    inside that package.

    Examples:
        >>> generated_relative_path("game/params.py", "_prc")
        'game/params_prc.py'
        >>> generated_relative_path("game/__init__.py", "_prc")
        'game/_prc.py'
    """
    source = PurePosixPath(*_normalized_parts(relative_path))
    stem = "" if source.stem == "__init__" else source.stem
    return source.with_name(f"{stem}{suffix}.py").as_posix()
