"""Determinism verification for generated modules."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.write import generate_all
from contract.constants import MANIFEST_JSON
from scan.files import is_generated_module
from settings.config import load_config

if TYPE_CHECKING:
    from settings.config import PrcGenConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _list_relative_files(root: Path) -> set[str]:
    return {
        path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()
    }


def _list_existing_outputs(out_dir: Path, module_suffix: str) -> set[str]:
    existing = {
        path.relative_to(out_dir).as_posix()
        for path in out_dir.rglob(f"*{module_suffix}.py")
        if path.is_file() and is_generated_module(path)
    }
    if (out_dir / MANIFEST_JSON).is_file():
        existing.add(MANIFEST_JSON)
    return existing


def verify_determinism(
    *,
    root: Path,
    out_dir: Path,
    config: PrcGenConfig | None = None,
) -> DeterminismResult:
    """Verify that the generated modules under out_dir are up to date.

    Regenerates into a temporary directory and compares byte-for-byte with
    out_dir. Paths are reported relative to out_dir.

    Args:
        root: Root directory to scan for records.
        out_dir: Directory holding the committed generated modules.
        config: Optional configuration (default: loaded from root).

    Returns:
        DeterminismResult where ``missing`` lists outputs regeneration
        produces but out_dir lacks, ``extra`` lists generated files in
        out_dir that regeneration no longer produces, and ``mismatches``
        lists files whose bytes differ.

    Raises:
        FileNotFoundError: If out_dir does not exist.
        NotADirectoryError: If out_dir is not a directory.
    """
    if not out_dir.exists():
        msg = f"Output directory does not exist: {out_dir}"
        raise FileNotFoundError(msg)
    if not out_dir.is_dir():
        msg = f"Output path is not a directory: {out_dir}"
        raise NotADirectoryError(msg)

    if config is None:
        config = load_config(root)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        generate_all(root=root, out_dir=temp_path, config=config)

        regenerated_files = _list_relative_files(temp_path)
        existing_files = _list_existing_outputs(out_dir, config.module_suffix)

        missing = sorted(regenerated_files - existing_files)
        extra = sorted(existing_files - regenerated_files)

        mismatches = sorted(
            path
            for path in regenerated_files & existing_files
            if not filecmp.cmp(out_dir / path, temp_path / path, shallow=False)
        )

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
