"""Generated module writer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.utils import _write_text
from contract.constants import DEFAULT_MODULE_SUFFIX
from scan.files import is_generated_module
from utils import generated_relative_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from derive.derivation import ModuleDerivation

logger = logging.getLogger(__name__)


def _remove_stale_modules(out_dir: Path, suffix: str, keep: set[Path]) -> list[Path]:
    """Delete generated modules under out_dir that this run does not produce.

    Only files carrying the generated header are touched.
    """
    removed: list[Path] = []
    for path in sorted(out_dir.rglob(f"*{suffix}.py")):
        if path in keep or path.is_symlink() or not path.is_file():
            continue
        if not is_generated_module(path):
            continue
        path.unlink()
        logger.info("Removed stale %s", path)
        removed.append(path)
    return removed


class GeneratedModulesGenerator:
    """Writes one generated module per cleanly derived source file."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "modules"

    def generate(
        self,
        derivations: Sequence[ModuleDerivation],
        out_dir: Path,
        **kwargs: Any,
    ) -> list[Path]:
        """Render and write generated modules, returning the written paths.

        A source file whose records no longer all derive, or that is no
        longer scanned, loses its previously generated module.
        """
        suffix: str = kwargs.get("module_suffix", DEFAULT_MODULE_SUFFIX)

        rendered: dict[Path, tuple[ModuleDerivation, str]] = {}
        for derivation in derivations:
            text = derivation.render()
            if text is None:
                if derivation.diagnostics:
                    logger.warning(
                        "Not generating %s: %d record(s) failed to derive",
                        derivation.relative_path,
                        len(derivation.diagnostics),
                    )
                continue
            target = out_dir / generated_relative_path(derivation.relative_path, suffix)
            rendered[target] = (derivation, text)

        _remove_stale_modules(out_dir, suffix, set(rendered))

        written: list[Path] = []
        for target, (derivation, text) in rendered.items():
            _write_text(target, text)
            logger.info(
                "Generated %s (%d record(s))",
                target,
                len(derivation.implementations),
            )
            written.append(target)

        return written
