from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from artifacts.generators import GeneratedModulesGenerator, ManifestGenerator
from artifacts.utils import _get_output_dir_name
from derive.derivation import ModuleDerivation, derive_source
from scan.files import find_python_files
from settings.config import load_config, resolve_output_dir
from utils import path_to_module

if TYPE_CHECKING:
    from pathlib import Path

    from contract.errors import Diagnostic
    from settings.config import PrcGenConfig

logger = logging.getLogger(__name__)


@dataclass
class TreeDerivation:
    modules: list[ModuleDerivation] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [diag for module in self.modules for diag in module.diagnostics]

    @property
    def record_count(self) -> int:
        return sum(len(module.implementations) for module in self.modules)


@dataclass
class GenerationReport:
    modules: list[Path] = field(default_factory=list)
    manifest: Path | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    record_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def derive_tree(
    root: Path,
    config: PrcGenConfig | None = None,
    *,
    out_dir: Path | None = None,
) -> TreeDerivation:
    """Derive every marked record under root without writing anything.

    Files are visited in sorted relative-path order and records in source
    order, so the result is deterministic for a given tree.
    """
    if config is None:
        config = load_config(root)

    out_dir_name = _get_output_dir_name(out_dir, root) if out_dir is not None else ""

    tree = TreeDerivation()
    for file_path in find_python_files(
        root,
        output_dir=out_dir_name,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        relative_path = file_path.relative_to(root).as_posix()
        try:
            module = path_to_module(relative_path)
        except ValueError:
            logger.debug("Skipping %s: no importable module name", relative_path)
            continue

        try:
            source = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Skipping %s: %s", relative_path, exc)
            continue

        derivation = derive_source(source, relative_path=relative_path, module=module)
        if derivation.implementations or derivation.diagnostics:
            tree.modules.append(derivation)

    return tree


def generate_all(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: PrcGenConfig | None = None,
) -> GenerationReport:
    """Derive every record under root and write the generated modules.

    Args:
        root: Root directory to scan for marked records
        out_dir: Optional output directory (default: config output_dir)
        config: Optional configuration (default: loaded from root)

    Returns:
        GenerationReport with written paths and all diagnostics.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    tree = derive_tree(root, config, out_dir=out_dir)

    out_dir.mkdir(parents=True, exist_ok=True)
    report = GenerationReport(
        diagnostics=tree.diagnostics,
        record_count=tree.record_count,
    )
    report.modules = GeneratedModulesGenerator().generate(
        tree.modules, out_dir, module_suffix=config.module_suffix
    )
    if config.manifest:
        report.manifest = ManifestGenerator().generate(
            tree.modules, out_dir, module_suffix=config.module_suffix
        )

    return report
