"""Key manifest writer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from artifacts.models.manifest import KeyManifest, ManifestField, ManifestRecord
from artifacts.utils import _write_json
from contract.constants import DEFAULT_MODULE_SUFFIX, MANIFEST_JSON
from derive.hash40 import format_hash40
from utils import generated_relative_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from contract.models import GeneratedImplementation
    from derive.derivation import ModuleDerivation

logger = logging.getLogger(__name__)


def _manifest_record(
    impl: GeneratedImplementation, relative_path: str, suffix: str
) -> ManifestRecord:
    return ManifestRecord(
        path=relative_path,
        module=impl.module,
        record=impl.record,
        generated=generated_relative_path(relative_path, suffix),
        runtime_path=impl.runtime_path,
        fields=[
            ManifestField(
                name=field.name,
                type=field.type_expr,
                source=field.key.source,
                key=field.key.value,
                key_hex=format_hash40(field.key.value),
                text=field.key.text,
                literal=field.key.literal,
            )
            for field in impl.fields
        ],
    )


def build_manifest(
    derivations: Sequence[ModuleDerivation], *, module_suffix: str
) -> KeyManifest:
    """Collect the records whose generated modules get written."""
    records = [
        _manifest_record(impl, derivation.relative_path, module_suffix)
        for derivation in derivations
        if derivation.ok
        for impl in derivation.implementations
    ]
    return KeyManifest(records=records)


class ManifestGenerator:
    """Writes prc_manifest.json from derived modules."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "manifest"

    def generate(
        self,
        derivations: Sequence[ModuleDerivation],
        out_dir: Path,
        **kwargs: Any,
    ) -> Path:
        suffix: str = kwargs.get("module_suffix", DEFAULT_MODULE_SUFFIX)

        manifest = build_manifest(derivations, module_suffix=suffix)
        target = out_dir / MANIFEST_JSON
        _write_json(target, manifest)
        logger.info("Wrote %s (%d record(s))", target, len(manifest.records))
        return target
