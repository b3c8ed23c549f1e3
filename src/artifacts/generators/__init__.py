"""Artifact generators for prcgen."""

from artifacts.generators.generated_modules import GeneratedModulesGenerator
from artifacts.generators.manifest import ManifestGenerator, build_manifest

__all__ = [
    "GeneratedModulesGenerator",
    "ManifestGenerator",
    "build_manifest",
]
