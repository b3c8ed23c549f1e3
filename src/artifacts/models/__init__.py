"""Model namespace for prcgen artifacts."""

from artifacts.models.manifest import KeyManifest, ManifestField, ManifestRecord

__all__ = ["KeyManifest", "ManifestField", "ManifestRecord"]
