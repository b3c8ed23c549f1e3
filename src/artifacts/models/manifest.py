"""Key manifest models.

The manifest lists, for every record with a generated implementation, the
key each field is read with. It is the quickest way to compare keys against
a dump of the binary container.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.constants import MANIFEST_SCHEMA_VERSION
from contract.models import KeySource


class ManifestField(BaseModel):
    name: str
    type: str
    source: KeySource
    key: int
    key_hex: str
    text: str | None = None
    literal: str | None = None


class ManifestRecord(BaseModel):
    path: str
    module: str
    record: str
    generated: str = Field(description="Generated module path relative to out_dir")
    runtime_path: str
    fields: list[ManifestField]


class KeyManifest(BaseModel):
    schema_version: int = Field(default=MANIFEST_SCHEMA_VERSION)
    records: list[ManifestRecord] = Field(default_factory=list)


__all__ = ["KeyManifest", "ManifestField", "ManifestRecord"]
