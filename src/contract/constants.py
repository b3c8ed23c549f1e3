"""Stable names shared by the generator, the emitted code and the tooling."""

from __future__ import annotations

import re

# Marker recognized on records (decorator) and on fields (Annotated metadata).
MARKER_NAME = "prc"

# Runtime module referenced by emitted code when a record has no `path` override.
DEFAULT_RUNTIME_PATH = "prc"

# Generated module naming and layout.
DEFAULT_MODULE_SUFFIX = "_prc"
MANIFEST_JSON = "prc_manifest.json"
MANIFEST_SCHEMA_VERSION = 1
GENERATED_HEADER_PREFIX = "# Generated by prcgen from "

HASH40_BITS = 40
HASH40_LIMIT = 1 << HASH40_BITS

DOTTED_PATH_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

NAMED_RECORD_ONLY_ERR = "Derivation is only implemented for classes with named fields"
MODULE_LEVEL_ONLY_ERR = "Derivation is only implemented for module-level classes"
INVALID_STRUCT_ATTR_NAME = "Invalid struct attribute. Accepted name is only 'path'"
DUPLICATE_STRUCT_ATTR = (
    "Invalid struct attributes. Only use 'path' attribute in struct once"
)
INVALID_FIELD_ATTR_NAME = (
    "Invalid field attribute. Accepted attribute names are 'name', and 'hash'"
)
DUPLICATE_FIELD_ATTR = (
    "Invalid field attributes. Only use 'name' or 'hash' attribute in field once"
)
