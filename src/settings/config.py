from __future__ import annotations

import re
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contract.constants import DEFAULT_MODULE_SUFFIX

CONFIG_FILENAME = "prcgen.toml"

_SUFFIX_RE = re.compile(r"^[A-Za-z0-9_]+$")


class PrcGenConfig(BaseModel):
    """Configuration for prcgen code generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".",
        description="Directory generated modules are written under (mirrors sources)",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    module_suffix: str = Field(
        default=DEFAULT_MODULE_SUFFIX,
        description="Suffix appended to a source module's stem for its generated module",
    )
    manifest: bool = Field(
        default=True,
        description="Write the resolved key manifest next to generated modules",
    )

    @field_validator("module_suffix")
    @classmethod
    def validate_module_suffix(cls, v: str) -> str:
        """Generated module names must stay valid identifiers."""
        if not _SUFFIX_RE.match(v):
            msg = f"module_suffix must be non-empty identifier characters, got {v!r}"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when prcgen.toml exists but is not a valid configuration."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve output_dir against root, refusing anything outside it.

    ``"."`` (the default) writes generated modules next to their sources.
    """
    candidate = Path(output_dir)
    if not output_dir or output_dir.startswith("~") or candidate.is_absolute():
        msg = f"output_dir must be a relative path within the root, got {output_dir!r}"
        raise ConfigError(msg)

    try:
        base = root.resolve()
        resolved = (base / candidate).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    if not resolved.is_relative_to(base):
        msg = f"output_dir '{output_dir}' escapes the root {base}"
        raise ConfigError(msg)
    return resolved


def _read_toml(config_path: Path) -> dict:
    try:
        return tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_path}: {exc}"
        raise ConfigError(msg) from exc


def load_config(root: Path) -> PrcGenConfig:
    """Load prcgen.toml from root; a missing file means all defaults."""
    config_path = root / CONFIG_FILENAME
    if not config_path.is_file():
        return PrcGenConfig()

    try:
        return PrcGenConfig.model_validate(_read_toml(config_path))
    except ValidationError as exc:
        msg = f"Invalid config in {config_path}: {exc}"
        raise ConfigError(msg) from exc
