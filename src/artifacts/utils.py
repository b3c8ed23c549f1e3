"""Utility functions for writing generated artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel

if TYPE_CHECKING:
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    return obj


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(payload, option=opts))


def _write_text(path: Path, text: str) -> None:
    """Write text with LF newlines regardless of platform."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))


def _get_output_dir_name(out_dir: Path, root: Path) -> str:
    """Get the top-level output directory name to skip while scanning."""
    try:
        if out_dir.is_relative_to(root):
            rel = out_dir.relative_to(root)
            if rel.parts:
                return rel.parts[0]
            return ""
    except ValueError:
        # Non-comparable paths mean out_dir is external; avoid filtering.
        return ""
    return ""
