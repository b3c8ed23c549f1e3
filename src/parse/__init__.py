"""Source parsing for prc-marked records."""

from parse.treesitter_records import (
    extract_records,
    find_marked_definitions,
)

__all__ = [
    "extract_records",
    "find_marked_definitions",
]
