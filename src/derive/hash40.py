"""Reference 40-bit key hash.

The low 32 bits are the CRC-32 of the UTF-8 bytes, the high 8 bits the byte
length. Emitted code calls the runtime's own ``hash40`` at decode time; this
copy lets the generator report resolved keys.
"""

from __future__ import annotations

import zlib

from contract.constants import HASH40_BITS


def hash40(text: str) -> int:
    """Compute the 40-bit key of a string.

    Examples:
        >>> hash40("") == 0
        True
        >>> hash40("magic") >> 32
        5
    """
    data = text.encode("utf-8")
    return ((len(data) & 0xFF) << 32) | zlib.crc32(data)


def format_hash40(value: int) -> str:
    """Render a key the way the manifest stores it."""
    width = HASH40_BITS // 4
    return f"0x{value:0{width}x}"


__all__ = ["format_hash40", "hash40"]
