"""Runtime side of the ``prc`` marker.

Source modules import ``prc`` so that annotated records still run. The
marker records nothing and validates nothing; prcgen reads the annotations
from source.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class PrcMarker:
    """Result of ``prc(key=value, ...)``: a decorator and ``Annotated`` metadata."""

    __slots__ = ("options",)

    def __init__(self, options: dict[str, Any]) -> None:
        self.options = dict(options)

    def __call__(self, target: T) -> T:
        return target

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrcMarker):
            return NotImplemented
        return self.options == other.options

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.options.items(), key=lambda item: item[0])))

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.options.items())
        return f"prc({args})"


def prc(target: Any = None, /, **options: Any) -> Any:
    """Mark a record class (``@prc``) or build an annotation group (``prc(...)``)."""
    if target is not None:
        if options:
            msg = "prc() takes either a class or keyword options, not both"
            raise TypeError(msg)
        return target
    return PrcMarker(options)


__all__ = ["PrcMarker", "prc"]
