"""Annotation grammar for prc markers.

The attribute parser imports pydantic, so it is exposed lazily; importing
the runtime marker does not pull it in.
"""

from grammar.markers import PrcMarker, prc

_ATTRIBUTE_NAMES = {
    "HashAttribute",
    "NameAttribute",
    "PathAttribute",
    "parse_field_group",
    "parse_struct_group",
}


def __getattr__(name: str) -> object:
    if name in _ATTRIBUTE_NAMES:
        from grammar import attributes

        return getattr(attributes, name)

    msg = f"module 'grammar' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "HashAttribute",
    "NameAttribute",
    "PathAttribute",
    "PrcMarker",
    "parse_field_group",
    "parse_struct_group",
    "prc",
]
