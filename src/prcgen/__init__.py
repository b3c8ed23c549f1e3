"""Public surface of prcgen.

Annotated source modules only need ``prc``; the derivation API is loaded on
first use so importing the marker stays cheap at runtime.
"""

from grammar.markers import PrcMarker, prc

_LAZY = {
    "derive_record": "derive.derivation",
    "derive_source": "derive.derivation",
    "ModuleDerivation": "derive.derivation",
    "hash40": "derive.hash40",
    "extract_records": "parse.treesitter_records",
    "generate_all": "artifacts.write",
    "derive_tree": "artifacts.write",
    "verify_determinism": "verify.verify",
    "load_config": "settings.config",
    "DerivationError": "contract.errors",
    "Diagnostic": "contract.errors",
}


def __getattr__(name: str) -> object:
    module_name = _LAZY.get(name)
    if module_name is not None:
        from importlib import import_module

        return getattr(import_module(module_name), name)

    msg = f"module 'prcgen' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = ["PrcMarker", "prc", *sorted(_LAZY)]
