"""grammar-overlay: colourised LanguageTool corrections for the terminal.

Callers normally need ``normalize``, ``resolve`` and ``render`` (or the
``annotate`` shortcut that chains them); they are importable from here.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["annotate", "normalize", "render", "resolve", "__version__"]

_LAZY_EXPORTS = {
    "annotate": ("grammar_overlay.overlay.pipeline", "annotate"),
    "normalize": ("grammar_overlay.overlay.normalizer", "normalize"),
    "render": ("grammar_overlay.overlay.renderer", "render"),
    "resolve": ("grammar_overlay.overlay.resolver", "resolve"),
}


def __getattr__(name: str):
    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        value = getattr(import_module(module_name), attr)
        globals()[name] = value
        return value
    raise AttributeError(name)
