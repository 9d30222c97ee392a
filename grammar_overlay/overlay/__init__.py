"""Overlay engine exports.

This package exposes the engine's public surface so callers can import from
``grammar_overlay.overlay``: ``normalize``, ``resolve``, ``render`` and the
``annotate``/``check_text`` pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .formatters import (
        NO_ISSUES_MARKER,
        AnsiFormatter,
        Formatter,
        MarkdownFormatter,
        build_formatter,
    )
    from .house_rules import DEFAULT_HOUSE_RULES, HouseRule, apply_house_rules
    from .normalizer import normalize
    from .pipeline import annotate, check_text
    from .renderer import RenderResult, StyledRun, render
    from .resolver import merge_overlaps, resolve
    from .text_buffer import CharSpan, InvalidSpanError, StorageSpan, TextBuffer

__all__ = [
    "AnsiFormatter",
    "CharSpan",
    "DEFAULT_HOUSE_RULES",
    "Formatter",
    "HouseRule",
    "InvalidSpanError",
    "MarkdownFormatter",
    "NO_ISSUES_MARKER",
    "RenderResult",
    "StorageSpan",
    "StyledRun",
    "TextBuffer",
    "annotate",
    "apply_house_rules",
    "build_formatter",
    "check_text",
    "merge_overlaps",
    "normalize",
    "render",
    "resolve",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "AnsiFormatter": (".formatters", "AnsiFormatter"),
    "Formatter": (".formatters", "Formatter"),
    "MarkdownFormatter": (".formatters", "MarkdownFormatter"),
    "NO_ISSUES_MARKER": (".formatters", "NO_ISSUES_MARKER"),
    "build_formatter": (".formatters", "build_formatter"),
    "DEFAULT_HOUSE_RULES": (".house_rules", "DEFAULT_HOUSE_RULES"),
    "HouseRule": (".house_rules", "HouseRule"),
    "apply_house_rules": (".house_rules", "apply_house_rules"),
    "normalize": (".normalizer", "normalize"),
    "annotate": (".pipeline", "annotate"),
    "check_text": (".pipeline", "check_text"),
    "RenderResult": (".renderer", "RenderResult"),
    "StyledRun": (".renderer", "StyledRun"),
    "render": (".renderer", "render"),
    "merge_overlaps": (".resolver", "merge_overlaps"),
    "resolve": (".resolver", "resolve"),
    "CharSpan": (".text_buffer", "CharSpan"),
    "InvalidSpanError": (".text_buffer", "InvalidSpanError"),
    "StorageSpan": (".text_buffer", "StorageSpan"),
    "TextBuffer": (".text_buffer", "TextBuffer"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    Submodules are only imported when used, which keeps
    ``grammar_overlay.config`` free to import ``house_rules`` while this
    package is still initialising.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(f"grammar_overlay.overlay{module_name}")
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
