"""End-to-end overlay pipeline.

``annotate`` is the pure entry point: text plus raw provider records in,
rendered output out. It holds no state between calls, so independent texts
can be annotated concurrently. ``check_text`` adds the provider round trip.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from grammar_overlay.provider.retry import retry_with_backoff

from .formatters import Formatter, build_formatter
from .house_rules import HouseRule
from .normalizer import normalize
from .renderer import RenderResult, render
from .resolver import resolve
from .text_buffer import TextBuffer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from grammar_overlay.config import OverlayConfig
    from grammar_overlay.provider import AnalysisProvider

LOGGER = logging.getLogger(__name__)


def annotate(
    text: str,
    raw_issues: Iterable[Any],
    *,
    max_suggestions: int = 3,
    verbose: bool = False,
    rules: Sequence[HouseRule] | None = None,
    ignored_words: set[str] | None = None,
    formatter: Formatter | None = None,
) -> RenderResult:
    """Normalise, resolve and render ``raw_issues`` over ``text``."""
    buffer = TextBuffer(text)
    annotations = normalize(
        raw_issues,
        max_suggestions,
        buffer=buffer,
        ignored_words=ignored_words,
    )
    resolved = resolve(annotations, buffer, rules=rules)
    return render(buffer, resolved, verbose, formatter=formatter)


def check_text(
    text: str,
    provider: "AnalysisProvider",
    config: "OverlayConfig",
    *,
    formatter: Formatter | None = None,
) -> RenderResult:
    """Check ``text`` with ``provider`` and render the result.

    Transient provider failures are retried with exponential backoff;
    anything else propagates to the caller.
    """
    matches = retry_with_backoff(
        provider.check,
        text,
        max_retries=config.max_retries,
        base_delay=config.retry_delay,
    )
    LOGGER.info("Provider returned %d raw issue(s)", len(matches or []))

    if formatter is None:
        formatter = build_formatter(
            config.output_format, strike=config.strike, color=config.color
        )
    return annotate(
        text,
        matches or [],
        max_suggestions=config.max_suggestions,
        verbose=config.verbose,
        rules=config.house_rules,
        ignored_words=config.ignored_words,
        formatter=formatter,
    )
