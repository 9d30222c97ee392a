"""Turn raw provider records into annotations.

Partial or odd responses from LanguageTool are expected, so a record that
cannot be used is dropped and logged rather than raised.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from grammar_overlay.models import Annotation, RawIssue

from .text_buffer import TextBuffer

LOGGER = logging.getLogger(__name__)


def _is_ignored(flagged: str, words_to_ignore: set[str]) -> bool:
    """Return True when ``flagged`` is on the ignore list.

    Matching is case-sensitive. Acronym forms (all capitals, optionally with
    a plural ``s``) are compared on their letters so ``NICs`` matches ``NIC``.
    """
    original_text = flagged.strip()
    if not original_text:
        return False
    letters = "".join(ch for ch in original_text if ch.isalpha())
    if letters and (letters.isupper() or letters.rstrip("s").isupper()):
        return letters in words_to_ignore or letters.rstrip("s") in words_to_ignore
    return original_text in words_to_ignore


def normalize_issue(
    record: Any,
    max_suggestions: int,
    *,
    buffer: TextBuffer | None = None,
    ignored_words: set[str] | None = None,
) -> Annotation | None:
    """Normalise a single record; return None when it is not actionable."""
    if max_suggestions < 1:
        raise ValueError(f"max_suggestions must be >= 1, got {max_suggestions}")

    try:
        raw = RawIssue.from_record(record)
    except ValidationError as exc:
        LOGGER.debug(
            "Dropping malformed issue record (%d error(s)): %r",
            exc.error_count(),
            record,
        )
        return None

    candidates = raw.candidates[:max_suggestions]
    if not candidates:
        LOGGER.debug(
            "Dropping issue at offset %d without replacements (rule=%s)",
            raw.offset,
            raw.rule_id,
        )
        return None

    start = raw.offset
    end = raw.offset + raw.length

    if buffer is not None:
        if end > len(buffer):
            LOGGER.warning(
                "Dropping issue [%d, %d) beyond end of text (length %d, rule=%s)",
                start,
                end,
                len(buffer),
                raw.rule_id,
            )
            return None
        if ignored_words and _is_ignored(
            buffer.slice(buffer.span(start, end)), ignored_words
        ):
            return None

    return Annotation(
        start=start,
        end=end,
        suggestions=candidates,
        explanation=raw.message,
        rule_id=raw.rule_id,
    )


def normalize(
    raw_issues: Iterable[Any],
    max_suggestions: int,
    *,
    buffer: TextBuffer | None = None,
    ignored_words: set[str] | None = None,
) -> list[Annotation]:
    """Normalise provider records into annotations, preserving their order.

    Args:
            raw_issues: JSON matches, ``language_tool_python`` matches or RawIssue
            max_suggestions: Cap on suggestions kept per annotation (>= 1)
            buffer: Checked text; enables range and ignore-list filtering
            ignored_words: Flagged words that should never be reported

    Returns:
            One annotation per usable record
    """
    if max_suggestions < 1:
        raise ValueError(f"max_suggestions must be >= 1, got {max_suggestions}")

    annotations: list[Annotation] = []
    dropped = 0
    for record in raw_issues:
        annotation = normalize_issue(
            record,
            max_suggestions,
            buffer=buffer,
            ignored_words=ignored_words,
        )
        if annotation is None:
            dropped += 1
            continue
        annotations.append(annotation)

    if dropped:
        LOGGER.info(
            "Normalised %d issue(s); dropped %d unusable record(s)",
            len(annotations),
            dropped,
        )
    return annotations
