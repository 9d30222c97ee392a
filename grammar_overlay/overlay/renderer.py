"""Render annotations over the checked text.

Each rendering pass works on its own :class:`StyledRun`, a copy of the
encoded text that is never mutated: every splice returns a new run.

Splices are applied right to left (highest ``start`` first). Character spans
are translated to storage spans against the *original* buffer, which is only
valid while every splice made so far lies to the right of the span being
translated. Descending order guarantees exactly that, so annotations that
have not been visited yet keep their original coordinates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from grammar_overlay.models import Annotation, StyleRole

from .formatters import AnsiFormatter, Formatter
from .text_buffer import StorageSpan, TextBuffer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyledRun:
    """Encoded working copy of the text for one rendering pass."""

    data: bytes
    encoding: str = "utf-8"

    @classmethod
    def from_buffer(cls, buffer: TextBuffer) -> "StyledRun":
        return cls(buffer.storage, buffer.encoding)

    def splice(self, span: StorageSpan, replacement: str) -> "StyledRun":
        """Return a new run with ``span`` replaced by ``replacement``."""
        if span.end > len(self.data):
            raise ValueError(
                f"storage span [{span.start}, {span.end}) exceeds run length {len(self.data)}"
            )
        encoded = replacement.encode(self.encoding)
        return StyledRun(
            self.data[: span.start] + encoded + self.data[span.end :],
            self.encoding,
        )

    @property
    def text(self) -> str:
        return self.data.decode(self.encoding)


@dataclass
class RenderResult:
    """Output of one rendering call."""

    marked: str
    corrected: str
    explanations: list[str] = field(default_factory=list)
    clean: bool = False

    def lines(self) -> list[str]:
        """Lines to print: explanations, then ``marked -> corrected``."""
        if self.clean:
            return [self.marked]
        return [*self.explanations, f"{self.marked} -> {self.corrected}"]


def _explanation_line(
    buffer: TextBuffer, annotation: Annotation, formatter: Formatter
) -> str:
    original = buffer.slice(buffer.span(annotation.start, annotation.end))
    suggestions = ", ".join(
        formatter.style(suggestion, StyleRole.CORRECTION)
        for suggestion in annotation.suggestions
    )
    explanation = formatter.style(annotation.explanation, StyleRole.EXPLANATION)
    return (
        f"{annotation.start}: {formatter.style(original, StyleRole.ISSUE)}"
        f" -> {suggestions}: {explanation}"
    )


def render(
    buffer: TextBuffer,
    annotations: Sequence[Annotation],
    verbose: bool = False,
    *,
    formatter: Formatter | None = None,
) -> RenderResult:
    """Render the marked and corrected versions of ``buffer``.

    Args:
            buffer: The checked text
            annotations: Disjoint annotations (output of the resolver)
            verbose: Also produce one explanation line per annotation
            formatter: Markup for the style roles (default: ANSI colours)

    Returns:
            A RenderResult; ``clean`` is set when there are no annotations
    """
    formatter = formatter or AnsiFormatter()

    if not annotations:
        return RenderResult(
            marked=formatter.no_issues(buffer.text),
            corrected=formatter.style(buffer.text, StyleRole.NEUTRAL),
            explanations=[],
            clean=True,
        )

    marked = StyledRun.from_buffer(buffer)
    corrected = StyledRun.from_buffer(buffer)
    explanations: list[str] = []
    previous_start: int | None = None

    for annotation in sorted(annotations, key=lambda a: a.start, reverse=True):
        span = buffer.span(annotation.start, annotation.end)
        if previous_start is not None and span.end > previous_start:
            raise ValueError(
                f"annotation [{span.start}, {span.end}) overlaps a later annotation; "
                "resolve annotations before rendering"
            )
        previous_start = span.start

        storage_span = buffer.to_storage(span)
        original = buffer.slice(span)
        marked = marked.splice(
            storage_span, formatter.style(original, StyleRole.ISSUE)
        )
        corrected = corrected.splice(
            storage_span, formatter.style(annotation.primary, StyleRole.CORRECTION)
        )
        if verbose:
            explanations.append(_explanation_line(buffer, annotation, formatter))

    # collected right to left, shown left to right
    explanations.reverse()
    LOGGER.debug("Rendered %d annotation(s)", len(annotations))
    return RenderResult(
        marked=marked.text,
        corrected=corrected.text,
        explanations=explanations,
        clean=False,
    )
