"""Provider-independent corrections.

A house rule is a fixed correction that is always applied, whatever the
analysis provider reports: the first case-insensitive occurrence of
``pattern`` is annotated with ``replacement``. Provider annotations that flag
text already spelled exactly as a rule's replacement are dropped, otherwise
the provider would undo the house spelling.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, field_validator

from grammar_overlay.models import Annotation

from .text_buffer import TextBuffer

LOGGER = logging.getLogger(__name__)


class HouseRule(BaseModel):
    """A fixed ``pattern -> replacement`` correction with its explanation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pattern: str
    replacement: str
    explanation: str

    @field_validator("pattern")
    def _pattern_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("pattern must not be empty")
        return value

    def find(self, text: str) -> tuple[int, int] | None:
        """Return the character range of the first match, if any."""
        match = re.search(re.escape(self.pattern), text, flags=re.IGNORECASE)
        if match is None:
            return None
        return match.start(), match.end()

    def annotate(self, buffer: TextBuffer) -> Annotation | None:
        found = self.find(buffer.text)
        if found is None:
            return None
        span = buffer.span(*found)
        return Annotation(
            start=span.start,
            end=span.end,
            suggestions=[self.replacement],
            explanation=self.explanation,
            applied_rules=[self.pattern],
        )


DEFAULT_HOUSE_RULES: tuple[HouseRule, ...] = (
    HouseRule(
        pattern="emmanuel",
        replacement="Emanuel",
        explanation="Qu'est ce que c'est que ce nom.",
    ),
)


def _already_applied(
    annotations: Iterable[Annotation], rule: HouseRule, forced: Annotation
) -> bool:
    return any(
        rule.pattern in annotation.applied_rules
        and annotation.start <= forced.start
        and forced.end <= annotation.end
        for annotation in annotations
    )


def apply_house_rules(
    annotations: Iterable[Annotation],
    buffer: TextBuffer,
    rules: Sequence[HouseRule],
) -> list[Annotation]:
    """Return ``annotations`` with house rule corrections added.

    Forced annotations are appended after the provider ones, so a stable sort
    keeps provider annotations first when both start at the same offset. A rule
    is not forced again where an annotation that already carries it covers the
    match, which keeps resolving an already resolved list a no-op.
    """
    protected = {rule.replacement for rule in rules}
    kept: list[Annotation] = []
    for annotation in annotations:
        if annotation.end <= len(buffer) and protected:
            flagged = buffer.slice(buffer.span(annotation.start, annotation.end))
            if flagged in protected:
                LOGGER.debug(
                    "Dropping provider issue on house spelling %r at %d",
                    flagged,
                    annotation.start,
                )
                continue
        kept.append(annotation)

    for rule in rules:
        forced = rule.annotate(buffer)
        if forced is None:
            continue
        if _already_applied(kept, rule, forced):
            LOGGER.debug("House rule %r already applied at %d", rule.pattern, forced.start)
            continue
        LOGGER.debug(
            "House rule %r matched at [%d, %d)",
            rule.pattern,
            forced.start,
            forced.end,
        )
        kept.append(forced)
    return kept
