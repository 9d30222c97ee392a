"""Order annotations and merge the ones that overlap or touch.

LanguageTool can report several fixes for the same stretch of text, for
example a whole-phrase rewrite and a spelling fix inside it. Such cascading
corrections are folded into one annotation: the inner fix is spliced into the
outer fix's primary suggestion, so the result reads as both corrections
applied together.

Merging walks the sorted list from the end towards the start. Splicing the
rightmost fix first means the earlier positions of a suggestion are still
aligned with the original text when the next fix is spliced in. Every splice
also records how much it changed the suggestion's length, so fixes that are
merged out of that order (after a merge extends an annotation over a later
one) still land at the right place.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from grammar_overlay.models import Annotation

from .house_rules import DEFAULT_HOUSE_RULES, HouseRule, apply_house_rules
from .text_buffer import TextBuffer

LOGGER = logging.getLogger(__name__)

# (original-text anchor, length delta) pairs per annotation being merged into
_Shifts = list[tuple[int, int]]


def _suggestion_offset(target: Annotation, position: int, shifts: _Shifts) -> int:
    """Map an original character position into ``target``'s primary suggestion."""
    offset = position - target.start
    for anchor, delta in shifts:
        if anchor <= position:
            offset += delta
    return offset


def _merge_into(previous: Annotation, current: Annotation, shifts: _Shifts) -> None:
    """Splice ``current``'s primary suggestion into ``previous``'s."""
    suggestion = previous.suggestions[0]
    overlap = min(current.end, previous.end) - current.start

    relative = _suggestion_offset(previous, current.start, shifts)
    lo = max(0, min(relative, len(suggestion)))
    hi = min(lo + overlap, len(suggestion))

    previous.suggestions[0] = suggestion[:lo] + current.suggestions[0] + suggestion[hi:]
    shifts.append((current.end, len(current.suggestions[0]) - current.length))
    previous.end = max(previous.end, current.end)
    for pattern in current.applied_rules:
        if pattern not in previous.applied_rules:
            previous.applied_rules.append(pattern)


def merge_overlaps(annotations: Iterable[Annotation]) -> list[Annotation]:
    """Sort annotations by start and merge touching or overlapping ones.

    The input annotations are copied; the caller's objects are left alone.
    The output is strictly ascending: ``a[i].end < a[i + 1].start``.
    """
    items = [annotation.model_copy(deep=True) for annotation in annotations]
    # list.sort is stable: ties keep their discovery order
    items.sort(key=lambda annotation: annotation.start)

    shifts: dict[int, _Shifts] = {}
    i = len(items) - 1
    while i > 0:
        previous, current = items[i - 1], items[i]
        if previous.end >= current.start:
            LOGGER.debug(
                "Merging [%d, %d) into [%d, %d)",
                current.start,
                current.end,
                previous.start,
                previous.end,
            )
            _merge_into(previous, current, shifts.setdefault(id(previous), []))
            del items[i]
            # the extended predecessor now faces the next annotation
            if i >= len(items):
                i -= 1
            continue
        i -= 1
    return items


def resolve(
    annotations: Iterable[Annotation],
    buffer: TextBuffer,
    *,
    rules: Sequence[HouseRule] | None = None,
) -> list[Annotation]:
    """Return the disjoint, position-ordered annotations for ``buffer``.

    Args:
            annotations: Normalised annotations, in any order
            buffer: The checked text
            rules: House rules to apply first (default: ``DEFAULT_HOUSE_RULES``)
    """
    active_rules = DEFAULT_HOUSE_RULES if rules is None else rules
    candidates = apply_house_rules(annotations, buffer, active_rules)
    resolved = merge_overlaps(candidates)
    if len(resolved) != len(candidates):
        LOGGER.info(
            "Resolved %d annotation(s) into %d disjoint annotation(s)",
            len(candidates),
            len(resolved),
        )
    return resolved
