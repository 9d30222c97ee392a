from __future__ import annotations

import sys
from pathlib import Path

import pytest
from termcolor import colored

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from grammar_overlay.models import Annotation, ColorMode, StyleRole
from grammar_overlay.overlay.formatters import (
    NO_ISSUES_MARKER,
    AnsiFormatter,
    Formatter,
    MarkdownFormatter,
)
from grammar_overlay.overlay.renderer import StyledRun, render
from grammar_overlay.overlay.text_buffer import TextBuffer


class PlainFormatter(Formatter):
    def style(self, text: str, role: StyleRole) -> str:
        return text


def _ann(start: int, end: int, *suggestions: str, explanation: str = "because") -> Annotation:
    return Annotation(
        start=start, end=end, suggestions=list(suggestions), explanation=explanation
    )


def test_descending_splices_do_not_disturb_earlier_offsets() -> None:
    text = "The cat runs fast"
    buffer = TextBuffer(text)
    annotations = [_ann(0, 3, "Bob"), _ann(5, 8, "runs")]

    result = render(buffer, annotations, formatter=PlainFormatter())

    expected = "Bob" + text[3:5] + "runs" + text[8:]
    assert result.corrected == expected
    assert result.marked == text
    assert result.clean is False


def test_marked_and_corrected_markup() -> None:
    buffer = TextBuffer("The cat runs fast")
    annotations = [_ann(0, 3, "A"), _ann(13, 17, "slowly")]

    result = render(buffer, annotations, formatter=MarkdownFormatter())

    assert result.marked == "**The** cat runs **fast**"
    assert result.corrected == "__A__ cat runs __slowly__"


def test_strike_mode_marks_issues_as_deleted() -> None:
    buffer = TextBuffer("teh cat")
    result = render(buffer, [_ann(0, 3, "the")], formatter=MarkdownFormatter(strike=True))
    assert result.marked == "~~teh~~ cat"


def test_replacement_length_changes_are_independent() -> None:
    text = "a b c d"
    buffer = TextBuffer(text)
    annotations = [_ann(0, 1, "alpha"), _ann(2, 3, ""), _ann(6, 7, "delta")]
    result = render(buffer, annotations, formatter=PlainFormatter())
    assert result.corrected == "alpha  c delta"


def test_multibyte_text_is_spliced_on_character_boundaries() -> None:
    text = "🙂 Il a manger"
    buffer = TextBuffer(text)
    result = render(buffer, [_ann(7, 13, "mangé")], formatter=MarkdownFormatter())
    assert result.marked == "🙂 Il a **manger**"
    assert result.corrected == "🙂 Il a __mangé__"


def test_insertion_annotation() -> None:
    buffer = TextBuffer("Hello world")
    result = render(buffer, [_ann(5, 5, ",")], formatter=MarkdownFormatter())
    assert result.marked == "Hello**** world"
    assert result.corrected == "Hello__,__ world"


def test_empty_annotations_render_no_issues_marker() -> None:
    buffer = TextBuffer("Hello world")
    result = render(buffer, [], verbose=True, formatter=MarkdownFormatter())

    assert result.clean is True
    assert result.explanations == []
    assert NO_ISSUES_MARKER in result.marked
    assert result.lines() == [result.marked]
    assert result.marked.startswith("Hello world")


def test_verbose_lines_are_in_ascending_order() -> None:
    buffer = TextBuffer("teh cat sat om the mat")
    annotations = [
        _ann(0, 3, "the", "tea", explanation="Spelling"),
        _ann(12, 14, "on", explanation="Preposition"),
    ]
    result = render(buffer, annotations, verbose=True, formatter=MarkdownFormatter())

    assert result.explanations == [
        "0: **teh** -> __the__, __tea__: _Spelling_",
        "12: **om** -> __on__: _Preposition_",
    ]
    assert result.lines()[-1] == f"{result.marked} -> {result.corrected}"


def test_not_verbose_has_no_explanations() -> None:
    buffer = TextBuffer("teh cat")
    result = render(buffer, [_ann(0, 3, "the")], formatter=MarkdownFormatter())
    assert result.explanations == []
    assert result.lines() == ["**teh** cat -> __the__ cat"]


def test_overlapping_annotations_are_rejected() -> None:
    buffer = TextBuffer("abcdef")
    with pytest.raises(ValueError):
        render(buffer, [_ann(0, 4, "x"), _ann(2, 5, "y")], formatter=PlainFormatter())


def test_out_of_range_annotation_fails_fast() -> None:
    buffer = TextBuffer("abc")
    with pytest.raises(ValueError):
        render(buffer, [_ann(1, 9, "x")], formatter=PlainFormatter())


def test_ansi_formatter_colours() -> None:
    buffer = TextBuffer("teh cat")
    formatter = AnsiFormatter(color=ColorMode.ALWAYS)
    result = render(buffer, [_ann(0, 3, "the")], formatter=formatter)

    assert result.marked == colored("teh", "red", force_color=True) + " cat"
    assert result.corrected == colored("the", "green", force_color=True) + " cat"


def test_ansi_formatter_strike() -> None:
    formatter = AnsiFormatter(strike=True, color=ColorMode.ALWAYS)
    assert formatter.style("teh", StyleRole.ISSUE) == colored(
        "teh", "red", attrs=["strike"], force_color=True
    )


def test_ansi_formatter_never_colours() -> None:
    formatter = AnsiFormatter(color=ColorMode.NEVER)
    assert formatter.style("teh", StyleRole.ISSUE) == "teh"
    assert formatter.style("the", StyleRole.CORRECTION) == "the"


def test_styled_run_splice_returns_new_run() -> None:
    buffer = TextBuffer("ça va")
    run = StyledRun.from_buffer(buffer)
    spliced = run.splice(buffer.to_storage(buffer.span(0, 2)), "Ça")
    assert run.text == "ça va"
    assert spliced.text == "Ça va"


def test_utf16_rendering_inserts_no_byte_order_marks() -> None:
    buffer = TextBuffer("Il a manger", encoding="utf-16")
    result = render(buffer, [_ann(5, 11, "mangé")], formatter=MarkdownFormatter())
    assert result.marked == "Il a **manger**"
    assert result.corrected == "Il a __mangé__"
    assert "\ufeff" not in result.corrected
