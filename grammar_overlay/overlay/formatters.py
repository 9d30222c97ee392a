"""Formatters that turn style roles into concrete markup."""

from __future__ import annotations

from abc import ABC, abstractmethod

from termcolor import colored

from grammar_overlay.models import ColorMode, OutputFormat, StyleRole

NO_ISSUES_MARKER = "No issues found"


class Formatter(ABC):
    """Resolve a :class:`StyleRole` to markup around a piece of text."""

    def __init__(self, *, strike: bool = False) -> None:
        # Strike through flagged text instead of only colouring it
        self.strike = strike

    @abstractmethod
    def style(self, text: str, role: StyleRole) -> str:
        """Return ``text`` wrapped in the markup for ``role``."""

    def no_issues(self, text: str) -> str:
        """Rendering used when the text has no issues at all."""
        marker = self.style(f"({NO_ISSUES_MARKER})", StyleRole.CORRECTION)
        return f"{self.style(text, StyleRole.NEUTRAL)} {marker}"


class AnsiFormatter(Formatter):
    """Terminal colours via termcolor: red issues, green corrections."""

    _COLOURS: dict[StyleRole, str | None] = {
        StyleRole.ISSUE: "red",
        StyleRole.CORRECTION: "green",
        StyleRole.EXPLANATION: None,
        StyleRole.NEUTRAL: None,
    }

    def __init__(
        self,
        *,
        strike: bool = False,
        color: ColorMode | str = ColorMode.AUTO,
    ) -> None:
        super().__init__(strike=strike)
        self.color = ColorMode(color)

    def _attrs(self, role: StyleRole) -> list[str] | None:
        if role is StyleRole.ISSUE and self.strike:
            return ["strike"]
        if role is StyleRole.EXPLANATION:
            return ["dark"]
        return None

    def style(self, text: str, role: StyleRole) -> str:
        if role is StyleRole.NEUTRAL or not text:
            return text
        if self.color is ColorMode.NEVER:
            return text
        return colored(
            text,
            self._COLOURS[role],
            attrs=self._attrs(role),
            force_color=True if self.color is ColorMode.ALWAYS else None,
        )


class MarkdownFormatter(Formatter):
    """Markdown emphasis, handy for pasting results into notes or reports."""

    def style(self, text: str, role: StyleRole) -> str:
        if role is StyleRole.NEUTRAL:
            return text
        if role is StyleRole.ISSUE:
            return f"~~{text}~~" if self.strike else f"**{text}**"
        if role is StyleRole.CORRECTION:
            return f"__{text}__"
        return f"_{text}_"


def build_formatter(
    output_format: OutputFormat | str = OutputFormat.ANSI,
    *,
    strike: bool = False,
    color: ColorMode | str = ColorMode.AUTO,
) -> Formatter:
    """Instantiate the formatter selected on the command line."""
    selected = OutputFormat(output_format)
    if selected is OutputFormat.MARKDOWN:
        return MarkdownFormatter(strike=strike)
    return AnsiFormatter(strike=strike, color=color)
