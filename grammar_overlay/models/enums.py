"""Enumerations shared by the overlay engine and the command-line shell."""

from __future__ import annotations

from enum import Enum


class StyleRole(str, Enum):
    """Roles a piece of rendered text can play.

    Formatters map each role to concrete markup (ANSI colours, Markdown
    emphasis, ...), so the overlay engine never deals with escape sequences.
    """

    ISSUE = "issue"
    CORRECTION = "correction"
    EXPLANATION = "explanation"
    NEUTRAL = "neutral"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class OutputFormat(str, Enum):
    """Formatter families selectable from the command line."""

    ANSI = "ansi"
    MARKDOWN = "markdown"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class ColorMode(str, Enum):
    """When the ANSI formatter should emit colour codes.

    Values:
        AUTO: Let termcolor decide from the terminal and NO_COLOR/FORCE_COLOR
        ALWAYS: Always emit escape sequences
        NEVER: Never emit escape sequences
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
