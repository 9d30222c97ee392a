"""Configuration for grammar-overlay runs.

Defaults live here as module constants. ``OverlayConfig.from_env`` layers a
``.env`` file, the process environment and explicit overrides (usually from
the command line) on top of them, in that order of increasing priority.

Environment Variables:
  GRAMMAR_OVERLAY_LANGUAGE          Language code sent to LanguageTool (default: fr)
  GRAMMAR_OVERLAY_LEVEL             LanguageTool check level: default or picky
  GRAMMAR_OVERLAY_API_URL           LanguageTool server base URL
  GRAMMAR_OVERLAY_MAX_SUGGESTIONS   Suggestions kept per issue (default: 3)
  GRAMMAR_OVERLAY_TIMEOUT           HTTP timeout in seconds (default: 30)
  GRAMMAR_OVERLAY_MAX_RETRIES       Retries on connection errors (default: 2)
  GRAMMAR_OVERLAY_RETRY_DELAY       Seconds before the first retry (default: 2)
  LANGUAGETOOL_USERNAME             Premium API username
  LANGUAGETOOL_API_KEY              Premium API key
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import TypeAdapter

from grammar_overlay.models import ColorMode, OutputFormat
from grammar_overlay.overlay.house_rules import DEFAULT_HOUSE_RULES, HouseRule
from grammar_overlay.provider.client import DEFAULT_API_URL, DEFAULT_TIMEOUT

DEFAULT_LANGUAGE = "fr"
DEFAULT_LEVEL = "default"
DEFAULT_MAX_SUGGESTIONS = 3
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY = 2.0
LEVELS = ("default", "picky")

# Flagged words that are never reported (case-sensitive)
DEFAULT_IGNORED_WORDS: frozenset[str] = frozenset()

ENV_PREFIX = "GRAMMAR_OVERLAY"

_HOUSE_RULES_ADAPTER = TypeAdapter(list[HouseRule])


def load_house_rules(path: str | Path) -> tuple[HouseRule, ...]:
    """Load house rules from a JSON list of ``{pattern, replacement, explanation}``."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return tuple(_HOUSE_RULES_ADAPTER.validate_python(data))


def _env_int(name: str) -> int | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _env_float(name: str) -> float | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_str(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip() or None


@dataclass
class OverlayConfig:
    """Settings for one grammar-overlay run."""

    # Provider
    language: str = DEFAULT_LANGUAGE
    level: str = DEFAULT_LEVEL
    api_url: str = DEFAULT_API_URL
    local: bool = False
    disabled_rules: set[str] = field(default_factory=set)
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    username: str | None = None
    api_key: str | None = None

    # Overlay engine
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    house_rules: tuple[HouseRule, ...] = DEFAULT_HOUSE_RULES
    ignored_words: set[str] = field(default_factory=lambda: set(DEFAULT_IGNORED_WORDS))

    # Presentation
    verbose: bool = False
    strike: bool = False
    output_format: OutputFormat = OutputFormat.ANSI
    color: ColorMode = ColorMode.AUTO

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise ValueError(
                f"max_suggestions must be at least 1, got {self.max_suggestions}"
            )
        if self.level not in LEVELS:
            raise ValueError(f"level must be one of {', '.join(LEVELS)}, got {self.level!r}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must not be negative, got {self.retry_delay}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        self.output_format = OutputFormat(self.output_format)
        self.color = ColorMode(self.color)

    @classmethod
    def from_env(
        cls,
        dotenv_path: str | Path | None = None,
        **overrides: Any,
    ) -> "OverlayConfig":
        """Build a configuration from ``.env``, the environment and overrides.

        Overrides whose value is None are ignored, so argparse namespaces can
        be passed through without filtering.
        """
        if dotenv_path is not None:
            # Explicit environment values take precedence over the file
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        values: dict[str, Any] = {
            "language": _env_str(f"{ENV_PREFIX}_LANGUAGE"),
            "level": _env_str(f"{ENV_PREFIX}_LEVEL"),
            "api_url": _env_str(f"{ENV_PREFIX}_API_URL"),
            "max_suggestions": _env_int(f"{ENV_PREFIX}_MAX_SUGGESTIONS"),
            "timeout": _env_float(f"{ENV_PREFIX}_TIMEOUT"),
            "max_retries": _env_int(f"{ENV_PREFIX}_MAX_RETRIES"),
            "retry_delay": _env_float(f"{ENV_PREFIX}_RETRY_DELAY"),
            "username": _env_str("LANGUAGETOOL_USERNAME"),
            "api_key": _env_str("LANGUAGETOOL_API_KEY"),
        }
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        values.update(overrides)
        return cls(**{key: value for key, value in values.items() if value is not None})
