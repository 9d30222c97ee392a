"""Command-line interface for grammar-overlay.

Sends the text to LanguageTool, then prints the text with the issues marked
next to the corrected text. With ``--verbose`` every issue also gets a line
with the flagged words, the suggestions and LanguageTool's explanation.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

from grammar_overlay import __version__
from grammar_overlay.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_SUGGESTIONS,
    LEVELS,
    OverlayConfig,
    load_house_rules,
)
from grammar_overlay.models import ColorMode, OutputFormat
from grammar_overlay.overlay.pipeline import check_text
from grammar_overlay.provider import (
    DEFAULT_API_URL,
    LanguageToolClient,
    LanguageToolManager,
    ProviderError,
)

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="grammar-overlay",
        description="Check text with LanguageTool and show the corrections inline.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a sentence with the public LanguageTool API
  grammar-overlay "Je suis alle a la plage"

  # Explain every issue and show up to five suggestions
  grammar-overlay -v -n 5 "Il a manger une pomme"

  # Read from stdin and write Markdown
  echo "This are wrong" | grammar-overlay --language en-GB --format markdown

  # Use a self-hosted server
  grammar-overlay --api-url http://localhost:8081 "Texte a verifier"
        """,
    )
    parser.add_argument(
        "text",
        nargs="?",
        default="-",
        help="Text to analyse ('-' or omitted: read from stdin)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Show one explanation line per issue",
    )
    parser.add_argument(
        "-n",
        "--max-suggestions",
        type=int,
        default=None,
        help=f"Suggestions kept per issue (default: {DEFAULT_MAX_SUGGESTIONS})",
    )
    parser.add_argument(
        "-l",
        "--language",
        default=None,
        help=f"Language code for LanguageTool (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--level",
        choices=LEVELS,
        default=None,
        help="LanguageTool check level (default: default)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="LanguageTool server base URL (default: public API)",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        default=None,
        help="Run a local LanguageTool server through language_tool_python",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OutputFormat.all_values(),
        default=None,
        help="Output markup (default: ansi)",
    )
    parser.add_argument(
        "--color",
        choices=ColorMode.all_values(),
        default=None,
        help="When to emit ANSI colours (default: auto)",
    )
    parser.add_argument(
        "--strike",
        action="store_true",
        default=None,
        help="Strike through flagged text instead of only colouring it",
    )
    parser.add_argument(
        "--house-rules",
        type=Path,
        default=None,
        help="JSON file of {pattern, replacement, explanation} house rules",
    )
    parser.add_argument(
        "--no-house-rules",
        action="store_true",
        help="Disable the built-in house rules",
    )
    parser.add_argument(
        "--ignore-word",
        action="append",
        dest="ignored_words",
        help="Never report this word (case-sensitive, can be given multiple times)",
    )
    parser.add_argument(
        "--disable-rule",
        action="append",
        dest="disabled_rules",
        help="LanguageTool rule ID to disable (can be given multiple times)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file with GRAMMAR_OVERLAY_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(list(argv) if argv is not None else None)


def _read_text(value: str) -> str:
    if value == "-":
        return sys.stdin.read().rstrip("\n")
    return value


def build_config(args: argparse.Namespace) -> OverlayConfig:
    """Merge command-line options over the environment configuration."""
    house_rules: tuple[Any, ...] | None = None
    if args.no_house_rules:
        house_rules = ()
    elif args.house_rules is not None:
        house_rules = load_house_rules(args.house_rules)

    return OverlayConfig.from_env(
        dotenv_path=args.env_file,
        language=args.language,
        level=args.level,
        api_url=args.api_url,
        local=args.local,
        max_suggestions=args.max_suggestions,
        verbose=args.verbose,
        strike=args.strike,
        output_format=args.output_format,
        color=args.color,
        house_rules=house_rules,
        ignored_words=set(args.ignored_words) if args.ignored_words else None,
        disabled_rules=set(args.disabled_rules) if args.disabled_rules else None,
    )


def build_provider(config: OverlayConfig) -> Any:
    """Create the provider selected by ``config``."""
    if config.local:
        # a non-default URL names a server language_tool_python should talk to
        remote_server = config.api_url if config.api_url != DEFAULT_API_URL else None
        manager = LanguageToolManager(
            disabled_rules=config.disabled_rules,
            remote_server=remote_server,
        )
        return manager.build_tool(config.language)
    return LanguageToolClient(
        language=config.language,
        api_url=config.api_url,
        level=config.level,
        disabled_rules=config.disabled_rules,
        username=config.username,
        api_key=config.api_key,
        timeout=config.timeout,
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    text = _read_text(args.text)
    if not text:
        print("Nothing to check: the text is empty.", file=sys.stderr)
        return 2

    provider = None
    try:
        provider = build_provider(config)
        result = check_text(text, provider, config)
    except ProviderError as exc:
        print(f"LanguageTool error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        LOGGER.exception("Language check failed")
        print(f"Language check failed: {exc}", file=sys.stderr)
        return 1
    finally:
        if provider is not None and hasattr(provider, "close"):
            provider.close()

    for line in result.lines():
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
