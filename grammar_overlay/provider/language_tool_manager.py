"""LanguageTool setup helpers for local and self-hosted servers.

The HTTP client covers the public API. When the user asks for a local server
(``--local``) or points at a server that ``language_tool_python`` should
manage, this module builds the ``LanguageTool`` instance. Its ``check``
returns ``Match`` objects, which the normalizer accepts directly.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import language_tool_python
from language_tool_python.utils import LanguageToolError

from .base import ProviderConnectionError

# Default LanguageTool server configuration for the local Java server.
_DEFAULT_CONFIG = {
    "requestLimitPeriodInSeconds": 60,
    "maxCheckTimeMillis": 60000,
}


class LanguageToolManager:
    """Factory class responsible for configuring LanguageTool instances."""

    def __init__(
        self,
        *,
        disabled_rules: Iterable[str] | None = None,
        remote_server: str | None = None,
        config: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.remote_server = remote_server
        self.logger = logger or logging.getLogger(__name__)
        self.config = dict(config) if config is not None else dict(_DEFAULT_CONFIG)
        self.disabled_rules = set(disabled_rules or [])

    def build_tool(
        self,
        language: str,
        *,
        extra_disabled_rules: Iterable[str] | None = None,
    ) -> Any:
        """Build a LanguageTool instance for ``language``."""

        kwargs: dict[str, Any] = {}
        if self.remote_server:
            # The server config only applies to a locally spawned server
            kwargs["remote_server"] = self.remote_server
        elif self.config:
            kwargs["config"] = self.config

        self.logger.info(
            "Starting LanguageTool for %s (%s)",
            language,
            self.remote_server or "local server",
        )
        try:
            tool = language_tool_python.LanguageTool(language, **kwargs)
        except LanguageToolError as exc:
            raise ProviderConnectionError(
                f"Could not start LanguageTool for {language}: {exc}"
            ) from exc

        rules = set(self.disabled_rules)
        if extra_disabled_rules:
            rules.update(extra_disabled_rules)
        if rules:
            tool.disabled_rules = set(rules)
        return tool
