"""HTTP client for the LanguageTool ``/v2/check`` endpoint.

Works against the public LanguageTool API as well as any self-hosted
LanguageTool server. Parameters are sent as form data in a POST body so long
texts never hit URL length limits.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

import requests

from .base import ProviderConnectionError, ProviderRateLimitError, ProviderResponseError

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.languagetoolplus.com"
CHECK_PATH = "/v2/check"
DEFAULT_TIMEOUT = 30.0

# 426 is what the free public API answers once its request quota is spent
_RATE_LIMIT_STATUSES = {426, 429}


class LanguageToolClient:
    """Query a LanguageTool server and return the raw ``matches`` list."""

    def __init__(
        self,
        *,
        language: str,
        api_url: str = DEFAULT_API_URL,
        level: str = "default",
        disabled_rules: Iterable[str] | None = None,
        username: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.language = language
        self.api_url = api_url.rstrip("/")
        self.level = level
        self.disabled_rules = sorted(set(disabled_rules or []))
        self.username = username
        self.api_key = api_key
        self.timeout = timeout
        self.logger = logger or LOGGER
        self._session = session or requests.Session()

    @property
    def check_url(self) -> str:
        if self.api_url.endswith(CHECK_PATH):
            return self.api_url
        return f"{self.api_url}{CHECK_PATH}"

    def _build_params(self, text: str) -> dict[str, str]:
        params = {
            "text": text,
            "language": self.language,
            "level": self.level,
            "enabledOnly": "false",
        }
        if self.disabled_rules:
            params["disabledRules"] = ",".join(self.disabled_rules)
        if self.username and self.api_key:
            params["username"] = self.username
            params["apiKey"] = self.api_key
        return params

    def check_raw(self, text: str) -> dict[str, Any]:
        """POST ``text`` to the server and return the decoded JSON body."""
        self.logger.info(
            "Checking %d character(s) with LanguageTool (%s, language=%s)",
            len(text),
            self.check_url,
            self.language,
        )
        try:
            response = self._session.post(
                self.check_url,
                data=self._build_params(text),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise ProviderConnectionError(f"{self.check_url}: {exc}") from exc
        except requests.RequestException as exc:
            raise ProviderResponseError(f"{self.check_url}: {exc}") from exc

        if response.status_code in _RATE_LIMIT_STATUSES:
            raise ProviderRateLimitError(
                "You have exceeded the rate limit for the LanguageTool API. "
                "Please try again later."
            )
        if response.status_code >= 500:
            raise ProviderConnectionError(
                f"{self.check_url}: server error (HTTP {response.status_code})"
            )
        if response.status_code >= 400:
            raise ProviderResponseError(
                "LanguageTool rejected the request",
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise ProviderResponseError(
                "LanguageTool returned an invalid JSON response",
                status_code=response.status_code,
                response_text=response.text,
            ) from exc

        if not isinstance(payload, dict):
            raise ProviderResponseError(
                "LanguageTool returned an unexpected JSON document",
                status_code=response.status_code,
                response_text=response.text,
            )
        return payload

    def check(self, text: str) -> list[Any]:
        """Return the ``matches`` of ``text``; a missing list means no issues."""
        payload = self.check_raw(text)
        matches = payload.get("matches")
        if not isinstance(matches, list):
            self.logger.warning("LanguageTool response has no 'matches' list")
            return []
        self.logger.info("LanguageTool reported %d match(es)", len(matches))
        return matches

    def close(self) -> None:
        self._session.close()
