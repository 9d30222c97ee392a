from __future__ import annotations

from typing import Any, Protocol, Sequence


class ProviderError(Exception):
    """Generic failure raised by an analysis provider."""


class ProviderConnectionError(ProviderError):
    """Raised when the provider cannot be reached (transient)."""


class ProviderRateLimitError(ProviderError):
    """Raised when the provider reports rate-limit exhaustion."""


class ProviderResponseError(ProviderError):
    """Raised when a provider response cannot be used.

    Carries the HTTP status and a truncated body to aid debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.status_code is not None:
            parts.append(f"(HTTP {self.status_code})")
        if self.response_text:
            text = self.response_text
            if len(text) > 500:
                text = text[:500] + "... [truncated]"
            parts.append(f": {text}")
        return " ".join(parts)


class AnalysisProvider(Protocol):
    """Anything that can check text and return raw issue records."""

    def check(self, text: str) -> Sequence[Any]:
        """Return LanguageTool style matches for ``text``."""
        ...
