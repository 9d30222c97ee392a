"""Analysis providers: the LanguageTool HTTP client and local server helper."""

from __future__ import annotations

from .base import (
    AnalysisProvider,
    ProviderConnectionError,
    ProviderError,
    ProviderRateLimitError,
    ProviderResponseError,
)
from .client import DEFAULT_API_URL, LanguageToolClient
from .language_tool_manager import LanguageToolManager
from .retry import TRANSIENT_ERRORS, backoff_delay, retry_with_backoff

__all__ = [
    "AnalysisProvider",
    "DEFAULT_API_URL",
    "LanguageToolClient",
    "LanguageToolManager",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderRateLimitError",
    "ProviderResponseError",
    "TRANSIENT_ERRORS",
    "backoff_delay",
    "retry_with_backoff",
]
