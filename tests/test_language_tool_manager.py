from __future__ import annotations

import sys
from pathlib import Path

import pytest
from language_tool_python.utils import LanguageToolError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import grammar_overlay.provider.language_tool_manager as ltm_mod
from grammar_overlay.provider import LanguageToolManager, ProviderConnectionError


class DummyLanguageTool:
    instances: list["DummyLanguageTool"] = []

    def __init__(self, language, *args, **kwargs):
        self.language = language
        self.kwargs = kwargs
        self.disabled_rules: set[str] = set()
        DummyLanguageTool.instances.append(self)

    def close(self) -> None:
        return None


def test_local_tool_gets_server_config(monkeypatch) -> None:
    """The local server is started with our config and disabled rules."""
    DummyLanguageTool.instances = []
    monkeypatch.setattr(ltm_mod.language_tool_python, "LanguageTool", DummyLanguageTool)

    manager = LanguageToolManager(disabled_rules={"WHITESPACE_RULE"})
    tool = manager.build_tool("fr", extra_disabled_rules={"FRENCH_WHITESPACE"})

    assert tool.language == "fr"
    assert tool.kwargs["config"]["maxCheckTimeMillis"] == 60000
    assert "remote_server" not in tool.kwargs
    assert tool.disabled_rules == {"WHITESPACE_RULE", "FRENCH_WHITESPACE"}


def test_remote_server_skips_local_config(monkeypatch) -> None:
    DummyLanguageTool.instances = []
    monkeypatch.setattr(ltm_mod.language_tool_python, "LanguageTool", DummyLanguageTool)

    manager = LanguageToolManager(remote_server="http://localhost:8081")
    tool = manager.build_tool("en-GB")

    assert tool.kwargs == {"remote_server": "http://localhost:8081"}
    assert tool.disabled_rules == set()


def test_startup_failure_is_a_provider_error(monkeypatch) -> None:
    def failing_tool(language, *args, **kwargs):
        raise LanguageToolError("java not found")

    monkeypatch.setattr(ltm_mod.language_tool_python, "LanguageTool", failing_tool)

    with pytest.raises(ProviderConnectionError, match="java not found"):
        LanguageToolManager().build_tool("fr")
