from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from grammar_overlay.provider import (
    LanguageToolClient,
    ProviderConnectionError,
    ProviderRateLimitError,
    ProviderResponseError,
    backoff_delay,
    retry_with_backoff,
)


class DummyResponse:
    def __init__(self, status_code: int = 200, body: object = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> object:
        if self._body is None:
            return json.loads(self.text)
        return self._body


class DummySession:
    def __init__(self, response: DummyResponse | Exception) -> None:
        self._response = response
        self.calls: list[dict] = []
        self.closed = False

    def post(self, url: str, data: dict, timeout: float) -> DummyResponse:
        self.calls.append({"url": url, "data": data, "timeout": timeout})
        if isinstance(self._response, Exception):
            raise self._response
        return self._response

    def close(self) -> None:
        self.closed = True


def _client(session: DummySession, **kwargs) -> LanguageToolClient:
    return LanguageToolClient(language="fr", session=session, **kwargs)


def test_check_posts_form_data_and_returns_matches() -> None:
    matches = [{"message": "m", "offset": 0, "length": 1, "replacements": []}]
    session = DummySession(DummyResponse(body={"matches": matches}))
    client = _client(session, disabled_rules={"B_RULE", "A_RULE"}, timeout=5.0)

    assert client.check("Bonjour") == matches

    call = session.calls[0]
    assert call["url"] == "https://api.languagetoolplus.com/v2/check"
    assert call["timeout"] == 5.0
    assert call["data"] == {
        "text": "Bonjour",
        "language": "fr",
        "level": "default",
        "enabledOnly": "false",
        "disabledRules": "A_RULE,B_RULE",
    }


def test_credentials_are_sent_only_as_a_pair() -> None:
    session = DummySession(DummyResponse(body={"matches": []}))
    _client(session, username="me@example.com").check("x")
    assert "username" not in session.calls[0]["data"]

    session = DummySession(DummyResponse(body={"matches": []}))
    _client(session, username="me@example.com", api_key="secret").check("x")
    assert session.calls[0]["data"]["apiKey"] == "secret"


def test_self_hosted_url_is_completed() -> None:
    session = DummySession(DummyResponse(body={"matches": []}))
    client = _client(session, api_url="http://localhost:8081/")
    client.check("x")
    assert session.calls[0]["url"] == "http://localhost:8081/v2/check"

    client = _client(session, api_url="http://localhost:8081/v2/check")
    assert client.check_url == "http://localhost:8081/v2/check"


def test_missing_matches_means_no_issues() -> None:
    session = DummySession(DummyResponse(body={"software": {"name": "LanguageTool"}}))
    assert _client(session).check("x") == []


@pytest.mark.parametrize("status", [426, 429])
def test_rate_limit_statuses(status: int) -> None:
    session = DummySession(DummyResponse(status_code=status, text="Too many requests"))
    with pytest.raises(ProviderRateLimitError):
        _client(session).check("x")


def test_invalid_json_raises_response_error() -> None:
    session = DummySession(DummyResponse(text="<html>oops</html>"))
    with pytest.raises(ProviderResponseError) as excinfo:
        _client(session).check("x")
    assert "oops" in str(excinfo.value)


def test_client_error_status_raises_response_error() -> None:
    session = DummySession(DummyResponse(status_code=400, text="Missing language"))
    with pytest.raises(ProviderResponseError) as excinfo:
        _client(session).check("x")
    assert excinfo.value.status_code == 400


def test_server_error_is_transient() -> None:
    session = DummySession(DummyResponse(status_code=503, text="busy"))
    with pytest.raises(ProviderConnectionError):
        _client(session).check("x")


def test_connection_failure_is_transient() -> None:
    session = DummySession(requests.ConnectionError("reset by peer"))
    with pytest.raises(ProviderConnectionError):
        _client(session).check("x")


def test_close_closes_session() -> None:
    session = DummySession(DummyResponse(body={"matches": []}))
    _client(session).close()
    assert session.closed


def test_retry_recovers_from_transient_errors(monkeypatch) -> None:
    delays: list[float] = []
    monkeypatch.setattr("grammar_overlay.provider.retry.time.sleep", delays.append)
    attempts = {"count": 0}

    def flaky(text: str) -> list:
        attempts["count"] += 1
        if attempts["count"] < 3:
            raise ProviderConnectionError("reset")
        return [text]

    assert retry_with_backoff(flaky, "x", max_retries=3, base_delay=1.0) == ["x"]
    assert attempts["count"] == 3
    assert len(delays) == 2
    assert all(0 < delay <= 30.0 for delay in delays)


def test_retry_gives_up_after_max_retries(monkeypatch) -> None:
    monkeypatch.setattr("grammar_overlay.provider.retry.time.sleep", lambda _s: None)
    calls = {"count": 0}

    def always_down(text: str) -> list:
        calls["count"] += 1
        raise ProviderConnectionError("down")

    with pytest.raises(ProviderConnectionError):
        retry_with_backoff(always_down, "x", max_retries=2)
    assert calls["count"] == 3


def test_retry_does_not_repeat_permanent_errors(monkeypatch) -> None:
    monkeypatch.setattr("grammar_overlay.provider.retry.time.sleep", lambda _s: None)
    calls = {"count": 0}

    def rate_limited(text: str) -> list:
        calls["count"] += 1
        raise ProviderRateLimitError("quota")

    with pytest.raises(ProviderRateLimitError):
        retry_with_backoff(rate_limited, "x", max_retries=5)
    assert calls["count"] == 1


def test_backoff_delay_doubles_and_is_capped(monkeypatch) -> None:
    monkeypatch.setattr("grammar_overlay.provider.retry.random.uniform", lambda _a, _b: 1.0)

    assert [backoff_delay(attempt, 0.5, 3.0) for attempt in range(5)] == [
        0.5,
        1.0,
        2.0,
        3.0,
        3.0,
    ]
