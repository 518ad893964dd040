"""Summary: Tests for the welcome-email client.

Importance: Ensures onboarding requests are shaped correctly and failures are reported.
Alternatives: Test against the live email function.
"""

from __future__ import annotations

import io
import json
import urllib.error
from typing import Any

import pytest

from growthpro import welcome
from growthpro.welcome import WelcomeEmailClient


class _FakeResponse:
    def __init__(self, payload: dict[str, Any]) -> None:
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def test_unconfigured_endpoint_reports_failure() -> None:
    """Summary: Verify a missing endpoint returns an unsuccessful result.

    Importance: Local setups without email still work.
    Alternatives: Raise a configuration error.
    """

    result = WelcomeEmailClient(url="").send("carl@example.com", "Carl Client")
    assert not result.success
    assert result.error == "Welcome email endpoint is not configured"


def test_send_posts_payload_with_bearer_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify the request body and headers sent to the function.

    Importance: The function expects camelCase fields and an authorization header.
    Alternatives: Send form-encoded data.
    """

    captured: dict[str, Any] = {}

    def fake_urlopen(request: Any, timeout: int) -> _FakeResponse:
        captured["url"] = request.full_url
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["auth"] = request.get_header("Authorization")
        captured["timeout"] = timeout
        return _FakeResponse({"success": True, "messageId": "email-1"})

    monkeypatch.setattr(welcome.urllib.request, "urlopen", fake_urlopen)
    client = WelcomeEmailClient(url="https://functions.example.com/welcome", api_key="key-1")
    result = client.send("carl@example.com", "Carl Client", "temp-pass", {"plan": "pro"})
    assert result.success
    assert result.message_id == "email-1"
    assert captured["url"] == "https://functions.example.com/welcome"
    assert captured["body"] == {
        "email": "carl@example.com",
        "fullName": "Carl Client",
        "password": "temp-pass",
        "additionalData": {"plan": "pro"},
    }
    assert captured["auth"] == "Bearer key-1"
    assert captured["timeout"] == 10


def test_http_error_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure HTTP failures become unsuccessful results with the function's error.

    Importance: Staff see why the email was not sent.
    Alternatives: Propagate the HTTPError.
    """

    def failing_urlopen(request: Any, timeout: int) -> _FakeResponse:
        raise urllib.error.HTTPError(
            request.full_url,
            500,
            "Server Error",
            {},
            io.BytesIO(b'{"success": false, "error": "Resend rejected the sender"}'),
        )

    monkeypatch.setattr(welcome.urllib.request, "urlopen", failing_urlopen)
    result = WelcomeEmailClient(url="https://functions.example.com/welcome").send(
        "carl@example.com", "Carl Client"
    )
    assert not result.success
    assert result.error == "Resend rejected the sender"


def test_unreachable_endpoint_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify network failures become unsuccessful results.

    Importance: Onboarding should not crash when the function is down.
    Alternatives: Retry indefinitely.
    """

    def unreachable(request: Any, timeout: int) -> _FakeResponse:
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(welcome.urllib.request, "urlopen", unreachable)
    result = WelcomeEmailClient(url="https://functions.example.com/welcome").send(
        "carl@example.com", "Carl Client"
    )
    assert not result.success
    assert result.error == "connection refused"
