"""Summary: Client for the hosted welcome-email function.

Importance: Sends onboarding credentials to new clients through the outbound email endpoint.
Alternatives: Talk to an SMTP server directly.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WelcomeEmailResult:
    """Outcome reported by the welcome-email function."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class WelcomeEmailClient:
    """Summary: Posts welcome-email requests to the function endpoint.

    Importance: Keeps the payload shape in one place for onboarding flows.
    Alternatives: Use a provider SDK such as Resend's.
    """

    url: str
    api_key: str = ""
    timeout: int = 10

    def send(
        self,
        email: str,
        full_name: str,
        password: str | None = None,
        additional_data: dict[str, Any] | None = None,
    ) -> WelcomeEmailResult:
        """Summary: Request a welcome email and return the function's result.

        Importance: Transport failures are reported as an unsuccessful result.
        Alternatives: Raise on any non-2xx response.
        """

        if not self.url:
            return WelcomeEmailResult(success=False, error="Welcome email endpoint is not configured")
        payload = {
            "email": email,
            "fullName": full_name,
            "password": password,
            "additionalData": additional_data or {},
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        request = urllib.request.Request(
            self.url,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            error_body = exc.read().decode("utf-8")
            logger.error("Welcome email request failed for %s: %s", email, exc.reason)
            return WelcomeEmailResult(success=False, error=_error_text(error_body) or str(exc.reason))
        except urllib.error.URLError as exc:
            logger.error("Welcome email endpoint unreachable: %s", exc.reason)
            return WelcomeEmailResult(success=False, error=str(exc.reason))
        result = WelcomeEmailResult(
            success=bool(raw.get("success")),
            message_id=raw.get("messageId"),
            error=raw.get("error"),
        )
        logger.info("Welcome email for %s: success=%s.", email, result.success)
        return result


def _error_text(body: str) -> str | None:
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if isinstance(parsed, dict):
        return parsed.get("error") or body
    return body
