"""Transactional email client for the Resend REST API.

Overview
--------
Thin async HTTP client around ``POST /emails``. The client returns the
provider message id of the accepted email. It does not render templates;
see ``tatvivah.notifications.templates``.

Mock mode
---------
When ``MOCK_EMAIL`` is set, when running under ``APP_ENV=test``, or when no
API key is configured, nothing is sent: the email is logged and a
``mock_<timestamp>`` id is returned.

Errors
------
Transport failures and non-2xx responses are raised as ``EmailDeliveryError``
so the notification dispatcher can retry.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx

from tatvivah.core.logging_config import get_logger
from tatvivah.server.core.config import EmailConfig, settings

logger = get_logger(__name__)

PROVIDER_NAME = "RESEND"


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects or fails a send."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmailClient:
    """Send HTML email through Resend.

    Args:
        config: Email settings; defaults to the application settings.
        client: Optional preconfigured ``httpx.AsyncClient`` (used by tests).
        timeout: HTTP timeout for the internal client.
    """

    def __init__(
        self,
        config: Optional[EmailConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.config = config or settings.email
        self._client = client
        self._timeout = timeout

    @property
    def mocked(self) -> bool:
        return self.config.mock or settings.environment == "test" or not self.config.api_key

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    async def send(self, to: str, subject: str, html: str) -> str:
        """Send one email and return the provider message id."""
        if self.mocked:
            logger.info(f"[MOCK EMAIL] To: {to}, Subject: {subject}")
            return f"mock_{int(time.time() * 1000)}"

        body = {"from": self.config.sender, "to": [to], "subject": subject, "html": html}
        try:
            if self._client is not None:
                response = await self._client.post(self.config.api_url, json=body, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.config.api_url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Email send to {to} failed: {e}")
            raise EmailDeliveryError(f"Resend request failed: {e}") from e

        if response.status_code >= 400:
            raise EmailDeliveryError(f"Resend Error: {response.text}", status_code=response.status_code)

        message_id = response.json().get("id")
        if not message_id:
            raise EmailDeliveryError("Resend response did not include a message id", status_code=response.status_code)
        return message_id
