"""Razorpay gateway client.

Thin async HTTP client for the parts of the Razorpay REST API the checkout
flow needs:
- create_order

Signature helpers verify the HMAC-SHA256 signatures Razorpay attaches to
client-side payment confirmations and to webhooks.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Dict, Optional

import httpx

from tatvivah.core.logging_config import get_logger
from tatvivah.server.core.config import RazorpayConfig, settings

logger = get_logger(__name__)


class RazorpayError(Exception):
    """Raised when the gateway is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def _hmac_sha256(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(secret: Optional[str], message: str, signature: Optional[str]) -> bool:
    """Constant-time check of a hex HMAC-SHA256 ``signature`` over ``message``."""
    if not secret:
        logger.error("Razorpay secret not configured; rejecting signature")
        return False
    if not signature:
        return False
    return hmac.compare_digest(_hmac_sha256(secret, message), signature)


class RazorpayClient:
    """Create Razorpay orders over HTTP basic auth.

    Args:
        config: Razorpay settings; defaults to the application settings.
        client: Optional preconfigured ``httpx.AsyncClient`` (used by tests).
        timeout: HTTP timeout for the internal client.
    """

    def __init__(
        self,
        config: Optional[RazorpayConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.config = config or settings.razorpay
        self._client = client
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return self.config.configured

    @property
    def key_id(self) -> str:
        return self.config.key_id or ""

    async def create_order(
        self, amount: float, receipt: str, currency: str = "INR", notes: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Create a gateway order for ``amount`` rupees; returns the Razorpay order object."""
        body = {
            "amount": int(round(amount * 100)),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        url = f"{self.config.api_url.rstrip('/')}/orders"
        auth = (self.config.key_id or "", self.config.key_secret or "")
        try:
            logger.debug(f"RazorpayClient.create_order: POST {url} receipt={receipt}")
            if self._client is not None:
                response = await self._client.post(url, json=body, auth=auth)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body, auth=auth)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RazorpayError(
                f"Razorpay create_order failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise RazorpayError(f"Razorpay request failed: {e}") from e

        data = response.json()
        if not isinstance(data, dict) or not data.get("id"):
            raise RazorpayError("Unexpected response shape from create_order", details=data)
        logger.debug(f"RazorpayClient.create_order: created {data['id']}")
        return data

    def verify_payment_signature(self, razorpay_order_id: str, razorpay_payment_id: str, signature: str) -> bool:
        return verify_signature(self.config.key_secret, f"{razorpay_order_id}|{razorpay_payment_id}", signature)

    def verify_webhook_signature(self, raw_body: str, signature: str) -> bool:
        return verify_signature(self.config.webhook_secret, raw_body, signature)
