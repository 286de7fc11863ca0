from __future__ import annotations

import os
from typing import Iterable

import httpx
import pytest

# The application reads its settings at import time, so the test environment
# must be in place before anything under ``tatvivah`` is imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["REDIS_URL"] = ""
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef0123")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef012")
os.environ.setdefault("MOCK_EMAIL", "true")
os.environ.setdefault("LOGFIRE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(client, url_str: str) -> bool:
        # Clients built on a MockTransport never reach the network
        if isinstance(getattr(client, "_transport", None), httpx.MockTransport):
            return True
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(self, url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(self, url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
