"""Unit tests for the request timing middleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tatvivah.server.middleware import request_logging
from tatvivah.server.middleware.request_logging import RequestLoggingMiddleware


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/fail")
    async def fail():
        raise RuntimeError("kaput")

    return app


class TestRequestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_sets_process_time_header(self, app: FastAPI):
        with patch.object(request_logging, "log_api_request") as mock_log:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
                response = await client.get("/ping")

        assert response.status_code == 200
        assert float(response.headers["x-process-time"]) >= 0
        kwargs = mock_log.call_args.kwargs
        assert (kwargs["method"], kwargs["path"], kwargs["status_code"]) == ("GET", "/ping", 200)

    @pytest.mark.asyncio
    async def test_slow_request_warns(self, app: FastAPI, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(request_logging, "SLOW_REQUEST_MS", -1)
        with patch.object(request_logging, "logger") as mock_logger:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
                await client.get("/ping")

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_failure_is_reported_as_500(self, app: FastAPI):
        with patch.object(request_logging, "log_api_request") as mock_log, patch.object(request_logging, "logger"):
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://localhost") as client:
                response = await client.get("/fail")

        assert response.status_code == 500
        assert mock_log.call_args.kwargs["status_code"] == 500
