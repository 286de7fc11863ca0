"""Unit tests for the Logfire monitoring module."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from tatvivah.core import monitoring


@pytest.fixture
def enabled(monkeypatch):
    monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
    monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "test-token")
    monkeypatch.setattr(monitoring, "_logfire_active", False)


@pytest.fixture
def active(monkeypatch):
    monkeypatch.setattr(monitoring, "_logfire_active", True)


class TestInitializeLogfire:
    def test_disabled_does_nothing(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)
        with patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_without_token_stays_off(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "")
        with patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_configures_and_instruments(self, enabled, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", True)
        app = FastAPI()
        with patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire(app) is True

            mock_logfire.configure.assert_called_once()
            assert mock_logfire.configure.call_args.kwargs["token"] == "test-token"
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_httpx.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)
        assert monitoring._logfire_active is True

    def test_tracing_flags_are_respected(self, enabled, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", False)
        with patch.object(monitoring, "logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is True

            mock_logfire.instrument_sqlalchemy.assert_not_called()
            mock_logfire.instrument_httpx.assert_not_called()
            mock_logfire.instrument_fastapi.assert_not_called()

    def test_configure_failure_is_reported_not_raised(self, enabled):
        with patch.object(monitoring, "logfire") as mock_logfire:
            mock_logfire.configure.side_effect = RuntimeError("bad token")

            assert monitoring.initialize_logfire() is False
        assert monitoring._logfire_active is False


class TestLogApiRequest:
    def test_noop_when_inactive(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_active", False)
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_api_request("GET", "/v1/products", 200, 12.5)
            mock_logfire.info.assert_not_called()

    def test_sends_request_metrics(self, active):
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_api_request("POST", "/v1/checkout", 201, 40.0)

            mock_logfire.info.assert_called_once_with(
                "API request completed",
                method="POST",
                path="/v1/checkout",
                status_code=201,
                duration_ms=40.0,
            )

    def test_logfire_errors_are_swallowed(self, active):
        with patch.object(monitoring, "logfire") as mock_logfire:
            mock_logfire.info.side_effect = RuntimeError("exporter down")

            monitoring.log_api_request("GET", "/health", 200, 1.0)


class TestLogBusinessEvent:
    def test_noop_when_inactive(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_active", False)
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_business_event("order.placed", {"orderId": "o1"})
            mock_logfire.info.assert_not_called()

    def test_forwards_context(self, active):
        with patch.object(monitoring, "logfire") as mock_logfire:
            monitoring.log_business_event("payment.confirmed", {"orderId": "o1", "amount": 500.0})

            mock_logfire.info.assert_called_once_with("payment.confirmed", orderId="o1", amount=500.0)

    def test_without_context(self, active):
        logfire_mock = MagicMock()
        with patch.object(monitoring, "logfire", logfire_mock):
            monitoring.log_business_event("seller.approved")

        logfire_mock.info.assert_called_once_with("seller.approved")
