from typing import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def notify(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace notification creation so API flows never schedule deliveries."""
    from tatvivah.notifications import notification_service

    mock = AsyncMock(return_value=None)
    monkeypatch.setattr(notification_service, "create", mock)
    return mock


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, notify: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from tatvivah.core.database import get_session
    from tatvivah.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent engine disposal during tests
    async def mock_lifespan(app):
        yield

    with patch("tatvivah.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def place_order(client: AsyncClient, factory, auth):
    """Check out one line per ``(seller, price, quantity)`` and return the order payload."""

    async def _place(buyer, lines):
        for seller, price, quantity in lines:
            product, variant = await factory.product(seller, price=price, stock=10)
            await client.post(
                "/v1/cart/items",
                json={"productId": product.id, "variantId": variant.id, "quantity": quantity},
                headers=auth(buyer),
            )
        response = await client.post("/v1/checkout", headers=auth(buyer))
        assert response.status_code == 201, response.text
        return response.json()["order"]

    return _place


@pytest.fixture
def pay_order(client: AsyncClient, auth):
    """Pay an order through the mock provider and return the payment id."""

    async def _pay(buyer, order_id, status="SUCCESS"):
        initiated = await client.post(
            "/v1/payments/initiate", json={"orderId": order_id, "provider": "MOCK"}, headers=auth(buyer)
        )
        payment_id = initiated.json()["data"]["paymentId"]
        await client.post("/v1/payments/webhook/mock", json={"paymentId": payment_id, "status": status})
        return payment_id

    return _pay
