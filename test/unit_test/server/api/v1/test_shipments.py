import pytest
from httpx import AsyncClient
from sqlmodel import select

from tatvivah.core.database.entities.audit_logs import AuditLog
from tatvivah.core.database.entities.notifications import NotificationType

pytestmark = pytest.mark.asyncio

SHIPMENT = {"carrier": "BlueDart", "trackingNumber": "BD-12345"}


async def _create(client: AsyncClient, headers, order_id, body=None):
    return await client.post(f"/v1/seller/shipments/{order_id}/create", json=body or SHIPMENT, headers=headers)


async def _order_status(client: AsyncClient, headers, order_id):
    return (await client.get(f"/v1/orders/{order_id}", headers=headers)).json()["order"]["status"]


def _notified(notify, kind):
    return [c for c in notify.await_args_list if c.kwargs.get("type") == kind]


class TestSellerShipments:
    async def test_full_lifecycle_single_seller(
        self, client: AsyncClient, factory, auth, notify, place_order, pay_order
    ):
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])

        created = await _create(client, auth(seller), order["id"])
        assert created.status_code == 201
        shipment = created.json()["data"]
        assert shipment["status"] == "CREATED"
        assert [e["note"] for e in shipment["events"]] == ["Shipment created"]

        shipped = await client.put(f"/v1/seller/shipments/{shipment['id']}/ship", headers=auth(seller))
        assert shipped.status_code == 200
        assert shipped.json()["data"]["shippedAt"] is not None
        assert await _order_status(client, auth(buyer), order["id"]) == "SHIPPED"
        assert len(_notified(notify, NotificationType.ORDER_SHIPPED)) == 1

        delivered = await client.put(
            f"/v1/seller/shipments/{shipment['id']}/deliver", json={"note": "Left with family"}, headers=auth(seller)
        )
        assert delivered.status_code == 200
        assert delivered.json()["data"]["events"][0]["note"] == "Left with family"
        assert await _order_status(client, auth(buyer), order["id"]) == "DELIVERED"
        assert len(_notified(notify, NotificationType.ORDER_DELIVERED)) == 1

    async def test_order_waits_for_every_seller(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller_a = await factory.seller()
        seller_b = await factory.seller()
        order = await place_order(buyer, [(seller_a, 900.0, 1), (seller_b, 400.0, 1)])
        await pay_order(buyer, order["id"])

        first = (await _create(client, auth(seller_a), order["id"])).json()["data"]
        await client.put(f"/v1/seller/shipments/{first['id']}/ship", headers=auth(seller_a))
        assert await _order_status(client, auth(buyer), order["id"]) == "CONFIRMED"

        second = (await _create(client, auth(seller_b), order["id"], {"carrier": "DTDC", "trackingNumber": "D1"})).json()[
            "data"
        ]
        await client.put(f"/v1/seller/shipments/{second['id']}/ship", headers=auth(seller_b))
        assert await _order_status(client, auth(buyer), order["id"]) == "SHIPPED"

    async def test_unpaid_order_cannot_ship(self, client: AsyncClient, factory, auth, place_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])

        response = await _create(client, auth(seller), order["id"])
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Cannot ship order with status PLACED. Order must be CONFIRMED."

    async def test_seller_without_items_cannot_ship(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        outsider = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])

        response = await _create(client, auth(outsider), order["id"])
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "You do not have any items in this order to ship"

    async def test_duplicate_shipment(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        await _create(client, auth(seller), order["id"])

        response = await _create(client, auth(seller), order["id"])
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Shipment already exists for this order"

    async def test_tracking_number_format(self, client: AsyncClient, factory, auth):
        seller = await factory.seller()
        response = await _create(client, auth(seller), "any", {"carrier": "X", "trackingNumber": "bad number!"})
        assert response.status_code == 400

    async def test_transition_rules(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        other = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        shipment_id = (await _create(client, auth(seller), order["id"])).json()["data"]["id"]

        early = await client.put(f"/v1/seller/shipments/{shipment_id}/deliver", headers=auth(seller))
        assert early.json()["error"]["message"] == "Shipment can only be marked DELIVERED from SHIPPED state"

        foreign = await client.put(f"/v1/seller/shipments/{shipment_id}/ship", headers=auth(other))
        assert foreign.status_code == 403
        assert foreign.json()["error"]["message"] == "Unauthorized to update this shipment"

        await client.put(f"/v1/seller/shipments/{shipment_id}/ship", headers=auth(seller))
        again = await client.put(f"/v1/seller/shipments/{shipment_id}/ship", headers=auth(seller))
        assert again.json()["error"]["message"] == "Shipment can only be marked SHIPPED from CREATED state"

        await client.put(f"/v1/seller/shipments/{shipment_id}/deliver", headers=auth(seller))
        done = await client.put(f"/v1/seller/shipments/{shipment_id}/deliver", headers=auth(seller))
        assert done.status_code == 400
        assert done.json()["error"]["message"] == "Cannot update delivered shipment"

    async def test_list_my_shipments(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        await _create(client, auth(seller), order["id"])

        response = await client.get("/v1/seller/shipments", headers=auth(seller))
        shipments = response.json()["data"]["shipments"]
        assert len(shipments) == 1
        assert shipments[0]["order"]["id"] == order["id"]

    async def test_buyer_cannot_create_shipments(self, client: AsyncClient, factory, auth):
        buyer = await factory.buyer()
        response = await _create(client, auth(buyer), "any")
        assert response.status_code == 403


class TestTracking:
    async def test_tracking_lists_events(self, client: AsyncClient, factory, auth, place_order, pay_order):
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        shipment_id = (await _create(client, auth(seller), order["id"])).json()["data"]["id"]
        await client.put(f"/v1/seller/shipments/{shipment_id}/ship", headers=auth(seller))

        response = await client.get(f"/v1/orders/{order['id']}/tracking", headers=auth(buyer))
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "SHIPPED"
        assert data["shipments"][0]["trackingNumber"] == "BD-12345"
        assert sorted(e["status"] for e in data["shipments"][0]["events"]) == ["CREATED", "SHIPPED"]

    async def test_tracking_of_foreign_order(self, client: AsyncClient, factory, auth, place_order):
        buyer = await factory.buyer()
        other = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])

        response = await client.get(f"/v1/orders/{order['id']}/tracking", headers=auth(other))
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Unauthorized to view tracking for this order"


class TestAdminOverride:
    async def test_override_skips_transition_checks(
        self, client: AsyncClient, factory, auth, session, place_order, pay_order
    ):
        buyer = await factory.buyer()
        seller = await factory.seller()
        admin = await factory.admin()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        shipment_id = (await _create(client, auth(seller), order["id"])).json()["data"]["id"]

        response = await client.put(
            f"/v1/admin/shipments/{shipment_id}/override-status",
            json={"status": "DELIVERED", "note": "Courier confirmed by phone"},
            headers=auth(admin),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "DELIVERED"
        assert data["events"][0]["note"] == "Admin Override: Courier confirmed by phone"
        assert await _order_status(client, auth(buyer), order["id"]) == "DELIVERED"

        logs = (await session.execute(select(AuditLog))).scalars().all()
        assert [log.action for log in logs] == ["SHIPMENT_STATUS_OVERRIDE"]
        assert logs[0].entity_id == order["id"]

    async def test_override_requires_admin(self, client: AsyncClient, factory, auth):
        seller = await factory.seller()
        response = await client.put(
            "/v1/admin/shipments/x/override-status", json={"status": "SHIPPED", "note": "n"}, headers=auth(seller)
        )
        assert response.status_code == 403

    async def test_override_rejects_unknown_status(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        response = await client.put(
            "/v1/admin/shipments/x/override-status", json={"status": "CREATED", "note": "n"}, headers=auth(admin)
        )
        assert response.status_code == 400


class TestCancelledOrders:
    async def _cancelled_with_shipment(self, client: AsyncClient, factory, auth, place_order, pay_order):
        admin = await factory.admin()
        buyer = await factory.buyer()
        seller = await factory.seller()
        order = await place_order(buyer, [(seller, 900.0, 1)])
        await pay_order(buyer, order["id"])
        shipment_id = (await _create(client, auth(seller), order["id"])).json()["data"]["id"]
        await client.put(f"/v1/admin/orders/{order['id']}/cancel", headers=auth(admin))
        return admin, buyer, seller, order, shipment_id

    async def test_seller_cannot_ship_cancelled_order(
        self, client: AsyncClient, factory, auth, place_order, pay_order
    ):
        _, buyer, seller, order, shipment_id = await self._cancelled_with_shipment(
            client, factory, auth, place_order, pay_order
        )

        response = await client.put(f"/v1/seller/shipments/{shipment_id}/ship", headers=auth(seller))
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Cannot update shipment of a cancelled order"
        assert await _order_status(client, auth(buyer), order["id"]) == "CANCELLED"

    async def test_override_does_not_revive_cancelled_order(
        self, client: AsyncClient, factory, auth, place_order, pay_order
    ):
        admin, buyer, _, order, shipment_id = await self._cancelled_with_shipment(
            client, factory, auth, place_order, pay_order
        )

        response = await client.put(
            f"/v1/admin/shipments/{shipment_id}/override-status",
            json={"status": "DELIVERED", "note": "Returned parcel logged"},
            headers=auth(admin),
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "DELIVERED"
        assert await _order_status(client, auth(buyer), order["id"]) == "CANCELLED"
