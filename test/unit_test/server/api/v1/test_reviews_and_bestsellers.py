import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestReviews:
    async def test_submit_and_list(self, client: AsyncClient, factory, auth):
        buyer = await factory.buyer(full_name="Meera Iyer")
        anonymous = await factory.buyer(full_name=None)
        seller = await factory.seller()
        product, _ = await factory.product(seller)

        created = await client.post(
            f"/v1/reviews/product/{product.id}",
            json={"rating": 5, "text": "Beautiful weave", "images": ["https://cdn.example.com/r/1.jpg"]},
            headers=auth(buyer),
        )
        assert created.status_code == 201
        review = created.json()["review"]
        assert review["rating"] == 5
        assert review["images"] == ["https://cdn.example.com/r/1.jpg"]

        await client.post(
            f"/v1/reviews/product/{product.id}", json={"rating": 3, "text": "Okay"}, headers=auth(anonymous)
        )

        listing = (await client.get(f"/v1/reviews/product/{product.id}")).json()["reviews"]
        assert sorted(r["user"]["fullName"] for r in listing) == ["Anonymous", "Meera Iyer"]

    async def test_only_buyers_review(self, client: AsyncClient, factory, auth):
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        response = await client.post(
            f"/v1/reviews/product/{product.id}", json={"rating": 4, "text": "Mine"}, headers=auth(seller)
        )
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Only users can submit reviews"

    async def test_rating_bounds(self, client: AsyncClient, factory, auth):
        buyer = await factory.buyer()
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        response = await client.post(
            f"/v1/reviews/product/{product.id}", json={"rating": 6, "text": "Too good"}, headers=auth(buyer)
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"].startswith("rating:")

    async def test_too_many_images(self, client: AsyncClient, factory, auth):
        buyer = await factory.buyer()
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        images = [f"https://cdn.example.com/r/{i}.jpg" for i in range(4)]
        response = await client.post(
            f"/v1/reviews/product/{product.id}", json={"rating": 4, "text": "Pics", "images": images}, headers=auth(buyer)
        )
        assert response.status_code == 400

    async def test_unknown_product(self, client: AsyncClient, factory, auth):
        buyer = await factory.buyer()
        response = await client.post("/v1/reviews/product/nope", json={"rating": 4, "text": "?"}, headers=auth(buyer))
        assert response.status_code == 404

    async def test_admin_list_and_delete(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        buyer = await factory.buyer()
        seller = await factory.seller()
        product, _ = await factory.product(seller, title="Kanjivaram")
        review_id = (
            await client.post(
                f"/v1/reviews/product/{product.id}", json={"rating": 4, "text": "Nice"}, headers=auth(buyer)
            )
        ).json()["review"]["id"]

        listing = (await client.get("/v1/admin/reviews", headers=auth(admin))).json()["reviews"]
        assert listing[0]["product"]["title"] == "Kanjivaram"
        assert listing[0]["user"]["email"] == buyer.email

        deleted = await client.delete(f"/v1/admin/reviews/{review_id}", headers=auth(admin))
        assert deleted.json() == {"message": "Review deleted successfully"}
        missing = await client.delete(f"/v1/admin/reviews/{review_id}", headers=auth(admin))
        assert missing.status_code == 404


class TestBestsellers:
    async def test_shelf_order_and_visibility(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        seller = await factory.seller()
        category = await factory.category(name="Sarees")
        first, _ = await factory.product(seller, category=category, title="First", price=900.0)
        second, _ = await factory.product(seller, category=category, title="Second", price=1500.0)
        hidden, _ = await factory.product(seller, title="Hidden", is_published=False)

        await client.post("/v1/admin/bestsellers", json={"productId": second.id, "position": 2}, headers=auth(admin))
        await client.post("/v1/admin/bestsellers", json={"productId": first.id, "position": 1}, headers=auth(admin))
        await client.post("/v1/admin/bestsellers", json={"productId": hidden.id}, headers=auth(admin))

        shelf = (await client.get("/v1/bestsellers")).json()["products"]
        assert [p["title"] for p in shelf] == ["First", "Second"]
        assert shelf[0]["categoryName"] == "Sarees"
        assert shelf[0]["minPrice"] == 900.0
        assert shelf[0]["image"] is None

        admin_view = (await client.get("/v1/admin/bestsellers", headers=auth(admin))).json()["bestsellers"]
        assert [(e["title"], e["position"]) for e in admin_view] == [("First", 1), ("Second", 2), ("Hidden", 3)]
        assert admin_view[2]["isPublished"] is False
        assert {e["sellerEmail"] for e in admin_view} == {seller.email}

    async def test_shelf_limit(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        seller = await factory.seller()
        for i in range(4):
            product, _ = await factory.product(seller, title=f"P{i}")
            await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))
        extra, _ = await factory.product(seller)

        response = await client.post("/v1/admin/bestsellers", json={"productId": extra.id}, headers=auth(admin))
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Only 4 products can be marked as bestsellers"

    async def test_duplicate_and_missing(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))

        duplicate = await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))
        assert duplicate.status_code == 409
        missing = await client.post("/v1/admin/bestsellers", json={"productId": "nope"}, headers=auth(admin))
        assert missing.status_code == 404

    async def test_move_and_remove(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        entry = (
            await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))
        ).json()["bestseller"]
        assert entry["position"] == 1

        moved = await client.put(f"/v1/admin/bestsellers/{entry['id']}", json={"position": 7}, headers=auth(admin))
        assert moved.json()["bestseller"]["position"] == 7

        removed = await client.delete(f"/v1/admin/bestsellers/{entry['id']}", headers=auth(admin))
        assert removed.json() == {"message": "Bestseller removed"}
        assert (await client.get("/v1/bestsellers")).json()["products"] == []

    async def test_admin_delete_drops_product_from_shelf(self, client: AsyncClient, factory, auth):
        admin = await factory.admin()
        seller = await factory.seller()
        product, _ = await factory.product(seller)
        await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))

        await client.request("DELETE", f"/v1/admin/products/{product.id}", headers=auth(admin))

        assert (await client.get("/v1/admin/bestsellers", headers=auth(admin))).json()["bestsellers"] == []
        again = await client.post("/v1/admin/bestsellers", json={"productId": product.id}, headers=auth(admin))
        assert again.json()["error"]["message"] == "Product deleted by admin"
