"""
Review Service.
"""

from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.database.entities.reviews import Review
from tatvivah.core.database.entities.users import Role
from tatvivah.core.database.repositories import ProductRepository, ReviewRepository, UserRepository
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.models.io import ReviewCreate

logger = get_logger(__name__)


def _review(r: Review) -> Dict[str, Any]:
    return {
        "id": r.id,
        "productId": r.product_id,
        "rating": r.rating,
        "text": r.text,
        "images": list(r.images or []),
        "createdAt": r.created_at,
    }


class ReviewService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.reviews = ReviewRepository(session)
        self.products = ProductRepository(session)
        self.users = UserRepository(session)

    async def create_review(self, user_id: str, role: str, product_id: str, data: ReviewCreate) -> Dict[str, Any]:
        if role != Role.USER.value:
            raise ApiError.forbidden("Only users can submit reviews")
        if await self.products.get_by_id(product_id) is None:
            raise ApiError.not_found("Product not found")

        review = await self.reviews.create(
            Review(product_id=product_id, user_id=user_id, rating=data.rating, text=data.text, images=data.images)
        )
        await self.session.commit()
        logger.info(f"Review {review.id} submitted for product {product_id}")
        return {"message": "Review submitted successfully", "review": _review(review)}

    async def get_product_reviews(self, product_id: str) -> Dict[str, Any]:
        reviews = await self.reviews.list_by_product(product_id)
        users = await self.users.get_by_ids([r.user_id for r in reviews])
        result: List[Dict[str, Any]] = []
        for r in reviews:
            user = users.get(r.user_id)
            data = _review(r)
            data["user"] = {"id": r.user_id, "fullName": (user.full_name if user else None) or "Anonymous"}
            result.append(data)
        return {"reviews": result}

    async def list_reviews(self) -> Dict[str, Any]:
        reviews = await self.reviews.list()
        products = await self.products.get_by_ids([r.product_id for r in reviews])
        users = await self.users.get_by_ids([r.user_id for r in reviews])
        result: List[Dict[str, Any]] = []
        for r in reviews:
            product = products.get(r.product_id)
            user = users.get(r.user_id)
            data = _review(r)
            data["product"] = {"id": r.product_id, "title": product.title if product else None}
            data["user"] = {
                "id": r.user_id,
                "email": user.email if user else None,
                "fullName": user.full_name if user else None,
            }
            result.append(data)
        return {"reviews": result}

    async def delete_review(self, review_id: str) -> Dict[str, str]:
        if not await self.reviews.delete(review_id):
            raise ApiError.not_found("Review not found")
        await self.session.commit()
        return {"message": "Review deleted successfully"}
