"""
Review Endpoints.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import ReviewCreate
from tatvivah.server.services.deps import AdminUser, CurrentUser, SessionDep
from tatvivah.server.services.reviews import ReviewService

router = APIRouter()
admin_router = APIRouter()


@router.post(
    "/product/{product_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Submit Review",
    responses={403: {"description": "Only users can submit reviews"}, 404: {"description": "Product not found"}},
)
async def create_review(product_id: str, body: ReviewCreate, user: CurrentUser, session: SessionDep):
    return await ReviewService(session).create_review(user.id, user.role.value, product_id, body)


@router.get("/product/{product_id}", summary="List Product Reviews")
async def list_product_reviews(product_id: str, session: SessionDep):
    return await ReviewService(session).get_product_reviews(product_id)


@admin_router.get("", summary="List All Reviews")
async def list_reviews(admin: AdminUser, session: SessionDep):
    return await ReviewService(session).list_reviews()


@admin_router.delete("/{review_id}", summary="Delete Review", responses={404: {"description": "Review not found"}})
async def delete_review(review_id: str, admin: AdminUser, session: SessionDep):
    return await ReviewService(session).delete_review(review_id)
