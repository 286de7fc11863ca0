"""
Storefront Product Endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Query

from tatvivah.server.services.deps import SessionDep
from tatvivah.server.services.products import ProductService

router = APIRouter()


@router.get(
    "",
    summary="List Products",
    description="Paginated list of published products, optionally filtered by category and a text search.",
)
async def list_products(
    session: SessionDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    search: Optional[str] = Query(default=None, max_length=100),
):
    return await ProductService(session).list_products(page, limit, category_id, search)


@router.get(
    "/{product_id}",
    summary="Get Product",
    description="A published product with its category and variants, including stock.",
    responses={404: {"description": "Product not found"}},
)
async def get_product(product_id: str, session: SessionDep):
    return await ProductService(session).get_product_by_id(product_id)
