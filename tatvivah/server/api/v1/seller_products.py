"""
Seller Catalog Endpoints.

Sellers manage their own products, variants, and stock. New products wait
for admin moderation before they can be published.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import ProductCreate, ProductUpdate, StockUpdate, VariantCreate, VariantUpdate
from tatvivah.server.services.deps import SellerUser, SessionDep
from tatvivah.server.services.products import ProductService

router = APIRouter()

_OWNERSHIP = {403: {"description": "Not the owner"}, 404: {"description": "Not found"}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    responses={400: {"description": "Invalid category ID"}},
)
async def create_product(body: ProductCreate, seller: SellerUser, session: SessionDep):
    return await ProductService(session).create_product(seller.id, body)


@router.get("", summary="List My Products")
async def list_my_products(seller: SellerUser, session: SessionDep):
    return await ProductService(session).list_seller_products(seller.id)


@router.put("/variants/{variant_id}", summary="Update Variant", responses=_OWNERSHIP)
async def update_variant(variant_id: str, body: VariantUpdate, seller: SellerUser, session: SessionDep):
    return await ProductService(session).update_variant(variant_id, seller.id, body)


@router.put("/variants/{variant_id}/stock", summary="Update Stock", responses=_OWNERSHIP)
async def update_stock(variant_id: str, body: StockUpdate, seller: SellerUser, session: SessionDep):
    return await ProductService(session).update_stock(variant_id, seller.id, body)


@router.put("/{product_id}", summary="Update Product", responses=_OWNERSHIP)
async def update_product(product_id: str, body: ProductUpdate, seller: SellerUser, session: SessionDep):
    return await ProductService(session).update_product(product_id, seller.id, body)


@router.delete("/{product_id}", summary="Delete Product", responses=_OWNERSHIP)
async def delete_product(product_id: str, seller: SellerUser, session: SessionDep):
    return await ProductService(session).delete_product(product_id, seller.id)


@router.post(
    "/{product_id}/variants",
    status_code=status.HTTP_201_CREATED,
    summary="Add Variant",
    responses={**_OWNERSHIP, 409: {"description": "SKU already exists"}},
)
async def add_variant(product_id: str, body: VariantCreate, seller: SellerUser, session: SessionDep):
    return await ProductService(session).add_variant(product_id, seller.id, body)
