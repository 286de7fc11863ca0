"""
Bestseller Endpoints.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import BestsellerCreate, BestsellerUpdate
from tatvivah.server.services.bestsellers import BestsellerService
from tatvivah.server.services.deps import AdminUser, SessionDep

router = APIRouter()
admin_router = APIRouter()


@router.get("", summary="List Bestsellers", description="Curated products for the storefront, in shelf order.")
async def list_bestsellers(session: SessionDep):
    return await BestsellerService(session).list_public()


@admin_router.get("", summary="List Bestseller Entries")
async def list_admin_bestsellers(admin: AdminUser, session: SessionDep):
    return await BestsellerService(session).list_admin()


@admin_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add Bestseller",
    responses={400: {"description": "Shelf full or product deleted"}, 409: {"description": "Already listed"}},
)
async def add_bestseller(body: BestsellerCreate, admin: AdminUser, session: SessionDep):
    return await BestsellerService(session).add(body.product_id, body.position)


@admin_router.put("/{bestseller_id}", summary="Move Bestseller", responses={404: {"description": "Not found"}})
async def update_bestseller(bestseller_id: str, body: BestsellerUpdate, admin: AdminUser, session: SessionDep):
    return await BestsellerService(session).update(bestseller_id, body.position)


@admin_router.delete("/{bestseller_id}", summary="Remove Bestseller", responses={404: {"description": "Not found"}})
async def remove_bestseller(bestseller_id: str, admin: AdminUser, session: SessionDep):
    return await BestsellerService(session).remove(bestseller_id)
