"""
Category Endpoints.

Public listing of active categories plus the admin management routes.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import CategoryCreate, CategoryUpdate
from tatvivah.server.services.categories import CategoryService
from tatvivah.server.services.deps import AdminUser, SessionDep

router = APIRouter()
admin_router = APIRouter()


@router.get("", summary="List Categories", description="List active categories ordered by name.")
async def list_categories(session: SessionDep):
    return await CategoryService(session).list_categories()


@admin_router.get("", summary="List All Categories", description="List every category, including inactive ones.")
async def list_all_categories(admin: AdminUser, session: SessionDep):
    return await CategoryService(session).list_all_categories()


@admin_router.post("", status_code=status.HTTP_201_CREATED, summary="Create Category")
async def create_category(body: CategoryCreate, admin: AdminUser, session: SessionDep):
    return await CategoryService(session).create_category(body)


@admin_router.put(
    "/{category_id}",
    summary="Update Category",
    responses={404: {"description": "Category not found"}},
)
async def update_category(category_id: str, body: CategoryUpdate, admin: AdminUser, session: SessionDep):
    return await CategoryService(session).update_category(category_id, body)


@admin_router.delete(
    "/{category_id}",
    summary="Deactivate Category",
    description="Hide a category from the storefront. Categories are never hard-deleted.",
    responses={404: {"description": "Category not found"}},
)
async def deactivate_category(category_id: str, admin: AdminUser, session: SessionDep):
    return await CategoryService(session).deactivate_category(category_id)
