"""
Admin Notification Endpoints.

Read access to the notification outbox and its delivery attempts.
"""

from fastapi import APIRouter, Query

from tatvivah.server.services.admin import AdminService
from tatvivah.server.services.deps import AdminUser, SessionDep

router = APIRouter()


@router.get("", summary="List Notifications", description="Paginated notifications, newest first.")
async def list_notifications(
    admin: AdminUser,
    session: SessionDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    result = await AdminService(session).list_notifications(page, limit)
    return {"success": True, **result}


@router.get(
    "/{notification_id}",
    summary="Get Notification",
    description="One notification with its delivery events.",
    responses={404: {"description": "Notification not found"}},
)
async def get_notification(notification_id: str, admin: AdminUser, session: SessionDep):
    return {"success": True, "data": await AdminService(session).get_notification(notification_id)}
