"""
Health Check Endpoints.

Basic status endpoints used for monitoring and deployment verification.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from tatvivah.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/", summary="API Root", response_description="Welcome message and API version.")
async def root():
    return {"message": "Welcome to TatVivah API", "version": constant.API_VERSION}
