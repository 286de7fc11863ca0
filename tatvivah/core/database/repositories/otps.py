"""
Email OTP repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.otps import EmailOtp, OtpPurpose
from .base import SQLModelRepository


class EmailOtpRepository(SQLModelRepository[EmailOtp]):
    """Repository for one-time verification codes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, EmailOtp)

    async def list_valid(self, email: str, purpose: str = OtpPurpose.EMAIL_VERIFY.value) -> List[EmailOtp]:
        """Unused, unexpired codes for ``email``, newest first."""
        stmt = (
            select(EmailOtp)
            .where(
                EmailOtp.email == email,
                EmailOtp.purpose == purpose,
                EmailOtp.used_at.is_(None),  # type: ignore[union-attr]
                EmailOtp.expires_at > utc_now(),
            )
            .order_by(EmailOtp.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_latest_valid(self, email: str, purpose: str = OtpPurpose.EMAIL_VERIFY.value) -> Optional[EmailOtp]:
        valid = await self.list_valid(email, purpose)
        return valid[0] if valid else None

    async def find_latest_signup_payload(self, email: str) -> Optional[dict]:
        """Payload of the newest pending signup for ``email`` (valid codes only)."""
        for otp in await self.list_valid(email):
            if otp.user_id is None and otp.payload:
                return otp.payload
        return None

    async def mark_used(self, otp: EmailOtp) -> EmailOtp:
        otp.used_at = utc_now()
        return await self.update(otp)
