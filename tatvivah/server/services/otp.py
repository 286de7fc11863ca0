"""
Email OTP Service.

Issues, emails, and verifies six-digit email verification codes. A code is
either bound to an existing user or carries a pending signup payload that
becomes the user once the code is verified.
"""

import hmac
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.database.entities.otps import EmailOtp, OtpPurpose
from tatvivah.core.database.repositories import EmailOtpRepository
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.security import generate_otp, hash_otp, otp_expiry
from tatvivah.notifications import templates
from tatvivah.notifications.email import EmailClient

logger = get_logger(__name__)


class OtpService:
    def __init__(self, session: AsyncSession, email_client: Optional[EmailClient] = None) -> None:
        self.session = session
        self.otps = EmailOtpRepository(session)
        self.email_client = email_client or EmailClient()

    async def _issue(self, email: str, user_id: Optional[str], payload: Optional[Dict[str, Any]]) -> None:
        if not email:
            raise ApiError.bad_request("Email is required for verification")
        code = generate_otp()
        await self.otps.create(
            EmailOtp(
                user_id=user_id,
                email=email,
                code_hash=hash_otp(code),
                purpose=OtpPurpose.EMAIL_VERIFY.value,
                expires_at=otp_expiry(),
                payload=payload,
            )
        )
        subject, html = templates.render_otp(code)
        await self.email_client.send(email, subject, html)
        logger.debug(f"Verification code issued for {email}")

    async def send_verification_otp(self, user_id: str, email: str) -> None:
        await self._issue(email, user_id, None)

    async def send_signup_otp(self, payload: Dict[str, Any]) -> None:
        await self._issue(payload.get("email", ""), None, payload)

    async def verify(self, email: str, code: str) -> EmailOtp:
        """Consume the newest valid code matching ``code``.

        Raises:
            ApiError: 400 when no unused, unexpired code matches
        """
        code_hash = hash_otp(code)
        for otp in await self.otps.list_valid(email):
            if hmac.compare_digest(otp.code_hash, code_hash):
                return await self.otps.mark_used(otp)
        raise ApiError.bad_request("Invalid or expired OTP")

    async def latest_signup_payload(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.otps.find_latest_signup_payload(email)
