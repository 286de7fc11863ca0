"""
Users and login sessions repository.

This module provides data access for accounts and their refresh-token sessions.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import LoginSession, User
from .base import SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_phone(self, phone: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.phone == phone))
        return result.scalars().first()

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        """Find a user whose email or phone equals ``identifier``."""
        stmt = select(User).where(or_(User.email == identifier, User.phone == identifier))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def exists_by_email_or_phone(self, email: str, phone: Optional[str]) -> bool:
        conditions = [User.email == email]
        if phone:
            conditions.append(User.phone == phone)
        result = await self.session.execute(select(User.id).where(or_(*conditions)).limit(1))
        return result.first() is not None

    async def get_by_ids(self, ids: Sequence[str]) -> Dict[str, User]:
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(set(ids))))  # type: ignore[attr-defined]
        return {u.id: u for u in result.scalars().all()}

    async def list_by_role(self, role: str) -> List[User]:
        stmt = select(User).where(User.role == role).order_by(User.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class LoginSessionRepository(SQLModelRepository[LoginSession]):
    """Repository for refresh-token sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LoginSession)

    async def list_by_user(self, user_id: str) -> List[LoginSession]:
        """Sessions of a user, newest first."""
        stmt = (
            select(LoginSession)
            .where(LoginSession.user_id == user_id)
            .order_by(LoginSession.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_user(self, user_id: str, session_id: str) -> int:
        """Delete one session only if it belongs to ``user_id``. Returns rows deleted."""
        stmt = delete(LoginSession).where(LoginSession.id == session_id, LoginSession.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_all_for_user(self, user_id: str) -> int:
        result = await self.session.execute(delete(LoginSession).where(LoginSession.user_id == user_id))
        return result.rowcount or 0
