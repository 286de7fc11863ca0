"""Shared fixtures for unit tests.

Provides an in-memory SQLite database with every table created, plus a small
factory for seeding users and catalog rows.
"""

from __future__ import annotations

from typing import AsyncGenerator, Dict, Optional, Tuple

import bcrypt
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from tatvivah.core.database import create_all, create_sessionmaker
from tatvivah.core.database.entities.catalog import (
    Category,
    ModerationStatus,
    Product,
    ProductModeration,
    ProductVariant,
)
from tatvivah.core.database.entities.inventory import Inventory
from tatvivah.core.database.entities.users import Role, User, UserStatus
from tatvivah.core.security import generate_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_PASSWORD = "Secret123"

# Low bcrypt cost keeps seeded users fast; checkpw reads the cost from the hash
_PASSWORD_HASH = bcrypt.hashpw(DEFAULT_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


class DataFactory:
    """Seed rows directly through the ORM and mint access tokens for them."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def user(
        self,
        role: Role = Role.USER,
        status: UserStatus = UserStatus.ACTIVE,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        full_name: Optional[str] = "Test User",
        email_verified: bool = True,
    ) -> User:
        n = self._next()
        user = User(
            email=email or f"{role.value.lower()}{n}@example.com",
            phone=phone or f"98765{n:05d}",
            full_name=full_name,
            password_hash=_PASSWORD_HASH,
            role=role.value,
            status=status.value,
            is_email_verified=email_verified,
        )
        self.session.add(user)
        await self.session.commit()
        return user

    async def buyer(self, **kwargs) -> User:
        return await self.user(Role.USER, **kwargs)

    async def seller(self, **kwargs) -> User:
        return await self.user(Role.SELLER, **kwargs)

    async def admin(self, **kwargs) -> User:
        return await self.user(Role.ADMIN, **kwargs)

    async def super_admin(self, **kwargs) -> User:
        return await self.user(Role.SUPER_ADMIN, **kwargs)

    async def category(self, name: Optional[str] = None, is_active: bool = True) -> Category:
        n = self._next()
        name = name or f"Category {n}"
        category = Category(name=name, slug=f"{name.lower().replace(' ', '-')}-{n}", is_active=is_active)
        self.session.add(category)
        await self.session.commit()
        return category

    async def product(
        self,
        seller: User,
        category: Optional[Category] = None,
        title: str = "Silk Saree",
        price: float = 1000.0,
        stock: int = 10,
        is_published: bool = True,
        description: Optional[str] = None,
    ) -> Tuple[Product, ProductVariant]:
        """A product with one variant, its inventory, and a PENDING moderation record."""
        category = category or await self.category()
        n = self._next()
        product = Product(
            seller_id=seller.id,
            category_id=category.id,
            title=title,
            description=description,
            images=[],
            is_published=is_published,
        )
        self.session.add(product)
        await self.session.flush()
        variant = ProductVariant(product_id=product.id, sku=f"SKU-{n}", price=price)
        self.session.add(variant)
        await self.session.flush()
        self.session.add(Inventory(variant_id=variant.id, stock=stock))
        self.session.add(ProductModeration(product_id=product.id, status=ModerationStatus.PENDING.value))
        await self.session.commit()
        return product, variant


@pytest.fixture
def factory(session: AsyncSession) -> DataFactory:
    return DataFactory(session)


def access_token(user: User) -> str:
    return generate_access_token(
        {
            "userId": user.id,
            "email": user.email,
            "phone": user.phone,
            "role": user.role,
            "status": user.status,
            "isEmailVerified": user.is_email_verified,
            "isPhoneVerified": user.is_phone_verified,
        }
    )


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token(user)}"}


@pytest.fixture
def auth():
    """``auth(user)`` returns the Authorization header for ``user``."""
    return auth_headers
