"""
Pytest fixtures for the job board test suite.

Provides:
- An in-memory SQLite database (aiosqlite) per test
- A ``Factory`` that seeds rows through short-lived sessions
- An httpx client bound to the FastAPI app with uploads under ``tmp_path``
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from jobboard.config import settings
from jobboard.core.constants import CompanyStatus, OrderStatus, Role, VipPackageLevel
from jobboard.core.security import Actor, create_access_token, get_password_hash
from jobboard.db.session import create_database
from jobboard.main import create_app
from jobboard.models import Account, Company, CompanyVipPackage, Province, VipPackage
from jobboard.services.storage_service import LocalFileStorage, get_storage
from jobboard.utils.dates import utc_now

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SEPAY_KEY = "test-sepay-key"
PASSWORD = "Secret@123"

# bcrypt is slow on purpose; hash the shared test password once
PASSWORD_HASH = get_password_hash(PASSWORD)


class Factory:
    """Creates committed rows, each through its own session."""

    def __init__(self, database):
        self.database = database
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def _add(self, *objs):
        async with self.database.session_factory() as session:
            session.add_all(objs)
            await session.commit()
        return objs[-1]

    async def reload(self, model, id_):
        async with self.database.session_factory() as session:
            result = await session.execute(select(model).where(model.id == id_))
            return result.unique().scalar_one_or_none()

    async def province(self, name: Optional[str] = None) -> Province:
        return await self._add(Province(name=name or f"Province {self._next()}"))

    async def account(
        self,
        role: Role = Role.USER,
        email: Optional[str] = None,
        is_locked: bool = False,
    ) -> Account:
        return await self._add(
            Account(
                email=email or f"account{self._next()}@example.com",
                password_hash=PASSWORD_HASH,
                role=role.value,
                is_locked=is_locked,
            )
        )

    async def admin(self) -> Account:
        return await self.account(role=Role.ADMIN)

    async def company(
        self,
        status: CompanyStatus = CompanyStatus.APPROVED,
        email: Optional[str] = None,
        province: Optional[Province] = None,
        reason_reject: Optional[str] = None,
        logo: Optional[str] = None,
    ) -> Company:
        n = self._next()
        email = email or f"company{n}@example.com"
        account = await self.account(role=Role.COMPANY, email=email)
        return await self._add(
            Company(
                account_id=account.id,
                email=email,
                name=f"Company {n}",
                address="1 Trang Tien",
                province_id=province.id if province else None,
                tax_code="0101234567",
                business_license_path=f"/uploads/licenses/license-{n}.pdf",
                logo=logo,
                status=status.value,
                reason_reject=reason_reject,
            )
        )

    async def package(
        self,
        priority: VipPackageLevel = VipPackageLevel.BASIC,
        price: Decimal = Decimal("299000"),
        num_post: int = 5,
        duration_day: int = 30,
        is_deleted: bool = False,
        name: Optional[str] = None,
    ) -> VipPackage:
        return await self._add(
            VipPackage(
                name=name or f"{priority.name.title()} package {self._next()}",
                description="Featured job posts on the home page",
                num_post=num_post,
                price=price,
                duration_day=duration_day,
                priority=priority.value,
                is_deleted=is_deleted,
            )
        )

    async def order(
        self,
        company: Company,
        package: VipPackage,
        status: OrderStatus = OrderStatus.PENDING,
        end_date: Optional[datetime] = None,
        remaining_posts: Optional[int] = None,
    ) -> CompanyVipPackage:
        return await self._add(
            CompanyVipPackage(
                company_id=company.id,
                vip_package_id=package.id,
                end_date=end_date or utc_now() + timedelta(days=30),
                remaining_posts=package.num_post if remaining_posts is None else remaining_posts,
                status=status.value,
            )
        )


def actor_for(account_id, role: Role = Role.COMPANY) -> Actor:
    return Actor(role=role, account_id=account_id)


def token_for(account_id, role: Role) -> str:
    return create_access_token({"sub": str(account_id), "role": role.value})


def auth_headers(account_id, role: Role) -> dict:
    return {"Authorization": f"Bearer {token_for(account_id, role)}"}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
async def database():
    db = create_database(TEST_DATABASE_URL, echo=False)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def factory(database) -> Factory:
    return Factory(database)


@pytest.fixture
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(root_dir=str(tmp_path / "uploads"))


@pytest.fixture
def sepay_key(monkeypatch) -> str:
    monkeypatch.setattr(settings, "SEPAY_API_KEY", SEPAY_KEY)
    return SEPAY_KEY


@pytest.fixture
async def client(database, storage, sepay_key):
    app = create_app(database)
    app.dependency_overrides[get_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
