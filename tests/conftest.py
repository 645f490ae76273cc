import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from decimal import Decimal
from typing import AsyncGenerator, Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import feeledger.auth.models  # noqa: F401
import feeledger.core.models  # noqa: F401
from feeledger.auth.models import Account
from feeledger.auth.security import create_access_token, hash_password
from feeledger.core.enums import AccountRole
from feeledger.db.session import Base, get_db
from feeledger.main import app

STUDENT_PASSWORD = "student123"
ADMIN_PASSWORD = "admin123"


@pytest.fixture()
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite file per test so app requests and the test see the same data."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def session_factory(engine: AsyncEngine) -> AsyncGenerator[async_sessionmaker, None]:
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for the test body itself (setup and direct service calls)."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_student(db_session: AsyncSession) -> Callable:
    counter = {"n": 0}

    async def _make(total_fees="1000", name: str = "Asha Rao", **overrides) -> Account:
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            email=f"student{n}@cambridge.edu.in",
            password_hash=hash_password(STUDENT_PASSWORD),
            role=AccountRole.student.value,
            name=name,
            registration_number=f"1CR21CS{n:03d}",
            department="Computer Science",
            year=2,
            semester=3,
            total_fees=Decimal(str(total_fees)),
        )
        fields.update(overrides)
        account = Account(**fields)
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _make


@pytest.fixture()
async def admin(db_session: AsyncSession) -> Account:
    account = Account(
        email="admin@cambridge.edu.in",
        password_hash=hash_password(ADMIN_PASSWORD),
        role=AccountRole.admin.value,
        name="Admin User",
        total_fees=Decimal("0"),
    )
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


def auth_headers(account: Account) -> Dict[str, str]:
    token = create_access_token(subject={"sub": str(account.id), "role": account.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(admin: Account) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture()
def headers_for() -> Callable[[Account], Dict[str, str]]:
    return auth_headers
