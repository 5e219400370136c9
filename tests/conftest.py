import os
import uuid
from datetime import datetime, timedelta, timezone

# must be set before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.main import app
from app.models.entry import VehicleEntry
from app.models.user import User
from app.seed import SEED_DRIVER_ID, SEED_DRIVER_PASSWORD, SEED_DRIVER_USERNAME, SEED_VEHICLES, seed_data
from app.services.auth_service import hash_password
from app.services.photo_storage import PhotoStorage, get_photo_storage
from app.utils.clock import to_iso, utc_now_iso


@pytest.fixture(autouse=True)
def test_settings():
    settings.api_key = ""
    settings.admin_status_filter_in_query = False


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_data(session)
    return factory


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return PhotoStorage(str(tmp_path), "vehicle-photos", "http://test/media")


@pytest_asyncio.fixture
async def client(session_factory, storage):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_photo_storage] = lambda: storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def login_headers(client, username: str, password: str) -> dict:
    response = await client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest_asyncio.fixture
async def driver_headers(client):
    return await login_headers(client, SEED_DRIVER_USERNAME, SEED_DRIVER_PASSWORD)


@pytest_asyncio.fixture
async def admin_headers(client):
    return await login_headers(client, settings.seed_admin_username, settings.seed_admin_password)


@pytest.fixture
def add_driver(session_factory):
    async def _add(username: str, first_name: str = "Test", last_name: str = "Driver",
                   status: str = "active", password: str = "secret123") -> str:
        user_id = str(uuid.uuid4())
        async with session_factory() as session:
            session.add(User(
                id=user_id, username=username, password_hash=hash_password(password),
                first_name=first_name, last_name=last_name, role="driver",
                status=status, created_at=utc_now_iso(),
            ))
            await session.commit()
        return user_id

    return _add


@pytest.fixture
def add_entries(session_factory):
    async def _add(count: int, user_id: str = SEED_DRIVER_ID, vehicle_id: str = SEED_VEHICLES[0]["id"],
                   start: datetime = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc),
                   step: timedelta = timedelta(hours=1), mileage_start: int = 1000) -> list[str]:
        ids = []
        async with session_factory() as session:
            for i in range(count):
                entry_id = str(uuid.uuid4())
                session.add(VehicleEntry(
                    id=entry_id, user_id=user_id, vehicle_id=vehicle_id,
                    mileage=mileage_start + i, created_at=to_iso(start + i * step),
                ))
                ids.append(entry_id)
            await session.commit()
        return ids

    return _add


@pytest.fixture
def count_rows(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
def login():
    async def _login(client, username: str, password: str) -> dict:
        return await login_headers(client, username, password)

    return _login
