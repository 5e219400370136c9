import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User, ROLE_ADMINISTRATOR, ROLE_DRIVER
from app.models.vehicle import Vehicle
from app.services.auth_service import hash_password
from app.utils.clock import utc_now_iso

logger = logging.getLogger(__name__)


SEED_VEHICLES = [
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-001")), "license_plate": "B-FL 1001", "model": "VW Crafter", "status": "active"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-002")), "license_plate": "B-FL 1002", "model": "VW Crafter", "status": "active"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-003")), "license_plate": "B-FL 2001", "model": "Mercedes Sprinter", "status": "active"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-004")), "license_plate": "B-FL 2002", "model": "Mercedes Sprinter", "status": "inactive"},
]

SEED_ADMIN_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-admin"))

SEED_DRIVER_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-driver"))
SEED_DRIVER_USERNAME = "fahrer"
SEED_DRIVER_PASSWORD = "fahrer123"


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(User).limit(1))
    if result.scalars().first() is not None:
        return

    for v in SEED_VEHICLES:
        session.add(Vehicle(**v))

    now = utc_now_iso()
    session.add(User(
        id=SEED_ADMIN_ID,
        username=settings.seed_admin_username,
        password_hash=hash_password(settings.seed_admin_password),
        first_name="Fleet",
        last_name="Admin",
        role=ROLE_ADMINISTRATOR,
        created_at=now,
    ))
    session.add(User(
        id=SEED_DRIVER_ID,
        username=SEED_DRIVER_USERNAME,
        password_hash=hash_password(SEED_DRIVER_PASSWORD),
        first_name="Max",
        last_name="Fahrer",
        role=ROLE_DRIVER,
        created_at=now,
    ))

    await session.commit()
    logger.info("Seeded %d vehicles, one administrator and one driver", len(SEED_VEHICLES))
