"""Read side of vehicle entries: the admin list and the driver history."""
import logging
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.models.entry import VehicleEntry
from app.models.user import User, ROLE_DRIVER, STATUS_ACTIVE
from app.models.vehicle import Vehicle
from app.schemas.filters import EntryFilters, EntryListState

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 5

_SORT_COLUMNS = {
    "created_at": VehicleEntry.created_at,
    "mileage": VehicleEntry.mileage,
    "driver_name": User.first_name,
}


@dataclass
class EntryPage:
    entries: list[VehicleEntry]
    total: int
    state: EntryListState

    @property
    def total_pages(self) -> int:
        return self.state.total_pages(self.total)


def _driver_status(entry: VehicleEntry) -> str:
    return entry.user.status if entry.user is not None and entry.user.status else STATUS_ACTIVE


def passes_status_filter(entry: VehicleEntry, statuses: list[str]) -> bool:
    return not statuses or _driver_status(entry) in statuses


def _filtered(filters: EntryFilters, status_in_query: bool):
    stmt = (
        select(VehicleEntry)
        .outerjoin(User, VehicleEntry.user_id == User.id)
        .outerjoin(Vehicle, VehicleEntry.vehicle_id == Vehicle.id)
    )

    if filters.drivers:
        stmt = stmt.where(VehicleEntry.user_id.in_(filters.drivers))
    if filters.vehicles:
        stmt = stmt.where(VehicleEntry.vehicle_id.in_(filters.vehicles))
    if filters.date_from:
        stmt = stmt.where(VehicleEntry.created_at >= f"{filters.date_from.isoformat()}T00:00:00")
    if filters.date_to:
        stmt = stmt.where(VehicleEntry.created_at <= f"{filters.date_to.isoformat()}T23:59:59")

    if status_in_query and filters.status:
        predicate = User.status.in_(filters.status)
        if STATUS_ACTIVE in filters.status:
            predicate = or_(predicate, User.id.is_(None))
        stmt = stmt.where(predicate)

    return stmt


async def query_entries(
    db: AsyncSession,
    filters: EntryFilters,
    state: EntryListState,
    status_in_query: bool | None = None,
) -> EntryPage:
    """Fetch one page of entries with driver, vehicle and photos.

    By default the driver-status filter runs on the fetched page, after
    pagination, so a page can hold fewer than page_size rows while ``total``
    still counts the entries matching every other filter. With
    ``status_in_query`` the status predicate joins the query instead.
    """
    if status_in_query is None:
        status_in_query = settings.admin_status_filter_in_query

    base = _filtered(filters, status_in_query)

    total = await db.scalar(select(func.count()).select_from(base.subquery()))

    sort_column = _SORT_COLUMNS[state.sort_field]
    if state.sort_direction == "asc":
        order = (sort_column.asc(), VehicleEntry.id.asc())
    else:
        order = (sort_column.desc(), VehicleEntry.id.desc())

    stmt = (
        base.options(
            selectinload(VehicleEntry.user),
            selectinload(VehicleEntry.vehicle),
            selectinload(VehicleEntry.photos),
        )
        .order_by(*order)
        .offset(state.offset)
        .limit(state.page_size)
    )
    result = await db.execute(stmt)
    fetched = list(result.scalars().all())

    entries = fetched
    if not status_in_query:
        entries = [e for e in fetched if passes_status_filter(e, filters.status)]

    logger.debug(
        "Entry query page=%d size=%d fetched=%d shown=%d total=%d",
        state.page, state.page_size, len(fetched), len(entries), total,
    )
    return EntryPage(entries=entries, total=total or 0, state=state)


async def get_entry(db: AsyncSession, entry_id: str) -> VehicleEntry | None:
    result = await db.execute(
        select(VehicleEntry)
        .where(VehicleEntry.id == entry_id)
        .options(
            selectinload(VehicleEntry.user),
            selectinload(VehicleEntry.vehicle),
            selectinload(VehicleEntry.photos),
        )
    )
    return result.scalars().first()


async def recent_entries_for_user(db: AsyncSession, user_id: str, limit: int = HISTORY_LIMIT) -> list[VehicleEntry]:
    result = await db.execute(
        select(VehicleEntry)
        .where(VehicleEntry.user_id == user_id)
        .options(selectinload(VehicleEntry.vehicle), selectinload(VehicleEntry.photos))
        .order_by(VehicleEntry.created_at.desc(), VehicleEntry.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def filter_options(db: AsyncSession) -> dict:
    """Drivers and active vehicles offered by the admin filter panel."""
    drivers = await db.execute(
        select(User).where(User.role == ROLE_DRIVER).order_by(User.first_name, User.last_name)
    )
    vehicles = await db.execute(
        select(Vehicle).where(Vehicle.status == STATUS_ACTIVE).order_by(Vehicle.license_plate)
    )
    return {
        "drivers": [
            {"id": u.id, "username": u.username, "first_name": u.first_name,
             "last_name": u.last_name, "status": u.status}
            for u in drivers.scalars().all()
        ],
        "vehicles": [
            {"id": v.id, "license_plate": v.license_plate, "model": v.model}
            for v in vehicles.scalars().all()
        ],
    }
