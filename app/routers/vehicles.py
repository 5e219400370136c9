import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_session_context, require_admin
from app.models.entry import VehicleEntry
from app.models.user import STATUS_ACTIVE
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleResponse, VehicleUpdate
from app.utils.exceptions import DuplicateLicensePlate, ReferentialDeleteConflict
from app.utils.response import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"], dependencies=[Depends(get_session_context)])
admin_router = APIRouter(prefix="/admin/vehicles", tags=["admin"], dependencies=[Depends(require_admin)])


async def _plate_taken(db: AsyncSession, plate: str, exclude_id: str | None = None) -> bool:
    stmt = select(Vehicle.id).where(Vehicle.license_plate == plate)
    if exclude_id:
        stmt = stmt.where(Vehicle.id != exclude_id)
    return (await db.execute(stmt)).first() is not None


async def _get_or_404(db: AsyncSession, vehicle_id: str) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.get("")
async def get_vehicles(db: AsyncSession = Depends(get_db)):
    """Vehicles a driver can pick for a new entry."""
    result = await db.execute(
        select(Vehicle).where(Vehicle.status == STATUS_ACTIVE).order_by(Vehicle.license_plate)
    )
    data = [VehicleResponse.model_validate(v).model_dump() for v in result.scalars().all()]
    return success_response(data=data)


@admin_router.get("")
async def list_all_vehicles(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Vehicle).order_by(Vehicle.license_plate))
    data = [VehicleResponse.model_validate(v).model_dump() for v in result.scalars().all()]
    return success_response(data=data)


@admin_router.post("", status_code=201)
async def create_vehicle(payload: VehicleCreate, db: AsyncSession = Depends(get_db)):
    plate = payload.license_plate.strip().upper()
    if await _plate_taken(db, plate):
        raise DuplicateLicensePlate(plate)

    vehicle = Vehicle(id=str(uuid.uuid4()), license_plate=plate, model=payload.model.strip(), status=payload.status)
    db.add(vehicle)
    await db.commit()
    logger.info("Vehicle %s (%s) created", vehicle.id, plate)

    return success_response(
        data=VehicleResponse.model_validate(vehicle).model_dump(),
        message=f"{plate} has been added successfully",
    )


@admin_router.put("/{vehicle_id}")
async def update_vehicle(vehicle_id: str, payload: VehicleUpdate, db: AsyncSession = Depends(get_db)):
    vehicle = await _get_or_404(db, vehicle_id)

    if payload.license_plate is not None:
        plate = payload.license_plate.strip().upper()
        if await _plate_taken(db, plate, exclude_id=vehicle.id):
            raise DuplicateLicensePlate(plate)
        vehicle.license_plate = plate
    if payload.model is not None:
        vehicle.model = payload.model.strip()
    if payload.status is not None:
        vehicle.status = payload.status

    await db.commit()
    return success_response(
        data=VehicleResponse.model_validate(vehicle).model_dump(),
        message=f"{vehicle.license_plate} has been updated successfully",
    )


@admin_router.delete("/{vehicle_id}")
async def delete_vehicle(vehicle_id: str, db: AsyncSession = Depends(get_db)):
    vehicle = await _get_or_404(db, vehicle_id)

    entry_count = await db.scalar(
        select(func.count()).select_from(VehicleEntry).where(VehicleEntry.vehicle_id == vehicle.id)
    )
    if entry_count:
        raise ReferentialDeleteConflict(
            f"Vehicle {vehicle.license_plate} is referenced by {entry_count} entries and cannot be deleted"
        )

    await db.delete(vehicle)
    await db.commit()
    logger.info("Vehicle %s deleted", vehicle_id)
    return success_response(message="Vehicle has been deleted successfully")
