import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.models.entry import VehicleEntry
from app.models.user import User, STATUS_ACTIVE, STATUS_INACTIVE
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.auth_service import SessionContext, hash_password, revoke_user_sessions
from app.utils.clock import utc_now_iso
from app.utils.exceptions import DuplicateUsername, ReferentialDeleteConflict
from app.utils.response import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"], dependencies=[Depends(require_admin)])


async def _username_taken(db: AsyncSession, username: str, exclude_id: str | None = None) -> bool:
    stmt = select(User.id).where(User.username == username)
    if exclude_id:
        stmt = stmt.where(User.id != exclude_id)
    return (await db.execute(stmt)).first() is not None


async def _get_or_404(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("")
async def list_users(
    role: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(User).order_by(User.username)
    if role:
        stmt = stmt.where(User.role == role)
    result = await db.execute(stmt)
    data = [UserResponse.model_validate(u).model_dump() for u in result.scalars().all()]
    return success_response(data=data)


@router.post("", status_code=201)
async def create_user(
    payload: UserCreate,
    admin: SessionContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if await _username_taken(db, payload.username):
        raise DuplicateUsername(payload.username)

    user = User(
        id=str(uuid.uuid4()),
        username=payload.username,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        status=payload.status,
        created_at=utc_now_iso(),
    )
    db.add(user)
    await db.commit()
    logger.info("User %s (%s) created by %s", user.id, user.role, admin.user_id)

    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message=f"{user.full_name} has been added as a new {user.role}",
    )


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user = await _get_or_404(db, user_id)

    if payload.username is not None and payload.username != user.username:
        if await _username_taken(db, payload.username, exclude_id=user.id):
            raise DuplicateUsername(payload.username)
        user.username = payload.username
    if payload.first_name is not None:
        user.first_name = payload.first_name.strip()
    if payload.last_name is not None:
        user.last_name = payload.last_name.strip()
    if payload.role is not None:
        user.role = payload.role
    if payload.status is not None:
        user.status = payload.status
    if payload.password:
        user.password_hash = hash_password(payload.password)

    await db.commit()
    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message=f"{user.full_name or user.username} has been updated successfully",
    )


@router.post("/{user_id}/toggle-status")
async def toggle_user_status(
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    user = await _get_or_404(db, user_id)
    user.status = STATUS_INACTIVE if user.status == STATUS_ACTIVE else STATUS_ACTIVE
    await db.commit()

    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message=f"User status changed to {user.status}",
    )


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: SessionContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_or_404(db, user_id)
    if user.id == admin.user_id:
        raise ReferentialDeleteConflict("You cannot delete your own account")

    entry_count = await db.scalar(
        select(func.count()).select_from(VehicleEntry).where(VehicleEntry.user_id == user.id)
    )
    if entry_count:
        raise ReferentialDeleteConflict(
            f"{user.full_name or user.username} has {entry_count} entries and cannot be deleted"
        )

    await revoke_user_sessions(db, user.id)
    await db.delete(user)
    await db.commit()
    logger.info("User %s deleted by %s", user_id, admin.user_id)
    return success_response(message=f"{user.full_name or user.username} has been deleted successfully")
