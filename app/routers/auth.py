from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_session_context
from app.schemas.auth import LoginRequest, LoginResponse
from app.services import auth_service
from app.services.auth_service import SessionContext
from app.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    context = await auth_service.login(db, request.username, request.password)
    return success_response(
        data=LoginResponse(**context.as_dict()).model_dump(),
        message=f"Welcome back, {context.username}!",
    )


@router.post("/logout")
async def logout(
    context: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.logout(db, context.token)
    return success_response(message="Logged out")


@router.get("/me")
async def me(context: SessionContext = Depends(get_session_context)):
    return success_response(data=LoginResponse(**context.as_dict()).model_dump())
