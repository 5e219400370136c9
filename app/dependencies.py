from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.services.auth_service import SessionContext, resolve_session

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_api_key(x_api_key: str = Header(default="")) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> SessionContext:
    """Resolve the bearer token to a live session; 401 tells the client to show the login view."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not logged in", headers={"WWW-Authenticate": "Bearer"})

    context = await resolve_session(db, credentials.credentials)
    if context is None:
        raise HTTPException(
            status_code=401, detail="Session expired or invalid", headers={"WWW-Authenticate": "Bearer"}
        )
    return context


async def require_admin(context: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not context.is_admin:
        raise HTTPException(status_code=403, detail="Administrator privileges required")
    return context
