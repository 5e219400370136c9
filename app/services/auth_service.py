import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta

import bcrypt
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.session import Session
from app.models.user import User, STATUS_ACTIVE, ROLE_ADMINISTRATOR
from app.utils.clock import iso_in, parse_iso, utc_now, utc_now_iso
from app.utils.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller, resolved from a validated session token."""

    user_id: str
    username: str
    first_name: str
    last_name: str
    role: str
    token: str
    expires_at: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMINISTRATOR

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role,
            "is_admin": self.is_admin,
            "token": self.token,
            "expires_at": self.expires_at,
        }


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # malformed hash in the users table
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _context(user: User, session: Session) -> SessionContext:
    return SessionContext(
        user_id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        token=session.token,
        expires_at=session.expires_at,
    )


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """Return the active user for these credentials.

    Unknown username, wrong password and inactive account all raise the same
    AuthenticationFailed so the response does not reveal which one it was.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for username %r", username)
        raise AuthenticationFailed()

    if user.status != STATUS_ACTIVE:
        logger.info("Login refused for inactive user %s", user.id)
        raise AuthenticationFailed()

    return user


async def login(db: AsyncSession, username: str, password: str) -> SessionContext:
    user = await authenticate(db, username, password)

    session = Session(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=utc_now_iso(),
        expires_at=iso_in(timedelta(days=settings.session_ttl_days)),
    )
    db.add(session)
    await db.commit()

    logger.info("User %s logged in, session expires %s", user.id, session.expires_at)
    return _context(user, session)


async def resolve_session(db: AsyncSession, token: str) -> SessionContext | None:
    """Return the context for a live session, or None if the token is unknown, expired or its user inactive."""
    session = await db.get(Session, token)
    if session is None:
        return None

    if parse_iso(session.expires_at) <= utc_now():
        await db.delete(session)
        await db.commit()
        return None

    user = await db.get(User, session.user_id)
    if user is None or user.status != STATUS_ACTIVE:
        return None

    return _context(user, session)


async def logout(db: AsyncSession, token: str) -> None:
    await db.execute(delete(Session).where(Session.token == token))
    await db.commit()


async def revoke_user_sessions(db: AsyncSession, user_id: str) -> None:
    """Delete every session of a user; the caller commits."""
    await db.execute(delete(Session).where(Session.user_id == user_id))
