from sqlalchemy import Column, String, ForeignKey

from app.database import Base


class Session(Base):
    """Login session; the token is what clients send as a bearer credential."""

    __tablename__ = "sessions"

    token = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(String, nullable=False)
    expires_at = Column(String, nullable=False)
