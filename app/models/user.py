from sqlalchemy import Column, String

from app.database import Base

ROLE_ADMINISTRATOR = "administrator"
ROLE_DRIVER = "driver"
ROLES = (ROLE_ADMINISTRATOR, ROLE_DRIVER)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default=ROLE_DRIVER)
    status = Column(String, nullable=False, default=STATUS_ACTIVE)
    created_at = Column(String, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMINISTRATOR

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
