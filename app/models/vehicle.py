from sqlalchemy import Column, String

from app.database import Base
from app.models.user import STATUS_ACTIVE


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    license_plate = Column(String, nullable=False, unique=True)
    model = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_ACTIVE)
