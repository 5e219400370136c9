from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class VehicleEntry(Base):
    __tablename__ = "vehicle_entries"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False, index=True)
    mileage = Column(Integer, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(String, nullable=False, index=True)

    user = relationship("User", lazy="raise")
    vehicle = relationship("Vehicle", lazy="raise")
    photos = relationship("Photo", lazy="raise", order_by="Photo.position")
