from sqlalchemy import Column, String, Integer
from sqlalchemy import ForeignKey

from app.database import Base

# Fixed upload order for the four mandatory inspection angles
REQUIRED_PHOTO_TYPES: dict[str, str] = {
    "vorne_links": "Front Left",
    "vorne_rechts": "Front Right",
    "hinten_links": "Rear Left",
    "hinten_rechts": "Rear Right",
}
OPTIONAL_PHOTO_TYPE = "optional"


class Photo(Base):
    __tablename__ = "photos"

    id = Column(String, primary_key=True)
    entry_id = Column(String, ForeignKey("vehicle_entries.id"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    storage_key = Column(String, nullable=False, unique=True)
    photo_type = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(String, nullable=False)
