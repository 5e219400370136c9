from app.models.user import User
from app.models.vehicle import Vehicle
from app.models.session import Session
from app.models.entry import VehicleEntry
from app.models.photo import Photo, REQUIRED_PHOTO_TYPES, OPTIONAL_PHOTO_TYPE

__all__ = ["User", "Vehicle", "Session", "VehicleEntry", "Photo", "REQUIRED_PHOTO_TYPES", "OPTIONAL_PHOTO_TYPE"]
