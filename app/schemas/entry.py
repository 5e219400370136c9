from pydantic import BaseModel


class PhotoResponse(BaseModel):
    id: str
    image_url: str
    photo_type: str

    model_config = {"from_attributes": True}


class EntryVehicle(BaseModel):
    id: str
    license_plate: str
    model: str

    model_config = {"from_attributes": True}


class EntryDriver(BaseModel):
    id: str
    username: str
    first_name: str
    last_name: str
    status: str

    model_config = {"from_attributes": True}


class EntryResponse(BaseModel):
    id: str
    user_id: str
    vehicle_id: str
    mileage: int
    notes: str | None = None
    created_at: str
    photos: list[PhotoResponse] = []

    model_config = {"from_attributes": True}


class HistoryEntryResponse(EntryResponse):
    vehicle: EntryVehicle | None = None


class AdminEntryResponse(HistoryEntryResponse):
    user: EntryDriver | None = None
