from typing import Literal

from pydantic import BaseModel, Field


class VehicleResponse(BaseModel):
    id: str
    license_plate: str
    model: str
    status: str

    model_config = {"from_attributes": True}


class VehicleCreate(BaseModel):
    license_plate: str = Field(min_length=1)
    model: str = Field(min_length=1)
    status: Literal["active", "inactive"] = "active"


class VehicleUpdate(BaseModel):
    license_plate: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    status: Literal["active", "inactive"] | None = None
