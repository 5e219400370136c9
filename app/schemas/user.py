from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


def _strip_required(value):
    if not isinstance(value, str):
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class UserResponse(BaseModel):
    id: str
    username: str
    first_name: str
    last_name: str
    role: str
    status: str
    created_at: str

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    first_name: str
    last_name: str
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    confirm_password: str | None = None
    role: Literal["administrator", "driver"] = "driver"
    status: Literal["active", "inactive"] = "active"

    @field_validator("first_name", "last_name", "username", mode="before")
    @classmethod
    def _not_blank(cls, value):
        return _strip_required(value)

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = Field(default=None, min_length=3)
    # only re-hashed when provided
    password: str | None = Field(default=None, min_length=6)
    role: Literal["administrator", "driver"] | None = None
    status: Literal["active", "inactive"] | None = None

    @field_validator("first_name", "last_name", "username", mode="before")
    @classmethod
    def _not_blank(cls, value):
        return _strip_required(value)
