from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.common import MAX_RATE, blank_to_none


class ResourceBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    role: str = Field(min_length=1, max_length=100)
    hourly_rate: float = Field(ge=0, le=MAX_RATE, allow_inf_nan=False)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    availability: int = Field(default=100, ge=0, le=100)  # percent

    @field_validator("email", "phone", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("availability", mode="before")
    @classmethod
    def default_availability(cls, v):
        v = blank_to_none(v)
        return 100 if v is None else v


class ResourceCreate(ResourceBase):
    pass


class ResourceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    hourly_rate: Optional[float] = Field(default=None, ge=0, le=MAX_RATE, allow_inf_nan=False)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    availability: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name", "role", "hourly_rate", "availability")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ResourceInDBBase(ResourceBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Resource(ResourceInDBBase):
    pass
