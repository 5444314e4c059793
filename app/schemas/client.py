from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.common import blank_to_none


class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email", "phone", "address", "notes", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email", "phone", "address", "notes", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("Name is required")
        return v


class ClientInDBBase(ClientBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Client(ClientInDBBase):
    pass
