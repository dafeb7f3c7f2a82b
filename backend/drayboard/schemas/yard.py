"""Pydantic schemas for Yard CRUD operations."""

from pydantic import BaseModel

from drayboard.schemas.container import CAMEL_CONFIG


class YardCreate(BaseModel):
    name: str | None = None
    address: str | None = None
    contact: str | None = None
    notes: str | None = None

    model_config = CAMEL_CONFIG


class YardUpdate(YardCreate):
    pass


class YardOut(BaseModel):
    id: str
    name: str
    address: str | None = None
    contact: str | None = None
    notes: str | None = None

    model_config = {**CAMEL_CONFIG, "from_attributes": True}
