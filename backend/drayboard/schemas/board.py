"""Response schemas for the transit board."""

from pydantic import BaseModel

from drayboard.schemas.container import CAMEL_CONFIG, ContainerOut


class YardGroupOut(BaseModel):
    key: str
    label: str
    yard_id: str | None
    # False when the containers reference a yard that no longer exists
    known: bool
    loaded: list[ContainerOut] = []
    empty: list[ContainerOut] = []

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


class BoardColumnOut(BaseModel):
    status: str
    label: str
    containers: list[ContainerOut] = []
    yard_groups: list[YardGroupOut] = []

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


class BoardOut(BaseModel):
    columns: list[BoardColumnOut]

    model_config = CAMEL_CONFIG


class NextStatusOut(BaseModel):
    status: str
    suggested: str | None

    model_config = CAMEL_CONFIG
