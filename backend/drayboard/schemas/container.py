"""Pydantic schemas for container CRUD, moves and import.

Bodies use camelCase on the wire (caseNumber, yardId, orderIndex …) and
snake_case in Python. Status and yard fields are accepted as plain strings
and checked by services.status so that a bad value surfaces as an
INVALID_STATUS / MISSING_YARD_INFO error rather than a schema error.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


# ── Descriptive fields (free text, no validation) ─────────────

class ContainerFields(BaseModel):
    container_number: str | None = None
    mbl_number: str | None = None
    size: str | None = None
    terminal: str | None = None
    weight: str | None = None
    delivery_address_company: str | None = None
    billing_party: str | None = None
    demurrage: str | None = None
    input_person: str | None = None
    lfd: str | None = None
    eta: str | None = None
    appointment_time: str | None = None
    delivery_appointment: str | None = None
    empty_status: str | None = None
    rt_loc_empty_app: str | None = None
    yards: str | None = None
    pu_driver: str | None = None
    driver_id: str | None = None
    chassis_id: str | None = None
    notes: str | None = None

    model_config = CAMEL_CONFIG


# ── Create / update ───────────────────────────────────────────

class ContainerCreate(ContainerFields):
    """Payload for POST /api/containers/."""
    case_number: str | None = None
    status: str | None = None
    yard_id: str | None = None
    yard_status: str | None = None
    order_index: float | None = None


class ContainerUpdate(ContainerCreate):
    """Payload for PUT /api/containers/{id}; only supplied fields change."""
    pass


# ── Move ──────────────────────────────────────────────────────

class StatusMoveRequest(BaseModel):
    """Payload for PUT /api/containers/{id}/status."""
    status: str | None = None
    yard_id: str | None = None
    yard_status: str | None = None
    order_index: float | None = None
    # Used only when order_index is absent; the server picks the neighbours
    position: Literal["top", "bottom"] | None = None

    model_config = CAMEL_CONFIG


# ── Response ─────────────────────────────────────────────────

class ContainerOut(ContainerFields):
    id: str
    case_number: str
    status: str = "AT_TERMINAL"
    yard_id: str | None = None
    yard_status: str | None = None
    order_index: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


# ── Import ───────────────────────────────────────────────────

class ImportResult(BaseModel):
    inserted_count: int
    updated_count: int
    skipped_count: int
    total_rows: int

    model_config = CAMEL_CONFIG
