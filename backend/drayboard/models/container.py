"""Container: a shipping container tracked from terminal to return.

Moves through a fixed set of physical-location statuses:
    AT_TERMINAL → IN_TRANSIT_FROM_TERMINAL → ON_WAY_TO_CUSTOMER / ON_WAY_TO_YARD
    → AT_CUSTOMER_YARD / AT_OTHER_YARD → EMPTY_AT_CUSTOMER
    → RETURNING_TO_TERMINAL → RETURNED

yard_id / yard_status are set only while status == AT_OTHER_YARD.
order_index positions the container inside its board lane.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from drayboard.database import Base


class Container(Base):
    __tablename__ = "containers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    case_number: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )

    # ── Identification ───────────────────────────────────────
    container_number: Mapped[str | None] = mapped_column(String(50))
    mbl_number: Mapped[str | None] = mapped_column(String(100))
    size: Mapped[str | None] = mapped_column(String(50))
    terminal: Mapped[str | None] = mapped_column(String(255))
    weight: Mapped[str | None] = mapped_column(String(50))

    # ── Customer / billing ───────────────────────────────────
    delivery_address_company: Mapped[str | None] = mapped_column(Text)
    billing_party: Mapped[str | None] = mapped_column(String(255))
    demurrage: Mapped[str | None] = mapped_column(String(255))
    input_person: Mapped[str | None] = mapped_column(String(255))

    # ── Dates & appointments (free text, as typed by dispatch) ─
    lfd: Mapped[str | None] = mapped_column(String(100))
    eta: Mapped[str | None] = mapped_column(String(100))
    appointment_time: Mapped[str | None] = mapped_column(String(100))
    delivery_appointment: Mapped[str | None] = mapped_column(String(100))
    empty_status: Mapped[str | None] = mapped_column(String(255))
    rt_loc_empty_app: Mapped[str | None] = mapped_column(String(255))

    # ── Equipment & drivers ──────────────────────────────────
    yards: Mapped[str | None] = mapped_column(String(255))
    pu_driver: Mapped[str | None] = mapped_column(String(255))
    driver_id: Mapped[str | None] = mapped_column(String(100))
    chassis_id: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)

    # ── Board position ───────────────────────────────────────
    status: Mapped[str] = mapped_column(String(40), default="AT_TERMINAL", index=True)
    # Soft reference to yards.id; not enforced, may dangle after a yard delete
    yard_id: Mapped[str | None] = mapped_column(String(36), index=True)
    # LOADED | EMPTY
    yard_status: Mapped[str | None] = mapped_column(String(10))
    order_index: Mapped[float | None] = mapped_column(Float)

    # ── Metadata ─────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
