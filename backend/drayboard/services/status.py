"""Container status set and the status/yard consistency rule.

A requested (status, yard_id, yard_status) triple is validated before every
write that touches a container's status or yard fields:
  - status must be one of the fixed ContainerStatus values
  - AT_OTHER_YARD needs a yard id and a LOADED / EMPTY yard status
  - every other status clears both yard fields

Transitions are not sequenced: any valid status may follow any other.
The progression map below only drives suggest_next_status(), which the
board uses to preselect a destination.
"""

import enum
from typing import NamedTuple

from drayboard.middleware.exceptions import InvalidStatusError, MissingYardInfoError


class ContainerStatus(str, enum.Enum):
    AT_TERMINAL = "AT_TERMINAL"
    IN_TRANSIT_FROM_TERMINAL = "IN_TRANSIT_FROM_TERMINAL"
    ON_WAY_TO_CUSTOMER = "ON_WAY_TO_CUSTOMER"
    ON_WAY_TO_YARD = "ON_WAY_TO_YARD"
    AT_CUSTOMER_YARD = "AT_CUSTOMER_YARD"
    AT_OTHER_YARD = "AT_OTHER_YARD"
    EMPTY_AT_CUSTOMER = "EMPTY_AT_CUSTOMER"
    RETURNING_TO_TERMINAL = "RETURNING_TO_TERMINAL"
    RETURNED = "RETURNED"


class YardStatus(str, enum.Enum):
    LOADED = "LOADED"
    EMPTY = "EMPTY"


DEFAULT_STATUS = ContainerStatus.AT_TERMINAL.value
YARD_LANE_STATUS = ContainerStatus.AT_OTHER_YARD.value

STATUS_VALUES = tuple(s.value for s in ContainerStatus)
YARD_STATUS_VALUES = tuple(s.value for s in YardStatus)

STATUS_LABELS = {
    "AT_TERMINAL": "At Terminal",
    "IN_TRANSIT_FROM_TERMINAL": "In Transit from Terminal",
    "ON_WAY_TO_CUSTOMER": "On the Way to Customer",
    "ON_WAY_TO_YARD": "On the Way to Yard",
    "AT_CUSTOMER_YARD": "At Customer Yard (Loaded)",
    "AT_OTHER_YARD": "Yards",
    "EMPTY_AT_CUSTOMER": "Empty at Customer",
    "RETURNING_TO_TERMINAL": "Returning to Terminal",
    "RETURNED": "Returned",
}

# Board column order; AT_TERMINAL containers are worked from the dashboard
BOARD_STATUSES = (
    "IN_TRANSIT_FROM_TERMINAL",
    "ON_WAY_TO_CUSTOMER",
    "ON_WAY_TO_YARD",
    "AT_CUSTOMER_YARD",
    "EMPTY_AT_CUSTOMER",
    "AT_OTHER_YARD",
    "RETURNING_TO_TERMINAL",
    "RETURNED",
)

_NEXT_STATUS = {
    "AT_TERMINAL": "IN_TRANSIT_FROM_TERMINAL",
    "IN_TRANSIT_FROM_TERMINAL": "ON_WAY_TO_CUSTOMER",
    "ON_WAY_TO_CUSTOMER": "AT_CUSTOMER_YARD",
    "ON_WAY_TO_YARD": "AT_OTHER_YARD",
    "AT_CUSTOMER_YARD": "EMPTY_AT_CUSTOMER",
    "AT_OTHER_YARD": "EMPTY_AT_CUSTOMER",
    "EMPTY_AT_CUSTOMER": "RETURNING_TO_TERMINAL",
    "RETURNING_TO_TERMINAL": "RETURNED",
    "RETURNED": None,
}


class StatusTriple(NamedTuple):
    """Normalized status fields, ready to merge into a container record."""
    status: str
    yard_id: str | None
    yard_status: str | None


def is_valid_status(value: object) -> bool:
    return isinstance(value, str) and value in STATUS_VALUES


def validate_transition(
    status: object,
    yard_id: object = None,
    yard_status: object = None,
) -> StatusTriple:
    """Validate a requested status and normalize the yard fields.

    Raises:
        InvalidStatusError: status is not one of ContainerStatus.
        MissingYardInfoError: AT_OTHER_YARD without a yard id or with a
            yard status other than LOADED / EMPTY.
    """
    if isinstance(status, enum.Enum):
        status = status.value
    if not is_valid_status(status):
        raise InvalidStatusError(status)

    if status != YARD_LANE_STATUS:
        return StatusTriple(status, None, None)

    if isinstance(yard_status, enum.Enum):
        yard_status = yard_status.value
    if not isinstance(yard_id, str) or not yard_id.strip():
        raise MissingYardInfoError("yardId is required when status is AT_OTHER_YARD")
    if yard_status not in YARD_STATUS_VALUES:
        raise MissingYardInfoError(
            "yardStatus must be LOADED or EMPTY when status is AT_OTHER_YARD"
        )
    return StatusTriple(status, yard_id, yard_status)


def suggest_next_status(status: str | None) -> str | None:
    """Suggested destination for a container currently in ``status``.

    A hint for preselecting the move target; validate_transition() accepts
    any valid status regardless of what is suggested here.
    """
    return _NEXT_STATUS.get(status or DEFAULT_STATUS)
