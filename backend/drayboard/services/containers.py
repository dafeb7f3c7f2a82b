"""Container persistence: lane queries, create, update, move, delete.

Each public coroutine performs at most one container write on the given
session. Validation always happens before the ORM object is touched, so a
rejected request leaves the record unchanged; the request-scoped session
commits or rolls back as a whole.
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from drayboard.middleware.exceptions import EmptyRequiredFieldError, ResourceNotFoundError
from drayboard.models.container import Container
from drayboard.schemas.container import ContainerCreate, ContainerUpdate, StatusMoveRequest
from drayboard.services.lanes import LaneKey, lane_key_for, lane_of
from drayboard.services.ordering import (
    compute_order_index,
    is_explicit_index,
    sort_lane,
    top_order_index,
)
from drayboard.services.status import DEFAULT_STATUS, YARD_LANE_STATUS, validate_transition

logger = logging.getLogger(__name__)

_STATUS_FIELDS = {"status", "yard_id", "yard_status", "order_index"}


def _lane_filter(key: LaneKey) -> list:
    clauses = [Container.status == key.status]
    if key.status == YARD_LANE_STATUS:
        if key.yard_id is None:
            clauses.append(Container.yard_id.is_(None))
        else:
            clauses.append(Container.yard_id == key.yard_id)
    return clauses


def _search_filter(search: str | None) -> list:
    """Case-insensitive containerNumber substring match."""
    if not search or not search.strip():
        return []
    needle = search.strip().lower()
    return [func.lower(Container.container_number).contains(needle, autoescape=True)]


def _require_case_number(value: str | None) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise EmptyRequiredFieldError("caseNumber")
    return trimmed


# ── Queries ──────────────────────────────────────────────────

async def list_containers(db: AsyncSession, search: str | None = None) -> list[Container]:
    """Whole collection in lane order."""
    result = await db.execute(select(Container).where(*_search_filter(search)))
    return sort_lane(result.scalars().all())


async def fetch_lane(
    db: AsyncSession,
    key: LaneKey,
    search: str | None = None,
) -> list[Container]:
    """Current members of a lane in board order."""
    result = await db.execute(
        select(Container).where(*_lane_filter(key), *_search_filter(search))
    )
    return sort_lane(result.scalars().all())


async def top_index_for_lane(db: AsyncSession, key: LaneKey) -> float:
    """One less than the lane's smallest order index, 0 for an empty lane."""
    result = await db.execute(
        select(func.min(Container.order_index)).where(*_lane_filter(key))
    )
    return top_order_index([result.scalar()])


async def place_in_lane(
    db: AsyncSession,
    key: LaneKey,
    position: str = "top",
    exclude_id: str | None = None,
) -> float:
    """Order index for ``position`` inside ``key``, from its live members."""
    members = await fetch_lane(db, key)
    return compute_order_index(members, position=position, exclude_id=exclude_id)


async def get_container(db: AsyncSession, container_id: str) -> Container:
    result = await db.execute(select(Container).where(Container.id == container_id))
    container = result.scalar_one_or_none()
    if not container:
        raise ResourceNotFoundError("Container", container_id)
    return container


# ── Writes ───────────────────────────────────────────────────

async def create_container(db: AsyncSession, body: ContainerCreate) -> Container:
    case_number = _require_case_number(body.case_number)
    triple = validate_transition(body.status or DEFAULT_STATUS, body.yard_id, body.yard_status)

    if is_explicit_index(body.order_index):
        order_index = body.order_index
    else:
        order_index = await top_index_for_lane(db, lane_key_for(triple.status, triple.yard_id))

    fields = body.model_dump(exclude=_STATUS_FIELDS | {"case_number"})
    container = Container(
        id=str(uuid.uuid4()),
        case_number=case_number,
        status=triple.status,
        yard_id=triple.yard_id,
        yard_status=triple.yard_status,
        order_index=order_index,
        **fields,
    )
    db.add(container)
    await db.flush()
    logger.info("Created container %s in %s", case_number, triple.status)
    return container


async def update_container(
    db: AsyncSession,
    container_id: str,
    body: ContainerUpdate,
) -> Container:
    """Apply a partial update.

    Status and yard fields are merged with the stored values and validated
    together, so the yard/status lockstep holds even when only one of them
    is supplied. A lane change without an explicit index places the
    container at the top of its new lane; other edits keep its position.
    """
    container = await get_container(db, container_id)
    updates = body.model_dump(exclude_unset=True)

    if "case_number" in updates:
        updates["case_number"] = _require_case_number(updates["case_number"])

    if {"status", "yard_id", "yard_status"} & updates.keys():
        current = lane_of(container)
        triple = validate_transition(
            updates.get("status", container.status or DEFAULT_STATUS),
            updates.get("yard_id", container.yard_id),
            updates.get("yard_status", container.yard_status),
        )
        updates.update(triple._asdict())
        new_lane = lane_key_for(triple.status, triple.yard_id)
        if new_lane != current and not is_explicit_index(updates.get("order_index")):
            updates["order_index"] = await top_index_for_lane(db, new_lane)

    if "order_index" in updates and not is_explicit_index(updates["order_index"]):
        updates.pop("order_index")

    for key, value in updates.items():
        setattr(container, key, value)
    await db.flush()
    return container


async def move_container(
    db: AsyncSession,
    container_id: str,
    body: StatusMoveRequest,
) -> Container:
    """Move a container to a status lane.

    A finite ``orderIndex`` from the client (already computed against the
    lane it rendered) is stored as-is. Without one, an explicit ``position``
    is resolved against the lane's live members, and a bare move goes to
    the top of the destination lane.
    """
    if not body.status:
        raise EmptyRequiredFieldError("status")
    triple = validate_transition(body.status, body.yard_id, body.yard_status)

    container = await get_container(db, container_id)
    lane = lane_key_for(triple.status, triple.yard_id)
    if is_explicit_index(body.order_index):
        order_index = body.order_index
    elif body.position:
        order_index = await place_in_lane(db, lane, body.position, exclude_id=container.id)
    else:
        order_index = await top_index_for_lane(db, lane)

    container.status = triple.status
    container.yard_id = triple.yard_id
    container.yard_status = triple.yard_status
    container.order_index = order_index
    await db.flush()
    logger.info(
        "Moved container %s to %s (yard=%s, order_index=%s)",
        container.case_number, triple.status, triple.yard_id, order_index,
    )
    return container


async def delete_container(db: AsyncSession, container_id: str) -> Container:
    container = await get_container(db, container_id)
    await db.delete(container)
    await db.flush()
    return container
