"""Container management router.

Endpoints:
    GET    /api/containers/               List containers in lane order (?status, ?yardId, ?search)
    GET    /api/containers/{id}           Detail
    POST   /api/containers/               Create container
    PUT    /api/containers/{id}           Partial update
    PUT    /api/containers/{id}/status    Move to a status lane
    DELETE /api/containers/{id}           Delete container
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from drayboard.database import get_db
from drayboard.middleware.exceptions import InvalidStatusError, MissingYardInfoError
from drayboard.schemas.container import (
    ContainerCreate,
    ContainerOut,
    ContainerUpdate,
    StatusMoveRequest,
)
from drayboard.services import containers as container_service
from drayboard.services.lanes import lane_key_for
from drayboard.services.status import YARD_LANE_STATUS, is_valid_status

router = APIRouter()


# ── GET /api/containers/ ─────────────────────────────────────

@router.get("/", response_model=list[ContainerOut])
async def list_containers(
    status: str | None = None,
    yard_id: str | None = Query(None, alias="yardId"),
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Whole collection, or a single lane when ``status`` is given.

    Both are sorted by order index (missing last), newest first on ties.
    The yard lane is per yard, so AT_OTHER_YARD needs ``yardId``.
    ``search`` keeps containers whose number contains it, ignoring case.
    """
    if status is None:
        items = await container_service.list_containers(db, search)
    else:
        if not is_valid_status(status):
            raise InvalidStatusError(status)
        if status == YARD_LANE_STATUS and not yard_id:
            raise MissingYardInfoError("yardId is required to list the AT_OTHER_YARD lane")
        items = await container_service.fetch_lane(db, lane_key_for(status, yard_id), search)
    return [ContainerOut.model_validate(c) for c in items]


# ── GET /api/containers/{container_id} ───────────────────────

@router.get("/{container_id}", response_model=ContainerOut)
async def get_container(
    container_id: str,
    db: AsyncSession = Depends(get_db),
):
    container = await container_service.get_container(db, container_id)
    return ContainerOut.model_validate(container)


# ── POST /api/containers/ ────────────────────────────────────

@router.post("/", response_model=ContainerOut, status_code=201)
async def create_container(
    body: ContainerCreate,
    db: AsyncSession = Depends(get_db),
):
    container = await container_service.create_container(db, body)
    return ContainerOut.model_validate(container)


# ── PUT /api/containers/{container_id} ───────────────────────

@router.put("/{container_id}", response_model=ContainerOut)
async def update_container(
    container_id: str,
    body: ContainerUpdate,
    db: AsyncSession = Depends(get_db),
):
    container = await container_service.update_container(db, container_id, body)
    return ContainerOut.model_validate(container)


# ── PUT /api/containers/{container_id}/status ────────────────

@router.put("/{container_id}/status", response_model=ContainerOut)
async def move_container(
    container_id: str,
    body: StatusMoveRequest,
    db: AsyncSession = Depends(get_db),
):
    container = await container_service.move_container(db, container_id, body)
    return ContainerOut.model_validate(container)


# ── DELETE /api/containers/{container_id} ────────────────────

@router.delete("/{container_id}", response_model=ContainerOut)
async def delete_container(
    container_id: str,
    db: AsyncSession = Depends(get_db),
):
    container = await container_service.delete_container(db, container_id)
    return ContainerOut.model_validate(container)
