"""Yard management router.

Endpoints:
    GET    /api/yards/        List yards (by name)
    POST   /api/yards/        Create yard
    PUT    /api/yards/{id}    Update yard
    DELETE /api/yards/{id}    Delete yard

Deleting a yard does not touch containers parked there; their yard_id is a
soft reference and the board labels it as an unknown yard.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drayboard.config import settings
from drayboard.database import get_db
from drayboard.middleware.exceptions import EmptyRequiredFieldError, ResourceNotFoundError
from drayboard.models.yard import Yard
from drayboard.schemas.yard import YardCreate, YardOut, YardUpdate
from drayboard.utils.cache import cached, invalidate_cache

router = APIRouter()


async def _get_yard(db: AsyncSession, yard_id: str) -> Yard:
    result = await db.execute(select(Yard).where(Yard.id == yard_id))
    yard = result.scalar_one_or_none()
    if not yard:
        raise ResourceNotFoundError("Yard", yard_id)
    return yard


@router.get("/", response_model=list[YardOut])
@cached(ttl=settings.yards_cache_ttl, prefix="yards")
async def list_yards(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Yard).order_by(Yard.name))
    return [YardOut.model_validate(y) for y in result.scalars().all()]


@router.post("/", response_model=YardOut, status_code=201)
async def create_yard(
    body: YardCreate,
    db: AsyncSession = Depends(get_db),
):
    name = (body.name or "").strip()
    if not name:
        raise EmptyRequiredFieldError("name")

    yard = Yard(
        id=str(uuid.uuid4()),
        name=name,
        address=body.address,
        contact=body.contact,
        notes=body.notes,
    )
    db.add(yard)
    await db.flush()
    await invalidate_cache("yards:*")
    return YardOut.model_validate(yard)


@router.put("/{yard_id}", response_model=YardOut)
async def update_yard(
    yard_id: str,
    body: YardUpdate,
    db: AsyncSession = Depends(get_db),
):
    yard = await _get_yard(db, yard_id)

    updates = body.model_dump(exclude_unset=True)
    if "name" in updates:
        name = (updates["name"] or "").strip()
        if not name:
            raise EmptyRequiredFieldError("name")
        updates["name"] = name
    for key, value in updates.items():
        setattr(yard, key, value)
    await db.flush()
    await invalidate_cache("yards:*")
    return YardOut.model_validate(yard)


@router.delete("/{yard_id}", response_model=YardOut)
async def delete_yard(
    yard_id: str,
    db: AsyncSession = Depends(get_db),
):
    yard = await _get_yard(db, yard_id)
    out = YardOut.model_validate(yard)
    await db.delete(yard)
    await db.flush()
    await invalidate_cache("yards:*")
    return out
