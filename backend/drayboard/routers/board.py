"""Transit board router.

Endpoints:
    GET /api/board/                        Columns with lane-ordered containers
    GET /api/board/suggestions/{status}    Suggested next status (hint only)
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drayboard.database import get_db
from drayboard.middleware.exceptions import InvalidStatusError
from drayboard.models.container import Container
from drayboard.models.yard import Yard
from drayboard.schemas.board import BoardColumnOut, BoardOut, NextStatusOut
from drayboard.services.lanes import build_board
from drayboard.services.status import BOARD_STATUSES, is_valid_status, suggest_next_status

router = APIRouter()


@router.get("/", response_model=BoardOut)
async def get_board(db: AsyncSession = Depends(get_db)):
    containers = await db.execute(
        select(Container).where(Container.status.in_(BOARD_STATUSES))
    )
    yards = await db.execute(select(Yard))
    columns = build_board(containers.scalars().all(), yards.scalars().all())
    return BoardOut(columns=[BoardColumnOut.model_validate(c) for c in columns])


@router.get("/suggestions/{status}", response_model=NextStatusOut)
async def get_next_status(status: str):
    if not is_valid_status(status):
        raise InvalidStatusError(status)
    return NextStatusOut(status=status, suggested=suggest_next_status(status))
