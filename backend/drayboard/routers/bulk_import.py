"""Bulk spreadsheet import for containers.

Endpoints:
    GET  /api/containers/import/template   Download CSV template
    POST /api/containers/import            Upload XLSX / CSV sheet

Rows are upserted by case number. Every row needs one: if any row lacks it,
the whole upload is rejected with the offending row numbers and nothing is
written. Each row's position in the sheet becomes its order index.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from drayboard.config import settings
from drayboard.database import get_db
from drayboard.middleware.exceptions import ImportRejectedError
from drayboard.models.container import Container
from drayboard.schemas.container import ImportResult
from drayboard.services.status import DEFAULT_STATUS
from drayboard.utils.spreadsheet_import import (
    UnsupportedSpreadsheetError,
    generate_template_csv,
    read_sheet,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Helpers ─────────────────────────────────────────────────


def _csv_response(csv_text: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([csv_text]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _upsert_by_case_number(
    db: AsyncSession,
    rows: list[dict],
) -> tuple[int, int]:
    """Upsert rows keyed on case_number. Returns (created_count, updated_count).

    New containers start AT_TERMINAL with no yard; existing ones keep their
    status and yard fields. A case number repeated within the sheet lands on
    the same record, the later row overwriting the earlier one.
    """
    case_numbers = {row["case_number"] for row in rows}
    result = await db.execute(
        select(Container).where(Container.case_number.in_(case_numbers))
    )
    existing = {c.case_number: c for c in result.scalars().all()}

    created = 0
    updated = 0

    for position, row_data in enumerate(rows):
        values = dict(row_data)
        values["order_index"] = position
        record = existing.get(row_data["case_number"])

        if record is not None:
            for key, value in values.items():
                setattr(record, key, value)
            updated += 1
        else:
            record = Container(
                status=DEFAULT_STATUS,
                yard_id=None,
                yard_status=None,
                **values,
            )
            db.add(record)
            existing[record.case_number] = record
            created += 1

    await db.flush()
    return created, updated


# ── Container import ────────────────────────────────────────


@router.get("/import/template")
async def container_template():
    return _csv_response(generate_template_csv(), "containers_template.csv")


@router.post("/import", response_model=ImportResult)
async def upload_containers(
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
):
    if file is None:
        raise ImportRejectedError("No file uploaded. Please upload an XLSX or CSV file.")

    content = await file.read()
    if not content:
        raise ImportRejectedError("The uploaded file is empty.")

    try:
        sheet = read_sheet(file.filename, content)
    except UnsupportedSpreadsheetError as exc:
        raise ImportRejectedError(str(exc)) from exc

    if sheet.missing_case_rows:
        raise ImportRejectedError(
            "Case Number is required for every row. Please add it and re-upload.",
            details={"missingRows": sheet.missing_case_rows},
        )
    if not sheet.rows:
        raise ImportRejectedError("The uploaded sheet is empty.")
    if len(sheet.rows) > settings.import_max_rows:
        raise ImportRejectedError(
            f"Too many rows ({len(sheet.rows)}); the limit is {settings.import_max_rows}."
        )

    created, updated = await _upsert_by_case_number(db, sheet.rows)
    logger.info(
        "Imported %s: %d rows, %d created, %d updated",
        file.filename, sheet.total_rows, created, updated,
    )

    return ImportResult(
        inserted_count=created,
        updated_count=updated,
        skipped_count=0,
        total_rows=sheet.total_rows,
    )
