"""Spreadsheet parsing for container bulk import (XLSX or CSV).

Dispatch sheets come with loosely formatted headers ("Container No",
"Payments/Demurrage/Pier Pass", "Notes / Comments" …). Each header is
normalized (lower-case, runs of non-alphanumerics → "_", trimmed) and looked
up in HEADER_MAP; unknown columns are ignored.
"""

import csv
import io
import re
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from itertools import zip_longest
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

HEADER_MAP = {
    "case_number": "case_number",
    "input_person": "input_person",
    "eta": "eta",
    "container": "container_number",
    "container_number": "container_number",
    "container_no": "container_number",
    "mbl": "mbl_number",
    "chassis": "chassis_id",
    "driver_pp": "driver_id",
    "payments_demurrage_pier_pass": "demurrage",
    "size": "size",
    "terminals": "terminal",
    "lfd": "lfd",
    "appt": "appointment_time",
    "notes_comments": "notes",
    "delivery_appt": "delivery_appointment",
    "empty_status": "empty_status",
    "rt_loc_empty_appt": "rt_loc_empty_app",
    "yards": "yards",
    "pu_driver": "pu_driver",
    "delivery_address_company_name_warehouse_contract": "delivery_address_company",
    "delivery_address_company_name": "delivery_address_company",
    "billing_party": "billing_party",
    "weight": "weight",
}

# Column headers written to the downloadable template
TEMPLATE_COLUMNS = [
    "Case Number", "Container No", "MBL", "Size", "Terminals", "ETA", "LFD",
    "APPT", "Delivery APPT", "Delivery Address (Company Name/Warehouse Contract)",
    "Billing Party", "Weight", "Payments/Demurrage/Pier Pass", "Chassis",
    "Driver PP", "PU Driver", "Empty Status", "RT LOC EMPTY APPT", "Yards",
    "Input Person", "Notes/Comments",
]

TEMPLATE_SAMPLE = {
    "Case Number": "CASE-1001",
    "Container No": "MSCU1234567",
    "MBL": "MEDU12345678",
    "Size": "40HC",
    "Terminals": "APM",
    "ETA": "2026-03-02",
    "LFD": "2026-03-06",
    "Billing Party": "Acme Imports",
}

XLSX_TYPES = (".xlsx", ".xlsm")
CSV_TYPES = (".csv",)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class UnsupportedSpreadsheetError(ValueError):
    pass


@dataclass
class SheetRows:
    rows: list[dict[str, Any]] = field(default_factory=list)
    # 1-based data-row numbers lacking a case number
    missing_case_rows: list[int] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows) + len(self.missing_case_rows)


def normalize_header(header: object) -> str:
    return _NON_ALNUM.sub("_", str(header).lower()).strip("_")


def _cell_text(value: Any) -> str:
    # Empty XLSX cells and short CSV rows both come through as ""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def map_row(raw_row: dict[str, Any]) -> dict[str, str]:
    """Map one raw sheet row to container fields.

    Every mapped column is present in the result, blank cells as "", so a
    cleared cell overwrites the stored value on re-import.
    """
    mapped: dict[str, str] = {}
    for header, value in raw_row.items():
        if header is None:
            continue
        db_field = HEADER_MAP.get(normalize_header(header))
        if db_field:
            mapped[db_field] = _cell_text(value)
    return mapped


def _is_blank(raw_row: dict[str, Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in raw_row.values())


def _read_xlsx(content: bytes) -> list[dict[str, Any]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError) as exc:
        raise UnsupportedSpreadsheetError("The uploaded file is not a readable XLSX workbook.") from exc
    try:
        if not workbook.worksheets:
            return []
        values = workbook.worksheets[0].iter_rows(values_only=True)
        headers = next(values, None)
        if not headers:
            return []
        # Trailing empty cells may be cut off; pad them back as blanks
        return [dict(zip_longest(headers, row)) for row in values]
    finally:
        workbook.close()


def _read_csv(content: bytes) -> list[dict[str, Any]]:
    try:
        text = content.decode("utf-8-sig")  # handle BOM from Excel
    except UnicodeDecodeError as exc:
        raise UnsupportedSpreadsheetError("CSV files must be UTF-8 encoded.") from exc
    return list(csv.DictReader(io.StringIO(text)))


def read_sheet(filename: str, content: bytes) -> SheetRows:
    """Parse the first sheet of an uploaded file into mapped rows."""
    name = (filename or "").lower()
    if name.endswith(XLSX_TYPES):
        raw_rows = _read_xlsx(content)
    elif name.endswith(CSV_TYPES):
        raw_rows = _read_csv(content)
    else:
        raise UnsupportedSpreadsheetError(
            f"Unsupported file type '{filename}'. Please upload an XLSX or CSV file."
        )

    result = SheetRows()
    row_num = 0
    for raw_row in raw_rows:
        if _is_blank(raw_row):
            continue
        row_num += 1
        mapped = map_row(raw_row)
        if not mapped.get("case_number"):
            result.missing_case_rows.append(row_num)
        else:
            result.rows.append(mapped)
    return result


def generate_template_csv(
    columns: list[str] = TEMPLATE_COLUMNS,
    sample_row: dict[str, str] | None = TEMPLATE_SAMPLE,
) -> str:
    """Generate CSV template string with headers and optional sample row."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(columns)
    if sample_row:
        writer.writerow([sample_row.get(h, "") for h in columns])
    return output.getvalue()
