"""Write-only report export (CSV and XLSX)."""

from __future__ import annotations

import io
import logging
from numbers import Number
from pathlib import Path

from openpyxl import Workbook
from pydantic import BaseModel

from pos_analytics.core.dates import normalize_date

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _as_mapping(record):
    if isinstance(record, BaseModel):
        return record.model_dump()
    return dict(record)


def _csv_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else ""
    if isinstance(value, Number):
        return "{:.2f}".format(value)
    if isinstance(value, str):
        return '"{}"'.format(value.replace('"', '""'))
    text = str(value)
    return '"{}"'.format(text.replace('"', '""')) if text else ""


def to_csv(records) -> str:
    """Serialize flat records; the first record's keys form the header row."""
    rows = [_as_mapping(record) for record in records or ()]
    if not rows:
        logger.error("No data to export.")
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_csv_cell(row.get(header)) for header in headers))
    return "\n".join(lines)


def export_filename(report_name: str, start, end, ext: str = "csv") -> str:
    start_day = normalize_date(start)
    end_day = normalize_date(end)
    if start_day is None or end_day is None:
        return "{}.{}".format(report_name, ext)
    return "{}-{}-to-{}.{}".format(report_name, start_day.isoformat(), end_day.isoformat(), ext)


def write_csv(records, path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(to_csv(records), encoding="utf-8")
    logger.info("Exported report to %s.", target)
    return target


def _xlsx_cell(value):
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, Number):
        return round(float(value), 2)
    if isinstance(value, (str, int)):
        return value
    return str(value)


def to_xlsx(records, sheet_name: str = "Report") -> bytes:
    rows = [_as_mapping(record) for record in records or ()]
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name[:31] or "Report"

    if rows:
        headers = list(rows[0].keys())
        worksheet.append(headers)
        for row in rows:
            worksheet.append([_xlsx_cell(row.get(header)) for header in headers])
    else:
        logger.error("No data to export.")

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = [
    "CSV_MEDIA_TYPE",
    "XLSX_MEDIA_TYPE",
    "export_filename",
    "to_csv",
    "to_xlsx",
    "write_csv",
]
