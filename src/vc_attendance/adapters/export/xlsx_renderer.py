"""XLSX rendering of exported leaderboards using openpyxl."""

from __future__ import annotations

import io
import logging
from datetime import datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from vc_attendance.domain.models import ExportTable

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Stats"
COLUMN_WIDTHS = (30, 20)


def export_filename(window: str) -> str:
    """Name of the downloadable file for a leaderboard window."""
    return f"attendance_{window}.xlsx"


def render_xlsx(
    table: ExportTable, creator: str = "Discord VC Tracker", created: datetime | None = None
) -> bytes:
    """Render a table into an XLSX workbook with a single ``Stats`` sheet.

    Args:
        table: Headers and rows to write.
        creator: Workbook creator property.
        created: Workbook creation time; now when omitted.

    Returns:
        The workbook file content.
    """
    workbook = Workbook()
    workbook.properties.creator = creator
    workbook.properties.created = created or datetime.now()

    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(list(table.headers))
    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width
    for row in table.rows:
        sheet.append(list(row))

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.debug(f"Rendered workbook with {len(table.rows)} rows")
    return buffer.getvalue()
