"""Export adapters."""

from vc_attendance.adapters.export.xlsx_renderer import (
    XLSX_MEDIA_TYPE,
    export_filename,
    render_xlsx,
)

__all__ = ["XLSX_MEDIA_TYPE", "export_filename", "render_xlsx"]
