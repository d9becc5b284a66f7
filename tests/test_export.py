"""Tests for export tables and XLSX rendering."""

import io
from datetime import datetime

from openpyxl import load_workbook

from vc_attendance.adapters.export import XLSX_MEDIA_TYPE, export_filename, render_xlsx
from vc_attendance.application.services import to_table
from vc_attendance.domain.models import ExportTable, LeaderboardEntry


class TestToTable:
    """Tests for shaping leaderboards as tables."""

    def test_rows_follow_leaderboard_order(self) -> None:
        """Given ranked entries, when converting, then rows keep their order and formatting."""
        entries = [
            LeaderboardEntry(user="alice", seconds=3600, time="01:00:00"),
            LeaderboardEntry(user="bob", seconds=60, time="00:01:00"),
        ]

        table = to_table(entries)

        assert table.headers == ("User", "VC Time")
        assert table.rows == [("alice", "01:00:00"), ("bob", "00:01:00")]

    def test_empty_leaderboard_gives_header_only_table(self) -> None:
        """Given no entries, when converting, then the table has headers and no rows."""
        table = to_table([])

        assert table.headers == ("User", "VC Time")
        assert table.rows == []


class TestRenderXlsx:
    """Tests for the openpyxl workbook."""

    def test_workbook_has_stats_sheet_with_rows(self) -> None:
        """Given a table, when rendering, then the Stats sheet holds headers and rows in order."""
        table = ExportTable(rows=[("alice", "01:00:00"), ("bob", "00:01:00")])

        workbook = load_workbook(io.BytesIO(render_xlsx(table)))

        assert workbook.sheetnames == ["Stats"]
        values = list(workbook["Stats"].iter_rows(values_only=True))
        assert values == [("User", "VC Time"), ("alice", "01:00:00"), ("bob", "00:01:00")]

    def test_workbook_sets_creator_and_column_widths(self) -> None:
        """Given a creator, when rendering, then properties and widths are set."""
        created = datetime(2025, 3, 10, 12, 0, 0)

        workbook = load_workbook(
            io.BytesIO(render_xlsx(ExportTable(rows=[]), creator="Tracker", created=created))
        )

        assert workbook.properties.creator == "Tracker"
        sheet = workbook["Stats"]
        assert sheet.column_dimensions["A"].width == 30
        assert sheet.column_dimensions["B"].width == 20

    def test_empty_table_renders_header_row(self) -> None:
        """Given no rows, when rendering, then the sheet still has its header."""
        workbook = load_workbook(io.BytesIO(render_xlsx(ExportTable(rows=[]))))

        assert list(workbook["Stats"].iter_rows(values_only=True)) == [("User", "VC Time")]

    def test_download_metadata(self) -> None:
        """Given a window, when naming the download, then the name and media type match."""
        assert export_filename("weekly") == "attendance_weekly.xlsx"
        assert XLSX_MEDIA_TYPE.endswith("spreadsheetml.sheet")
