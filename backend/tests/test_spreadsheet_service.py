"""Spreadsheet export tests: the workbook is read back with openpyxl."""

import io
from datetime import datetime

from openpyxl import load_workbook

from fleet_api.schemas.trajectory import ExportRecord
from fleet_api.services.spreadsheet_service import HEADER, SpreadsheetService


def read_rows(content: bytes):
    workbook = load_workbook(io.BytesIO(content))
    sheet = workbook["Trajectories"]
    return [tuple(cell.value for cell in row) for row in sheet.iter_rows()]


class TestBuildTrajectoryWorkbook:

    def setup_method(self):
        self.service = SpreadsheetService()

    def test_header_and_rows_in_given_order(self):
        records = [
            ExportRecord(taxi_id=7, plate="ABC-7007", date=datetime(2024, 3, 1, 8, 0),
                         latitude=39.9, longitude=116.4),
            ExportRecord(taxi_id=7, plate="ABC-7007", date=datetime(2024, 3, 1, 9, 30),
                         latitude=39.91, longitude=116.41),
        ]

        rows = read_rows(self.service.build_trajectory_workbook(records))

        assert rows[0] == HEADER
        assert rows[1] == (7, "ABC-7007", datetime(2024, 3, 1, 8, 0), 39.9, 116.4)
        assert rows[2][2] == datetime(2024, 3, 1, 9, 30)
        assert len(rows) == 3

    def test_empty_export_still_has_header(self):
        content = self.service.build_trajectory_workbook([])

        assert content[:2] == b"PK"
        assert read_rows(content) == [HEADER]
