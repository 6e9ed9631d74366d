"""
Fleet Management API — Spreadsheet Builder
==========================================

What:  Renders trajectory export records into an .xlsx workbook.
How:   openpyxl workbook saved into an in-memory buffer; the
       bytes are handed to EmailService as an attachment.

Layout:
    Sheet "Trajectories"
    Row 1:  Taxi ID | Plate | Date | Latitude | Longitude
    Row 2+: one row per ExportRecord, in the order given
"""

import io
import logging
from typing import Sequence

from openpyxl import Workbook

from fleet_api.schemas.trajectory import ExportRecord

logger = logging.getLogger(__name__)

SHEET_TITLE = "Trajectories"
HEADER = ("Taxi ID", "Plate", "Date", "Latitude", "Longitude")
DATE_CELL_FORMAT = "yyyy-mm-dd hh:mm:ss"


class SpreadsheetService:
    def build_trajectory_workbook(self, records: Sequence[ExportRecord]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE
        sheet.append(HEADER)

        for record in records:
            sheet.append([
                record.taxi_id,
                record.plate,
                record.date,
                record.latitude,
                record.longitude,
            ])
            sheet.cell(row=sheet.max_row, column=3).number_format = DATE_CELL_FORMAT

        sheet.column_dimensions["C"].width = 20

        buffer = io.BytesIO()
        workbook.save(buffer)
        content = buffer.getvalue()
        logger.info("Built trajectory workbook: %d rows, %d bytes", len(records), len(content))
        return content


spreadsheet_service = SpreadsheetService()
