"""
Excel generation utilities for report documents
"""

import io
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from fleet_reports.schemas.export import ExportDocument
from fleet_reports.utils.formatters import excel_value

_THIN = Side(style='thin')


class ExcelReportGenerator:
    """Renders an ExportDocument into an xlsx workbook"""

    SUMMARY_SHEET = "Summary"
    DETAILS_SHEET = "Details"

    def __init__(self):
        self.default_styles = self._create_default_styles()

    def _create_default_styles(self) -> Dict[str, Dict[str, Any]]:
        """Create default cell styles"""
        return {
            'header': {
                'font': Font(bold=True, color='FFFFFF'),
                'fill': PatternFill(start_color='366092', end_color='366092', fill_type='solid'),
                'alignment': Alignment(horizontal='center', vertical='center'),
                'border': Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
            },
            'data': {
                'font': Font(size=10),
                'alignment': Alignment(horizontal='left', vertical='center'),
                'border': Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
            },
            'title': {
                'font': Font(bold=True, size=16, color='366092'),
            },
            'subtitle': {
                'font': Font(bold=True, size=12),
            },
        }

    def _apply_style(self, cell, style_dict: Dict[str, Any]):
        """Apply style to a cell"""
        for attr, value in style_dict.items():
            setattr(cell, attr, value)

    def _write(self, worksheet, row: int, column: int, value: Any):
        """Write one cell; strings always stay literal text, never formulas"""
        cell = worksheet.cell(row=row, column=column, value=excel_value(value))
        if isinstance(cell.value, str):
            cell.data_type = "s"
        return cell

    def _auto_adjust_columns(self, worksheet):
        """Auto-adjust column widths"""
        for column_cells in worksheet.columns:
            length = max(len(str(cell.value or '')) for cell in column_cells)
            worksheet.column_dimensions[get_column_letter(column_cells[0].column)].width = min(length + 2, 50)

    def render(self, document: ExportDocument) -> bytes:
        """Build the workbook in memory and return the xlsx bytes"""
        workbook = Workbook()
        summary = workbook.active
        summary.title = self.SUMMARY_SHEET

        row = 1
        self._apply_style(self._write(summary, row, 1, document.title), self.default_styles['title'])
        row += 1
        for line in document.header:
            self._write(summary, row, 1, line)
            row += 1

        for section in document.sections:
            row += 1
            heading = self._write(summary, row, 1, section.title)
            self._apply_style(heading, self.default_styles['subtitle'])
            row += 1
            for label, value in section.rows:
                self._write(summary, row, 1, label)
                self._write(summary, row, 2, value)
                row += 1

        self._auto_adjust_columns(summary)

        details = workbook.create_sheet(title=self.DETAILS_SHEET)
        for col, header in enumerate(document.table.columns, 1):
            cell = self._write(details, 1, col, header)
            self._apply_style(cell, self.default_styles['header'])

        for row_idx, row_data in enumerate(document.table.rows, 2):
            for col_idx, value in enumerate(row_data, 1):
                cell = self._write(details, row_idx, col_idx, value)
                self._apply_style(cell, self.default_styles['data'])

        self._auto_adjust_columns(details)

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
