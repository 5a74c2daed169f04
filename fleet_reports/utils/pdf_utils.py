"""
PDF generation utilities for report documents
"""

import io
from typing import Any, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from fleet_reports.schemas.export import ExportDocument, ExportSection, ExportTable
from fleet_reports.utils.formatters import display_number

PAGE_SIZES = {"A4": A4, "letter": letter}

# Tables wider than this switch the page to landscape
WIDE_TABLE_COLUMNS = 8


class PDFReportGenerator:
    """Renders an ExportDocument into PDF bytes"""

    def __init__(self, page_size: str = "A4", margins=None):
        self.page_size = PAGE_SIZES[page_size]
        self.margins = margins or {'top': 2*cm, 'bottom': 2*cm, 'left': 1.5*cm, 'right': 1.5*cm}
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.darkblue,
            spaceAfter=16,
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='ReportHeading',
            parent=self.styles['Heading2'],
            fontSize=13,
            textColor=colors.darkblue,
            spaceBefore=12,
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='ReportNormal',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceAfter=4,
        ))

        self.styles.add(ParagraphStyle(
            name='TableCell',
            parent=self.styles['Normal'],
            fontSize=7,
            leading=9,
        ))

        self.styles.add(ParagraphStyle(
            name='TableHeader',
            parent=self.styles['Normal'],
            fontSize=7,
            leading=9,
            textColor=colors.white,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold'
        ))

    def _paragraph(self, value: Any, style: str) -> Paragraph:
        return Paragraph(escape(display_number(value)), self.styles[style])

    def render(self, document: ExportDocument) -> bytes:
        """Build the PDF in memory and return its bytes"""
        wide = len(document.table.columns) > WIDE_TABLE_COLUMNS
        page_size = landscape(self.page_size) if wide else self.page_size

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=page_size,
            topMargin=self.margins['top'],
            bottomMargin=self.margins['bottom'],
            leftMargin=self.margins['left'],
            rightMargin=self.margins['right'],
            title=document.title,
            invariant=1,
        )

        story: List[Any] = [Paragraph(escape(document.title), self.styles['ReportTitle'])]
        for line in document.header:
            story.append(Paragraph(escape(line), self.styles['ReportNormal']))
        story.append(Spacer(1, 12))

        for section in document.sections:
            story.extend(self._section(section))

        story.extend(self._detail_table(document.table, doc.width))

        doc.build(story)
        return buffer.getvalue()

    def _section(self, section: ExportSection) -> List[Any]:
        flowables: List[Any] = [Paragraph(escape(section.title), self.styles['ReportHeading'])]
        if not section.rows:
            flowables.append(Paragraph("No data", self.styles['ReportNormal']))
            return flowables

        data = [
            [self._paragraph(label, 'TableCell'), self._paragraph(value, 'TableCell')]
            for label, value in section.rows
        ]
        table = Table(data, colWidths=[6*cm, 6*cm], hAlign='LEFT')
        table.setStyle(TableStyle([
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('BACKGROUND', (0, 0), (0, -1), colors.whitesmoke),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        flowables.append(table)
        return flowables

    def _detail_table(self, table_def: ExportTable, available_width: float) -> List[Any]:
        flowables: List[Any] = [Paragraph(escape(table_def.title), self.styles['ReportHeading'])]

        data: List[Sequence[Any]] = [
            [self._paragraph(column, 'TableHeader') for column in table_def.columns]
        ]
        for row in table_def.rows:
            data.append([self._paragraph(value, 'TableCell') for value in row])

        col_width = available_width / max(len(table_def.columns), 1)
        table = Table(data, colWidths=[col_width] * len(table_def.columns), repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#366092')),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F2F2F2')]),
        ]))
        flowables.append(table)
        return flowables
