import csv
import io
import json

import pytest
from openpyxl import load_workbook

from fleet_reports.schemas.common.enums import ExportFormat, ReportType, UserRole
from fleet_reports.schemas.export import ENERGY_COLUMNS, ExportDocument, ExportSection, ExportTable
from fleet_reports.schemas.reports import ReportRequest
from fleet_reports.services.analytics import ReportAssembler
from fleet_reports.services.common.errors import BadRequestError, RenderError
from fleet_reports.services.export import (
    CsvExporter,
    ExcelExporter,
    ExporterRegistry,
    JsonExporter,
    PdfExporter,
    ReportExporter,
)

from tests.conftest import ADMIN_ID, END, NOW, START


@pytest.fixture
def plant_report(fleet, settings):
    assembler = ReportAssembler(fleet, settings, clock=lambda: NOW)
    return assembler.assemble(ReportRequest(
        report_type=ReportType.PLANT_PERFORMANCE,
        start_date=START,
        end_date=END,
        requester_id=ADMIN_ID,
        requester_role=UserRole.ADMIN,
        plant_id=1,
    ))


@pytest.fixture
def small_document():
    return ExportDocument(
        title="Sample",
        payload={"a": 1},
        header=["Period: 2024-01-01 to 2024-01-02"],
        sections=[ExportSection("Totals", [("Sum", 1.5), ("Average", None)])],
        table=ExportTable(
            columns=list(ENERGY_COLUMNS),
            rows=[
                ["2024-01-01", 1, 1.5, 1.5, 1.5, 1.5, "kWh"],
                ["2024-01-02", 0, 0.0, None, None, None, "kWh"],
            ],
        ),
    )


def test_json_round_trip_equals_report(plant_report):
    content = JsonExporter().export(plant_report.to_export_document())

    parsed = json.loads(content)
    assert parsed == plant_report.model_dump(mode="json", by_alias=True)
    assert "energyGeneration" in parsed
    assert parsed["energyGeneration"]["dailyData"][0]["date"] == "2024-01-01"


def test_json_keeps_nulls_for_no_data(fleet, settings):
    report = ReportAssembler(fleet, settings, clock=lambda: NOW).assemble(ReportRequest(
        report_type=ReportType.PLANT_PERFORMANCE,
        start_date=START,
        end_date=END,
        requester_id=ADMIN_ID,
        requester_role=UserRole.ADMIN,
        plant_id=3,
    ))

    parsed = json.loads(JsonExporter().export(report.to_export_document()))
    assert parsed["deviceUptime"]["uptimePercentage"] is None
    assert parsed["alarmStatistics"]["resolutionTime"]["avgMinutes"] is None


def test_csv_header_and_empty_cells(small_document):
    content = CsvExporter().export(small_document).decode("utf-8")

    rows = list(csv.reader(io.StringIO(content)))
    assert rows[0] == ["date", "count", "sum", "avg", "min", "max", "unit"]
    assert rows[1] == ["2024-01-01", "1", "1.5", "1.5", "1.5", "1.5", "kWh"]
    assert rows[2] == ["2024-01-02", "0", "0.0", "", "", "", "kWh"]


def test_csv_quotes_embedded_commas():
    document = ExportDocument(
        title="Alarms",
        payload={},
        table=ExportTable(columns=["id", "message"], rows=[[1, 'Fault, "hot" inverter']]),
    )

    rows = list(csv.reader(io.StringIO(CsvExporter().export(document).decode("utf-8"))))
    assert rows[1] == ["1", 'Fault, "hot" inverter']


def test_pdf_renders_bytes(plant_report):
    content = PdfExporter(page_size="A4").export(plant_report.to_export_document())

    assert content.startswith(b"%PDF")


def test_pdf_escapes_markup(small_document):
    small_document.sections.append(ExportSection("Notes", [("<b>unclosed", "a & b")]))

    assert PdfExporter().export(small_document).startswith(b"%PDF")


def test_excel_has_summary_and_details_sheets(small_document):
    content = ExcelExporter().export(small_document)

    workbook = load_workbook(io.BytesIO(content))
    assert workbook.sheetnames == ["Summary", "Details"]

    details = workbook["Details"]
    header = [cell.value for cell in details[1]]
    assert header == ENERGY_COLUMNS
    assert [cell.value for cell in details[3]] == ["2024-01-02", 0, 0.0, None, None, None, "kWh"]
    assert details.max_row == 3


def test_excel_illegal_characters_raise_render_error(small_document):
    small_document.table.rows.append(["bad\x01value", 1, 1.0, 1.0, 1.0, 1.0, "kWh"])

    with pytest.raises(RenderError) as excinfo:
        ExcelExporter().export(small_document)
    assert excinfo.value.export_format == "excel"
    assert excinfo.value.__cause__ is not None


def test_content_types():
    assert JsonExporter.content_type == "application/json"
    assert CsvExporter.content_type == "text/csv"
    assert PdfExporter.content_type == "application/pdf"
    assert ExcelExporter.content_type == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert ExcelExporter.extension == "xlsx"


def test_registry_lookup_and_extension(small_document):
    registry = ExporterRegistry.default()

    assert isinstance(registry.get(ExportFormat.CSV), CsvExporter)
    assert isinstance(registry.get("excel"), ExcelExporter)
    with pytest.raises(BadRequestError):
        registry.get("xml")

    class TsvExporter(ReportExporter):
        format = ExportFormat.CSV
        content_type = "text/tab-separated-values"
        extension = "tsv"

        def _render(self, document):
            return b"\t".join(c.encode() for c in document.table.columns)

    registry.register(TsvExporter())
    assert registry.get(ExportFormat.CSV).export(small_document).startswith(b"date\tcount")


def test_excel_keeps_formula_like_text_literal(small_document):
    small_document.header.append("=HYPERLINK(\"http://example.com\")")
    small_document.sections.append(ExportSection("Notes", [("=SUM(A1:A2)", "@cmd")]))
    small_document.table.rows.append(["=1+1", 1, 1.0, 1.0, 1.0, 1.0, "kWh"])

    workbook = load_workbook(io.BytesIO(ExcelExporter().export(small_document)))

    cell = workbook["Details"]["A4"]
    assert cell.value == "=1+1"
    assert cell.data_type == "s"
    summary_values = {c.value: c.data_type for row in workbook["Summary"].iter_rows() for c in row if c.value}
    assert summary_values["=SUM(A1:A2)"] == "s"
    assert summary_values["=HYPERLINK(\"http://example.com\")"] == "s"
    assert workbook["Details"]["B4"].data_type == "n"
