"""
Report exporters and the render worker pool.
"""
from .base import ReportExporter
from .csv_exporter import CsvExporter
from .excel_exporter import ExcelExporter
from .export_runner import ExportRunner
from .json_exporter import JsonExporter
from .pdf_exporter import PdfExporter
from .registry import ExporterRegistry

__all__ = [
    "ReportExporter",
    "JsonExporter",
    "CsvExporter",
    "PdfExporter",
    "ExcelExporter",
    "ExporterRegistry",
    "ExportRunner",
]
