import threading

import pytest

from fleet_reports.schemas.common.enums import ExportFormat
from fleet_reports.schemas.export import ExportDocument, ExportTable
from fleet_reports.services.common.errors import RenderError, RenderTimeoutError
from fleet_reports.services.export import ExportRunner, JsonExporter, ReportExporter


class BlockingExporter(ReportExporter):
    format = ExportFormat.PDF
    content_type = "application/pdf"
    extension = "pdf"

    def __init__(self):
        self.release = threading.Event()

    def _render(self, document):
        self.release.wait(5)
        return b"%PDF-late"


class FailingExporter(ReportExporter):
    format = ExportFormat.EXCEL
    content_type = "application/octet-stream"
    extension = "xlsx"

    def _render(self, document):
        raise ValueError("boom")


@pytest.fixture
def document():
    return ExportDocument(title="t", payload={"ok": True}, table=ExportTable(columns=["a"]))


@pytest.fixture
def runner(settings):
    runner = ExportRunner(settings)
    yield runner
    runner.shutdown(wait=False)


def test_returns_rendered_bytes(runner, document):
    assert runner.run(JsonExporter(indent=None), document) == b'{"ok": true}'


def test_timeout_raises_render_timeout(runner, document):
    exporter = BlockingExporter()
    try:
        with pytest.raises(RenderTimeoutError) as excinfo:
            runner.run(exporter, document, timeout=0.05)
    finally:
        exporter.release.set()

    assert isinstance(excinfo.value, RenderError)
    assert excinfo.value.details["timeout_seconds"] == 0.05


def test_render_failure_propagates_as_render_error(runner, document):
    with pytest.raises(RenderError) as excinfo:
        runner.run(FailingExporter(), document)

    assert not isinstance(excinfo.value, RenderTimeoutError)
    assert "boom" in excinfo.value.message


def test_defaults_come_from_settings(settings):
    with ExportRunner(settings) as runner:
        assert runner.max_workers == 2
        assert runner.timeout_seconds == 30


def test_timed_out_render_does_not_starve_later_jobs(settings, document):
    runner = ExportRunner(settings, max_workers=1, timeout_seconds=0.2)
    exporter = BlockingExporter()
    try:
        with pytest.raises(RenderTimeoutError):
            runner.run(exporter, document)

        assert runner.run(JsonExporter(indent=None), document, timeout=2) == b'{"ok": true}'
    finally:
        exporter.release.set()
        runner.shutdown(wait=False)
