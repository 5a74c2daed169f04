"""
Worker pool for slow renderers.

PDF and Excel rendering run on a thread pool so a stuck render cannot hold
the caller beyond its deadline.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from typing import Optional

from fleet_reports.config.settings import Settings, get_settings
from fleet_reports.schemas.export import ExportDocument
from fleet_reports.services.common.errors import RenderTimeoutError

from .base import ReportExporter

logger = logging.getLogger(__name__)


class ExportRunner:
    """
    Runs exporters on a bounded ThreadPoolExecutor.

    A render that is already running cannot be stopped, so a timeout
    replaces the pool; the stuck thread keeps only the retired pool busy.

    Usage:
        >>> with ExportRunner() as runner:
        ...     content = runner.run(PdfExporter(), document)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        max_workers: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        settings = settings or get_settings()
        self.max_workers = max_workers or settings.EXPORT_MAX_WORKERS
        self.timeout_seconds = timeout_seconds or settings.EXPORT_TIMEOUT_SECONDS
        self._lock = threading.Lock()
        self._executor = self._new_executor()

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="export")

    def _retire_executor(self, stuck: ThreadPoolExecutor) -> None:
        """Hand later jobs a fresh pool; the stuck one finishes in the background."""
        with self._lock:
            if self._executor is stuck:
                self._executor = self._new_executor()
        stuck.shutdown(wait=False)

    def run(
        self,
        exporter: ReportExporter,
        document: ExportDocument,
        timeout: Optional[float] = None,
    ) -> bytes:
        """
        Render on the pool and wait for the result.

        Raises:
            RenderTimeoutError: Render did not finish within the timeout
            RenderError: Render failed
        """
        timeout = timeout if timeout is not None else self.timeout_seconds
        with self._lock:
            executor = self._executor
            future = executor.submit(exporter.export, document)
        try:
            return future.result(timeout=timeout)
        except TimeoutError as exc:
            if not future.cancel():
                self._retire_executor(executor)
            logger.error(
                f"Export render timeout after {timeout}s",
                extra={"export_format": exporter.format.value, "title": document.title},
            )
            raise RenderTimeoutError(
                f"Rendering {exporter.format.value} export timed out after {timeout}s",
                export_format=exporter.format.value,
                details={"timeout_seconds": timeout},
            ) from exc

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor = self._executor
        executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "ExportRunner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.shutdown(wait=False)
        return False
