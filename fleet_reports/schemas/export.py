"""
Format-neutral export document.

Reports and audit exports are reduced to an ExportDocument; each exporter
renders the same document into its own byte format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Tuple

__all__ = [
    "ENERGY_COLUMNS",
    "DEVICE_PERFORMANCE_COLUMNS",
    "ALARM_COLUMNS",
    "AUDIT_COLUMNS",
    "ExportSection",
    "ExportTable",
    "ExportDocument",
]

ENERGY_COLUMNS = ["date", "count", "sum", "avg", "min", "max", "unit"]
DEVICE_PERFORMANCE_COLUMNS = ["tag", *ENERGY_COLUMNS]
ALARM_COLUMNS = [
    "id",
    "plant",
    "device",
    "deviceType",
    "severity",
    "status",
    "message",
    "triggeredAt",
    "acknowledgedAt",
    "resolvedAt",
]
AUDIT_COLUMNS = [
    "timestamp",
    "action",
    "entityType",
    "entityId",
    "userId",
    "userName",
    "userEmail",
    "userRole",
    "ipAddress",
    "userAgent",
]


@dataclass
class ExportSection:
    """Titled list of label/value pairs."""

    title: str
    rows: List[Tuple[str, Any]] = field(default_factory=list)


@dataclass
class ExportTable:
    """Detail rows under fixed columns, kept in source order."""

    columns: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    title: str = "Details"


@dataclass
class ExportDocument:
    """
    Everything an exporter needs.

    ``payload`` is the JSON-ready structure; ``header``, ``sections`` and
    ``table`` drive the tabular formats.
    """

    title: str
    payload: Any
    table: ExportTable
    header: List[str] = field(default_factory=list)
    sections: List[ExportSection] = field(default_factory=list)
