"""
Analytics and reporting engine for a fleet of monitored energy-production plants.

Turns persisted metric samples, alarm events and audit entries into
access-filtered, aggregated reports (JSON / CSV / PDF / Excel) and into
queryable, exportable, retention-managed audit history.
"""

__version__ = "0.1.0"
