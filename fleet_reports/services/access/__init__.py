from fleet_reports.services.access.access_filter import AccessContext, AccessFilter

__all__ = ["AccessContext", "AccessFilter"]
