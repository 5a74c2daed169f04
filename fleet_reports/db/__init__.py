from fleet_reports.db.session import create_engine_from_settings, get_session_factory

__all__ = ["create_engine_from_settings", "get_session_factory"]
