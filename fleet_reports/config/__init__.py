"""
Configuration package for the reporting engine.

Environment settings and logging configuration.
"""

from fleet_reports.config.settings import Settings, get_settings, settings
from fleet_reports.config.logging import setup_logging

__all__ = ['Settings', 'get_settings', 'settings', 'setup_logging']
