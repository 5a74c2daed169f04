"""
Utility helpers: UTC day windows, cell formatting and document renderers.
"""
