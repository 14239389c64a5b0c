"""
Utilities package for the reference-data validation engine.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from refdata.utils.logging import configure_from_settings, configure_logging, get_logger

__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
