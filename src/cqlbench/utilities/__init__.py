# utilities/__init__.py
"""Common utilities for benchmark output."""

from .display import format_banner, format_config_items, format_duration, format_rate

__all__ = [
    "format_banner",
    "format_config_items",
    "format_duration",
    "format_rate",
]
