# utilities/display.py
"""Common display formatting utilities for benchmark output."""

from datetime import timedelta
from typing import Any, Dict

__all__ = ["format_banner", "format_rate", "format_config_items", "format_duration"]


def format_banner(title: str, width: int = 80, style: str = "═") -> str:
    """Create a formatted banner with title and separator line.

    Args:
        title: Banner title text
        width: Total width of the banner
        style: Character to use for separator line such as ═, ━ or -

    Examples:
        >>> print(format_banner("Phase 1", width=10, style="─"))
        Phase 1
        ──────────
    """
    return f"{title}\n{style * width}"


def format_config_items(items: Dict[str, Any], indent: str = "") -> str:
    """Align "key: value" lines on the longest key."""
    if not items:
        return ""
    max_key_len = max(len(str(k)) for k in items)
    return "\n".join(
        f"{indent}{key}:{' ' * (max_key_len - len(str(key)))} {value}"
        for key, value in items.items()
    )


def format_rate(count: int, elapsed_seconds: float, unit: str = "ops") -> str:
    """Format a processing rate.

    Examples:
        >>> format_rate(10000, 2.5, "ops")
        '4,000 ops/sec'
    """
    if elapsed_seconds <= 0:
        return f"0 {unit}/sec"

    rate = count / elapsed_seconds

    if rate >= 1000:
        return f"{rate:,.0f} {unit}/sec"
    elif rate >= 10:
        return f"{rate:.1f} {unit}/sec"
    else:
        return f"{rate:.2f} {unit}/sec"


def format_duration(elapsed: timedelta) -> str:
    """Drop sub-millisecond noise from a timedelta for display."""
    return str(timedelta(milliseconds=round(elapsed.total_seconds() * 1000)))
