"""Logging configuration for the benchmark harness."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

__all__ = ["setup_logger"]


def setup_logger(
        log_dir: Optional[Union[str, Path]] = None,
        *,
        level: int = logging.INFO,
        console_level: int = logging.WARNING,
        console: bool = True,
        force: bool = False,
) -> Optional[Path]:
    """
    Configure root logging for a benchmark run.

    Console output goes to stderr so request errors interleave with the
    progress lines on stdout. When log_dir is given, a timestamped log file
    is also written there.

    Args:
        log_dir: Directory for the log file (None disables file logging)
        level: Logging level for the file handler (default: INFO)
        console_level: Logging level for the stderr handler (default: WARNING)
        console: If True, log to stderr
        force: If True, remove existing handlers before adding new ones

    Returns:
        Path to the created log file, or None when file logging is off

    Examples:
        >>> log_path = setup_logger("/tmp/bench-logs")
        >>> log_path
        PosixPath('/tmp/bench-logs/cqlbench_20250929_175430.log')
    """
    root = logging.getLogger()

    # Remove existing handlers if force=True
    if force:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    handler_levels = [console_level] if console else []
    if log_dir is not None:
        handler_levels.append(level)
    root.setLevel(min(handler_levels) if handler_levels else level)

    # Consistent formatter for all handlers
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        console_handler = logging.StreamHandler()  # stderr
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if log_dir is None:
        return None

    log_dir = Path(log_dir).expanduser().resolve()
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = log_dir / f"cqlbench_{timestamp}.log"

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    root.info("Logging initialized: %s", log_path)
    return log_path
