"""Concurrent load generator for CQL row stores."""

__version__ = "0.1.0"
