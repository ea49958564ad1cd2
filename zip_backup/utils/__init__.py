"""Utility modules for zip backup."""

from .formatters import format_file_size, format_timestamp

__all__ = ["format_file_size", "format_timestamp"]
