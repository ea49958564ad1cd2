"""Formatting utilities for backup run summaries."""

from datetime import datetime

from ..core.models import NO_PRIOR_BACKUP


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format.
    
    Args:
        size_bytes: Size in bytes.
        
    Returns:
        Human readable size string.
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes // 1024}KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes // (1024 * 1024)}MB"
    else:
        return f"{size_bytes // (1024 * 1024 * 1024)}GB"


def format_timestamp(millis: int) -> str:
    """Format an epoch-millis timestamp for display in local time.
    
    Args:
        millis: Milliseconds since the epoch.
        
    Returns:
        Formatted date string, or "never" for the no-prior-backup threshold.
    """
    if millis == NO_PRIOR_BACKUP:
        return "never"
    
    dt = datetime.fromtimestamp(millis / 1000)
    return dt.strftime('%Y-%m-%d %H:%M:%S')
