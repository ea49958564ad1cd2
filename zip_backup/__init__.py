"""
Zip Backup - Full and incremental backups into AES-encrypted zip archives.

This package walks a directory tree, selects the files changed since the most
recent backup found in the target directory, and writes them into a
password-protected zip archive with a per-run random password.
"""

__version__ = "1.0.0"

from .core.runner import BackupRunner
from .core.models import BackupKind, BackupResult

__all__ = ["BackupRunner", "BackupKind", "BackupResult"]
