"""Core backup functionality."""

from .runner import BackupRunner
from .history import resolve_threshold, latest_backup, list_backups
from .walker import ChangeSetWalker, iter_files, select_changed
from .archive import ArchiveWriter, EncryptionConfig, generate_password
from .models import ArchiveName, BackupKind, BackupResult, FileRecord, NO_PRIOR_BACKUP

__all__ = [
    "BackupRunner", "resolve_threshold", "latest_backup", "list_backups",
    "ChangeSetWalker", "iter_files", "select_changed",
    "ArchiveWriter", "EncryptionConfig", "generate_password",
    "ArchiveName", "BackupKind", "BackupResult", "FileRecord", "NO_PRIOR_BACKUP",
]
