"""Recover backup history from the archive names in a directory."""

import logging
import os
from typing import List, Optional

from .models import NO_PRIOR_BACKUP, ArchiveName, BackupKind

logger = logging.getLogger(__name__)

_BACKUP_PREFIXES = tuple(kind.value for kind in BackupKind)


def list_backups(backups_dir: str) -> List[ArchiveName]:
    """List the backup archives stored directly in a directory.

    Names that do not parse are skipped; a stray file must never abort a run.

    Args:
        backups_dir: Directory holding the archives.

    Returns:
        Parsed archive names, in directory listing order.
    """
    if not os.path.isdir(backups_dir):
        logger.debug(f"No backups directory at {backups_dir}")
        return []

    backups = []
    with os.scandir(backups_dir) as entries:
        for entry in entries:
            if not entry.is_file(follow_symlinks=False):
                continue

            name = ArchiveName.parse(entry.name)
            if name is None:
                if entry.name.startswith(_BACKUP_PREFIXES):
                    logger.warning(f"Ignoring unparsable backup name: {entry.name}")
                else:
                    logger.debug(f"Ignoring non-backup file: {entry.name}")
                continue

            backups.append(name)

    return backups


def latest_backup(backups_dir: str) -> Optional[ArchiveName]:
    """Find the most recent backup of either kind.

    Ties on timestamp go to the lexicographically greatest file name.
    """
    backups = list_backups(backups_dir)
    if not backups:
        return None
    return max(backups, key=lambda name: (name.timestamp, name.filename))


def resolve_threshold(backups_dir: str, kind: BackupKind) -> int:
    """Resolve the change threshold for a run.

    Args:
        backups_dir: Directory holding previous archives.
        kind: Kind of the run being started.

    Returns:
        Timestamp in epoch millis; files changed after it are backed up.
        NO_PRIOR_BACKUP for full runs and for first runs.
    """
    if kind is BackupKind.FULL:
        return NO_PRIOR_BACKUP

    latest = latest_backup(backups_dir)
    if latest is None:
        logger.info("No previous backup found, including every file")
        return NO_PRIOR_BACKUP

    logger.info(f"Most recent backup: {latest.filename}")
    return latest.timestamp
