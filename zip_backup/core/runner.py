"""Main backup run coordinator."""

import logging
import os
import time
from pathlib import Path
from typing import Dict, Any, Optional

from .archive import ArchiveWriter, EncryptionConfig, generate_password, write_password_file
from .history import resolve_threshold
from .models import ArchiveName, BackupKind, BackupResult
from .walker import ChangeSetWalker
from ..errors import BackupError, PreconditionError

PARTIAL_SUFFIX = '.partial'
# Filesystem clocks are coarse (FAT stores mtimes in 2s steps)
CLOCK_SLACK_MS = 2000


def check_directory(path: str, role: str) -> Path:
    """Check that ``path`` is an existing directory.

    Args:
        path: Directory to check.
        role: Human-readable role used in the error ("source", "target").

    Returns:
        The resolved directory path.

    Raises:
        PreconditionError: If the path is missing or not a directory.
    """
    resolved = Path(path).resolve()
    if not resolved.is_dir():
        raise PreconditionError(f"{role.capitalize()} \"{resolved}\" does not exist or is not a directory")
    return resolved


def current_millis() -> int:
    return time.time_ns() // 1_000_000


class BackupRunner:
    """Coordinates one full or incremental backup run."""

    def __init__(self, archive_config: Optional[Dict[str, Any]] = None):
        """Initialize backup runner.

        Args:
            archive_config: The ``archive`` configuration section. Missing
                keys fall back to built-in defaults.
        """
        archive_config = archive_config or {}
        self.compression_level = archive_config.get('compression_level', 6)
        self.password_bytes = archive_config.get('password_bytes', 20)
        self.backups_dir_name = archive_config.get('backups_dir', 'backups')
        self.passwords_dir_name = archive_config.get('passwords_dir', 'passwords')
        self.logger = logging.getLogger(__name__)

    def run(self, source: str, target: str, kind: BackupKind) -> BackupResult:
        """Run a backup of ``source`` into ``target``.

        Args:
            source: Source directory tree.
            target: Target directory receiving the archive and password file.
            kind: Full or incremental.

        Returns:
            BackupResult describing the run. ``archive_path`` is None when no
            file qualified, in which case nothing is written.

        Raises:
            PreconditionError: If either directory is invalid. Raised before
                anything is created.
            ArchiveWriteError: If the archive cannot be written.
            SourceReadError: If part of the source tree cannot be read.
            BackupError: If the password file or the final archive name
                cannot be written. Neither is left behind.
        """
        source_dir = check_directory(source, 'source')
        target_dir = check_directory(target, 'target')

        backups_dir = target_dir / self.backups_dir_name
        passwords_dir = target_dir / self.passwords_dir_name
        backups_dir.mkdir(parents=True, exist_ok=True)
        passwords_dir.mkdir(parents=True, exist_ok=True)

        threshold = resolve_threshold(str(backups_dir), kind)
        # Backdated so a file written during the walk is newer than this archive
        timestamp = current_millis() - CLOCK_SLACK_MS
        archive_name = ArchiveName(kind=kind, timestamp=timestamp)

        self.logger.info(f"Starting {kind.name.lower()} backup of {source_dir} "
                         f"into {backups_dir / archive_name.filename}")

        password = generate_password(self.password_bytes)
        config = EncryptionConfig(password=password, compression_level=self.compression_level)

        final_path = backups_dir / archive_name.filename
        # Never matches the archive name pattern, so history scans skip it
        partial_path = final_path.with_name(final_path.name + PARTIAL_SUFFIX)

        walker = ChangeSetWalker(str(source_dir), threshold)
        try:
            with ArchiveWriter(str(partial_path), config) as writer:
                summary = walker.walk(writer)
        except Exception:
            self.logger.error(f"Backup failed, removing incomplete archive {partial_path}")
            self._remove_quietly(partial_path)
            raise

        result = BackupResult(
            kind=kind,
            timestamp=timestamp,
            threshold=threshold,
            archive_path=None,
            password_path=None,
            files=summary.included,
            scanned_count=summary.scanned_count
        )

        if not summary.included:
            self.logger.info("No changed files, no archive written")
            self._remove_quietly(partial_path)
            return result

        # The password must exist before the archive becomes part of history
        password_path = passwords_dir / f"pass{timestamp}.txt"
        try:
            write_password_file(str(password_path), password)
            os.replace(partial_path, final_path)
        except OSError as e:
            self.logger.error(f"Could not publish archive {final_path}: {e}")
            self._remove_quietly(partial_path)
            self._remove_quietly(password_path)
            raise BackupError(f"Cannot publish archive {final_path}: {e}") from e

        result.archive_path = final_path
        result.password_path = password_path

        self.logger.info(f"Backup complete: {result.file_count} files in {final_path}")
        return result

    def _remove_quietly(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove {path}: {e}")
