"""Data models for backup runs."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

# Threshold meaning "no prior backup": every file is newer.
NO_PRIOR_BACKUP = 0


class BackupKind(Enum):
    """Kind of backup, valued by the token used in archive names."""
    FULL = "full"
    INCREMENTAL = "incr"


@dataclass(frozen=True)
class ArchiveName:
    """Name of a backup archive: kind plus creation time in epoch millis."""
    kind: BackupKind
    timestamp: int

    PATTERN = re.compile(r'(full|incr)([0-9]+)\.zip')

    @property
    def filename(self) -> str:
        return f"{self.kind.value}{self.timestamp}.zip"

    @classmethod
    def parse(cls, filename: str) -> Optional["ArchiveName"]:
        """Parse an archive filename.

        Args:
            filename: Bare file name (no directory part).

        Returns:
            The parsed name, or None if the name is not a backup archive.
        """
        match = cls.PATTERN.fullmatch(filename)
        if not match:
            return None
        return cls(kind=BackupKind(match.group(1)), timestamp=int(match.group(2)))


@dataclass(frozen=True)
class FileRecord:
    """A regular file found under the source root."""
    path: str
    relative_path: str
    created_ms: int
    modified_ms: int
    size: int

    def is_changed_since(self, threshold: int) -> bool:
        """Whether this file belongs in a backup taken after ``threshold``.

        A refreshed creation time counts as a change even when the content
        was not modified.
        """
        return self.created_ms > threshold or self.modified_ms > threshold


@dataclass
class BackupResult:
    """Outcome of a completed backup run."""
    kind: BackupKind
    timestamp: int
    threshold: int
    archive_path: Optional[Path]
    password_path: Optional[Path]
    files: List[FileRecord] = field(default_factory=list)
    scanned_count: int = 0

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(record.size for record in self.files)
