"""Source tree traversal and change selection."""

import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

from ..errors import SourceReadError
from .models import FileRecord

logger = logging.getLogger(__name__)


def _created_ms(file_stat: os.stat_result) -> int:
    # st_birthtime is missing on most Linux filesystems; ctime only over-includes.
    birthtime = getattr(file_stat, 'st_birthtime', None)
    if birthtime is not None:
        return int(birthtime * 1000)
    return file_stat.st_ctime_ns // 1_000_000


def iter_files(root: str) -> Iterator[FileRecord]:
    """Yield every regular file under ``root``, depth first.

    Symbolic links and special files are skipped.

    Raises:
        SourceReadError: If a directory cannot be listed or a file cannot be
            stat'ed.
    """
    stack = [root]

    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise SourceReadError(f"Cannot list directory {directory}: {e}") from e

        subdirectories = []
        for entry in entries:
            try:
                entry_stat = entry.stat(follow_symlinks=False)
            except OSError as e:
                raise SourceReadError(f"Cannot read attributes of {entry.path}: {e}") from e

            mode = entry_stat.st_mode
            if stat.S_ISLNK(mode):
                logger.debug(f"Skipping symbolic link {entry.path}")
            elif stat.S_ISDIR(mode):
                subdirectories.append(entry.path)
            elif stat.S_ISREG(mode):
                relative_path = os.path.relpath(entry.path, root)
                yield FileRecord(
                    path=entry.path,
                    relative_path=relative_path.replace(os.sep, '/'),
                    created_ms=_created_ms(entry_stat),
                    modified_ms=entry_stat.st_mtime_ns // 1_000_000,
                    size=entry_stat.st_size
                )
            else:
                logger.debug(f"Skipping special file {entry.path}")

        # Reversed so subdirectories pop in name order
        stack.extend(reversed(subdirectories))


def select_changed(records: Iterable[FileRecord], threshold: int) -> Iterator[FileRecord]:
    """Filter records down to those changed after ``threshold``."""
    return (record for record in records if record.is_changed_since(threshold))


@dataclass
class WalkSummary:
    """Files added to the archive by one walk."""
    included: List[FileRecord] = field(default_factory=list)
    scanned_count: int = 0


class ChangeSetWalker:
    """Streams the changed files of a source tree into an archive writer."""

    def __init__(self, root: str, threshold: int):
        """Initialize walker.

        Args:
            root: Source directory root.
            threshold: Epoch millis; files changed after it are included.
        """
        self.root = root
        self.threshold = threshold
        self.logger = logging.getLogger(__name__)

    def walk(self, writer) -> WalkSummary:
        """Add every changed file to ``writer`` under its path relative to the root.

        Args:
            writer: Open archive writer exposing ``add_file(source, arcname)``.

        Returns:
            WalkSummary with the included files and the number scanned.
        """
        summary = WalkSummary()
        self.logger.info(f"Walking {self.root} (threshold {self.threshold})")

        def scanned():
            for record in iter_files(self.root):
                summary.scanned_count += 1
                yield record

        for record in select_changed(scanned(), self.threshold):
            writer.add_file(record.path, record.relative_path)
            summary.included.append(record)
            self.logger.debug(f"Added {record.relative_path}")

            if len(summary.included) % 500 == 0:
                self.logger.info(f"Added {len(summary.included)} files...")

        self.logger.info(f"Scanned {summary.scanned_count} files, "
                         f"{len(summary.included)} changed")
        return summary
