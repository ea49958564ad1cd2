"""Exception types raised during a backup run."""


class BackupError(Exception):
    """Base class for errors that abort a backup run."""


class PreconditionError(BackupError):
    """Source or target directory is missing or not a directory."""


class ArchiveWriteError(BackupError):
    """The archive could not be opened, written or finalized."""


class SourceReadError(BackupError):
    """A source directory could not be listed or a file could not be stat'ed."""
