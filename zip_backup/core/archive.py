"""AES-encrypted zip archive writing and run secrets."""

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Optional

import pyzipper

from ..errors import ArchiveWriteError

MIN_PASSWORD_BYTES = 16
PASSWORD_FILE_MODE = 0o600


def generate_password(num_bytes: int = 20) -> str:
    """Generate a printable random password for one run.

    Args:
        num_bytes: Bytes of randomness; at least 16 (128 bits).

    Returns:
        URL-safe base64 password string.
    """
    if num_bytes < MIN_PASSWORD_BYTES:
        raise ValueError(f"Password needs at least {MIN_PASSWORD_BYTES} random bytes, got {num_bytes}")
    return secrets.token_urlsafe(num_bytes)


def write_password_file(path: str, password: str) -> None:
    """Persist a run password as a one-line plaintext file readable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, PASSWORD_FILE_MODE)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        f.write(password + '\n')


@dataclass(frozen=True)
class EncryptionConfig:
    """Options handed to the zip library for every entry."""
    password: str
    compression: int = pyzipper.ZIP_DEFLATED
    compression_level: int = 6
    encryption: str = pyzipper.WZ_AES
    key_strength: int = 256


class ArchiveWriter:
    """Writes files into a single password-protected zip archive.

    Usage::

        with ArchiveWriter(path, EncryptionConfig(password=pw)) as writer:
            writer.add_file("/data/sub/a.txt", "sub/a.txt")
    """

    def __init__(self, path: str, config: EncryptionConfig):
        self.path = path
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._zip: Optional[pyzipper.AESZipFile] = None

    @property
    def is_open(self) -> bool:
        return self._zip is not None

    def open(self) -> "ArchiveWriter":
        """Create the archive file.

        Raises:
            ArchiveWriteError: If the file cannot be created.
        """
        if self._zip is not None:
            raise ArchiveWriteError(f"Archive already open: {self.path}")

        try:
            zip_file = pyzipper.AESZipFile(
                self.path,
                'w',
                compression=self.config.compression,
                compresslevel=self.config.compression_level,
                strict_timestamps=False
            )
        except (OSError, ValueError) as e:
            raise ArchiveWriteError(f"Cannot create archive {self.path}: {e}") from e

        zip_file.setpassword(self.config.password.encode('utf-8'))
        zip_file.setencryption(self.config.encryption, nbits=self.config.key_strength)
        self._zip = zip_file
        self.logger.debug(f"Opened archive {self.path}")
        return self

    def add_file(self, source_path: str, arcname: str) -> None:
        """Add one file to the archive under ``arcname``.

        Modification times before 1980 are stored as 1980-01-01.

        Raises:
            ArchiveWriteError: If the archive is not open or the write fails.
        """
        if self._zip is None:
            raise ArchiveWriteError(f"Archive not open: {self.path}")

        try:
            self._zip.write(source_path, arcname=arcname)
        except (OSError, ValueError, RuntimeError) as e:
            raise ArchiveWriteError(f"Cannot add {source_path} to {self.path}: {e}") from e

    def close(self) -> None:
        """Flush and close the archive. Safe to call more than once."""
        if self._zip is None:
            return

        zip_file, self._zip = self._zip, None
        try:
            zip_file.close()
        except (OSError, ValueError, RuntimeError) as e:
            raise ArchiveWriteError(f"Cannot finalize archive {self.path}: {e}") from e
        self.logger.debug(f"Closed archive {self.path}")

    def __enter__(self) -> "ArchiveWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return

        # Already failing; a close error must not mask the original one
        try:
            self.close()
        except ArchiveWriteError as close_error:
            self.logger.error(f"Error closing archive after failure: {close_error}")
