"""Tests for summary formatting helpers."""

from datetime import datetime

from zip_backup.core.models import NO_PRIOR_BACKUP
from zip_backup.utils.formatters import format_file_size, format_timestamp


class TestFormatFileSize:
    def test_bytes(self):
        assert format_file_size(512) == "512B"

    def test_kilobytes(self):
        assert format_file_size(2048) == "2KB"

    def test_megabytes(self):
        assert format_file_size(5 * 1024 * 1024) == "5MB"

    def test_gigabytes(self):
        assert format_file_size(3 * 1024 ** 3) == "3GB"


class TestFormatTimestamp:
    def test_no_prior_backup(self):
        assert format_timestamp(NO_PRIOR_BACKUP) == "never"

    def test_local_time(self):
        millis = 1_700_000_000_000
        expected = datetime.fromtimestamp(1_700_000_000).strftime('%Y-%m-%d %H:%M:%S')
        assert format_timestamp(millis) == expected

