# -*- coding: utf-8 -*-
"""File-backed storage for the lecture record page."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path

from schedule_engine.errors import RecordStoreError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


class RecordFile:
    """Reads and writes the record text, keeping a backup of the last version."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + BACKUP_SUFFIX)

    def read(self) -> str:
        """Return the record text.

        :raises RecordStoreError: If the file is missing, unreadable, not UTF-8 or empty.
        """
        if not self.path.is_file():
            raise RecordStoreError(f"Record file not found: {self.path}")
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RecordStoreError(f"Failed to read {self.path}: {e}") from e
        if not content.strip():
            raise RecordStoreError(f"Record file is empty or corrupted: {self.path}")
        return content

    def write(self, content: str) -> None:
        """Replace the record text, copying the current file to the backup first.

        :raises RecordStoreError: If the content is empty or the write fails.
        """
        if not isinstance(content, str) or not content.strip():
            raise RecordStoreError("Invalid content provided to write function")
        try:
            if self.path.exists():
                shutil.copyfile(self.path, self.backup_path)
                logger.info("Created backup of %s", self.path.name)
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise RecordStoreError(f"Failed to write {self.path}: {e}") from e
        logger.info("Successfully updated %s", self.path.name)
