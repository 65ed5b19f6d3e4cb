"""
Rush Bot - JSON File Storage
============================

Flat-file persistence shared by every store.

DESIGN:
    One JSON file per store, read and written whole. Writes go to a
    temporary file in the same directory and are moved into place with
    os.replace() so a crash mid-write never leaves a truncated file.

    Corrupt or blank files fall back to the store's default content and
    are logged, so one bad file never takes the bot down.
"""

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from src.core.logger import logger


# =============================================================================
# Exceptions
# =============================================================================

class StoreError(Exception):
    """Raised when a store file cannot be created or written."""

    pass


# =============================================================================
# JSON File Store
# =============================================================================

class JsonFileStore:
    """
    Whole-file JSON persistence for a single store.

    Attributes:
        path: Location of the JSON file.
        default: Content written when the file does not exist yet.
    """

    def __init__(self, path: Path, default: Any) -> None:
        self.path = Path(path)
        self.default = default

    def ensure_file(self) -> Path:
        """
        Create the file (and parent directory) with default content if missing.

        Returns:
            Path to the file.

        Raises:
            StoreError: If the file cannot be created.
        """
        if self.path.exists():
            return self.path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create data directory {self.path.parent}: {e}") from e
        self.write(self.default)
        return self.path

    def read(self) -> Any:
        """
        Read and parse the whole file.

        Returns:
            Parsed content, or a copy of the default when the file is
            missing, blank, or not valid JSON.
        """
        try:
            self.ensure_file()
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, StoreError) as e:
            logger.warning("Store Read Failed", [
                ("File", str(self.path)),
                ("Error", str(e)[:100]),
            ])
            return copy.deepcopy(self.default)

        if not raw.strip():
            return copy.deepcopy(self.default)

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Store Corrupt, Using Default", [
                ("File", str(self.path)),
                ("Error", str(e)[:100]),
            ])
            return copy.deepcopy(self.default)

    def write(self, data: Any) -> None:
        """
        Replace the whole file with the JSON-encoded data.

        Raises:
            StoreError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=self.path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e


__all__ = ["JsonFileStore", "StoreError"]
