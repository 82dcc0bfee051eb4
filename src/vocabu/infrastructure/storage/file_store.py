"""
File Key-Value Store: Infrastructure adapter for local durable storage.

Implements KeyValueStore with one UTF-8 file per key inside a data directory.
Writes go to a temporary file first and are moved into place, so a crash
never leaves a half-written value behind.
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from vocabu.domain.exceptions import StorageError
from vocabu.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_TMP_PREFIX = ".tmp-"


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as ``<data_dir>/<key>``.

    Keys are restricted to a filename-safe alphabet.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(key, "invalid key")
        return self.data_dir / key

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(key, str(e)) from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=_TMP_PREFIX,
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(key, str(e)) from e
        logger.debug(f"Wrote {len(value)} chars to {path}")

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(key, str(e)) from e

    def clear(self) -> None:
        if not self.data_dir.exists():
            return
        for entry in self.data_dir.iterdir():
            if entry.is_file() and _KEY_PATTERN.match(entry.name):
                self.remove(entry.name)
