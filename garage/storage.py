"""Key/value text storage backends for persisting the garage."""

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import StorageError, StorageQuotaExceeded

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class Storage(ABC):
    """Text blobs addressed by key."""

    quota_bytes: Optional[int] = None

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, text: str) -> None:
        """Store text under key. Raises StorageError on failure."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""

    def _check_quota(self, key: str, text: str) -> None:
        size = len(text.encode("utf-8"))
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise StorageQuotaExceeded(
                f"Value for {key!r} is {size} bytes, quota is {self.quota_bytes} bytes"
            )


class MemoryStorage(Storage):
    """In-process storage, one dict entry per key."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, text: str) -> None:
        self._check_quota(key, text)
        self.data[key] = text

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage(Storage):
    """
    Storage in a directory, one ``<key>.json`` file per key.

    Writes go to a temporary file that replaces the target, so a failed
    write leaves the previous value in place.
    """

    def __init__(self, directory: Union[str, Path], quota_bytes: Optional[int] = None):
        self.directory = Path(directory).expanduser()
        self.quota_bytes = quota_bytes

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as fp:
                return fp.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, text: str) -> None:
        self._check_quota(key, text)
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fp:
                    fp.write(text)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.debug("Wrote %d characters to %s", len(text), path)

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {path}: {e}") from e
