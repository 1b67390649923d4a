"""Key-value storage for scorekeeper snapshots.

Values are opaque strings (the repository layer stores JSON snapshots).
The file-backed store keeps one ``<key>.json`` file per key, written with
owner-only permissions (0o600) inside an owner-only directory (0o700).
"""

import contextlib
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for snapshot storage.
_STORE_DIR_MODE = 0o700

# Owner-only file permissions for snapshot files.
_STORE_FILE_MODE = 0o600

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Protocol for the opaque key-value store consumed by the repository."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """Stores each key as a UTF-8 JSON file under a directory.

    Files are created with owner-only read/write (0o600) inside an
    owner-only directory (0o700).
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).resolve()

    def _path_for(self, key: str) -> Path:
        """Resolve the file for a key, rejecting keys that escape the store root."""
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        target = (self._directory / f"{key}.json").resolve()
        if not target.is_relative_to(self._directory):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside store directory")
        return target

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key has never been set.

        Unreadable files propagate as OSError and non-UTF-8 content as
        UnicodeDecodeError; the caller decides whether that counts as absence.
        """
        target = self._path_for(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Write the value atomically via temp-file-then-rename.

        Creates the directory lazily on first write.
        """
        target = self._path_for(key)

        self._directory.mkdir(mode=_STORE_DIR_MODE, parents=True, exist_ok=True)
        self._directory.chmod(_STORE_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._directory), suffix=".tmp", prefix=f".{key}_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(value.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STORE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("stored value", key=key, path=str(target))

    def delete(self, key: str) -> None:
        target = self._path_for(key)
        target.unlink(missing_ok=True)
        logger.debug("deleted value", key=key)
