"""
Key-value storage for profiles.

Separates persistence from the profile logic so tests run in memory.

Implementations:
- JsonFileStore: one JSON document per key in a directory
- MemoryStore: dict-backed, for tests and throwaway sessions
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote, unquote
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal storage interface used by ``ProfileStore``."""

    def get(self, key: str) -> Optional[Any]:
        """Stored document, or None if missing."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Overwrite the document under ``key``."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if something was removed."""
        ...

    def keys(self) -> List[str]:
        ...


class MemoryStore:
    """In-memory store. Values are deep-copied on the way in and out."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonFileStore:
    """
    File-based store, ``<directory>/<key>.json``.

    Keys are percent-encoded into file names (dots included), so distinct
    keys never share a file and no key can leave the directory.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so a reader never sees a half-written document.
    """

    def __init__(self, directory: Union[Path, str]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key:
            raise ValueError(f"Invalid store key: {key!r}")
        name = quote(key, safe="").replace(".", "%2E")
        return self.directory / f"{name}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Corrupt document %s, ignoring", path.name)
            return None

    def put(self, key: str, value: Any) -> None:
        path = self._path(key)
        fd, temp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(temp_path, path)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            return True
        return False

    def keys(self) -> List[str]:
        return sorted(unquote(p.stem) for p in self.directory.glob("*.json"))
