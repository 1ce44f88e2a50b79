"""Single-file cache backend.

The whole cache is one JSON object persisted at a configured path. The file
is read lazily on first access and rewritten in full on every ``set``. There
is no partial-write recovery: a crash in the middle of a write may leave a
corrupt file, which then surfaces as a :class:`CacheBackendError` instead of
an empty cache.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import CacheBackendError, CacheMissError, ConfigurationError

logger = logging.getLogger(__name__)


class FileCacheBackend:
    """Cache persisted as a JSON mapping in a single file.

    Parameters
    ----------
    path: Path
        Location of the cache file. Missing parent directories are created
        on the first write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "FileCacheBackend":
        path = options.get("path")
        if not path or not isinstance(path, (str, Path)):
            raise ConfigurationError("File cache requires a `path` option")
        return cls(Path(path))

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self._path.exists():
            self._data = {}
            return self._data
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CacheBackendError(f"Cannot read cache file {self._path}: {exc}") from exc
        if not raw.strip():
            self._data = {}
            return self._data
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise CacheBackendError(f"Cache file {self._path} is corrupt: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheBackendError(f"Cache file {self._path} does not hold a mapping")
        logger.debug(
            "geispoint.cache.file.loaded",
            extra={"path": str(self._path), "entries": len(data)},
        )
        self._data = data
        return self._data

    def _dump(self, data: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise CacheBackendError(f"Cannot write cache file {self._path}: {exc}") from exc

    def exists(self, key: str) -> bool:
        return key in self._load()

    def get(self, key: str) -> Any:
        data = self._load()
        if key not in data:
            raise CacheMissError(f"No cached value for key `{key}`")
        return data[key]

    def set(self, key: str, value: Any) -> None:
        data = dict(self._load())
        data[key] = value
        self._dump(data)
        self._data = data
