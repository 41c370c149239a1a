"""Asynchronous key-value storage backends for contract records."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from loan_ledger.config import StorageConfig
from loan_ledger.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Persistence collaborator: asynchronous get/set of JSON-safe values."""

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...


class InMemoryStorage:
    """Dict-backed storage for tests and single-session use.

    Values are deep-copied in and out so callers never share state with
    the stored copy.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """One JSON file per key under ``directory``.

    File IO runs in a worker thread. Writes go to a temporary file that is
    then renamed over the target, so a failed write never leaves a
    truncated record behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key.replace(':', '_')}.json"

    def _read(self, path: Path) -> Any | None:
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def _write(self, path: Path, value: Any) -> None:
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

    async def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        logger.debug("Reading %s", path)
        return await asyncio.to_thread(self._read, path)

    async def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        logger.debug("Writing %s", path)
        await asyncio.to_thread(self._write, path, value)


def create_storage(config: StorageConfig) -> StorageBackend:
    """Build the storage backend named by ``config.backend``."""
    if config.backend == "memory":
        return InMemoryStorage()
    if config.backend == "json":
        return JsonFileStorage(config.directory)
    raise ConfigurationError(f"Unknown storage backend: {config.backend!r}")
