from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from hashlib import sha256
from pathlib import Path
from typing import Any

import pandas as pd

from asb_viewer.io.read import rows_to_frame
from asb_viewer.io.write import read_json, write_json

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_RECENT_FILES = 5


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RecentFile:
    name: str
    size: int
    last_modified: int
    timestamp: int

    @classmethod
    def from_path(cls, path: Path, timestamp: int | None = None) -> RecentFile:
        stat = path.stat()
        return cls(
            name=path.name,
            size=int(stat.st_size),
            last_modified=int(stat.st_mtime * 1000),
            timestamp=_now_ms() if timestamp is None else timestamp,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecentFile:
        return cls(
            name=str(data["name"]),
            size=int(data.get("size", 0)),
            last_modified=int(data.get("lastModified", 0)),
            timestamp=int(data.get("timestamp", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "lastModified": self.last_modified,
            "timestamp": self.timestamp,
        }


class RecentFilesStore:
    """Most-recently-used file descriptors, newest first, unique by name."""

    def __init__(self, path: Path, max_entries: int = DEFAULT_MAX_RECENT_FILES) -> None:
        self.path = path
        self.max_entries = max_entries

    def load(self) -> list[RecentFile]:
        if not self.path.exists():
            return []
        try:
            payload = read_json(self.path)
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable recent files list at %s", self.path)
            return []
        return [RecentFile.from_dict(item) for item in payload if isinstance(item, dict)]

    def add(self, entry: RecentFile) -> list[RecentFile]:
        existing = [item for item in self.load() if item.name != entry.name]
        updated = [entry, *existing][: self.max_entries]
        write_json([item.to_dict() for item in updated], self.path)
        return updated

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


@dataclass(frozen=True)
class CachedRows:
    name: str
    rows: pd.DataFrame
    columns: list[str]
    timestamp: int


class ResultCache:
    """Rows of previously loaded files, kept so a result can be replayed."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path_for(self, name: str) -> Path:
        digest = sha256(name.encode("utf-8")).hexdigest()[:16]
        return self.directory / f"{digest}.json"

    def has(self, name: str) -> bool:
        return self._path_for(name).exists()

    def save(self, name: str, rows: pd.DataFrame, timestamp: int | None = None) -> Path:
        columns = [str(column) for column in rows.columns]
        payload = {
            "name": name,
            "columns": columns,
            "data": rows.to_dict(orient="records"),
            "timestamp": _now_ms() if timestamp is None else timestamp,
        }
        return write_json(payload, self._path_for(name))

    def load(self, name: str) -> CachedRows | None:
        path = self._path_for(name)
        if not path.exists():
            return None
        try:
            payload = read_json(path)
        except (OSError, json.JSONDecodeError):
            LOGGER.error("Error loading cached file %s", name, exc_info=True)
            return None
        columns = [str(column) for column in payload.get("columns", [])]
        return CachedRows(
            name=str(payload.get("name", name)),
            rows=rows_to_frame(payload.get("data", []), columns),
            columns=columns,
            timestamp=int(payload.get("timestamp", 0)),
        )


def remember_file(
    path: Path,
    rows: pd.DataFrame,
    store: RecentFilesStore,
    cache: ResultCache,
) -> list[RecentFile]:
    """Cache the rows for replay and push the file onto the recent list."""
    entry = RecentFile.from_path(path)
    try:
        cache.save(entry.name, rows, timestamp=entry.timestamp)
    except OSError:
        # A failed cache write only disables replay for this file.
        LOGGER.warning("Could not cache rows for %s", entry.name, exc_info=True)
    return store.add(entry)
