from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

from platformdirs import user_data_dir

from taskdesk.common.exceptions import (
    DocumentParseError,
    InvalidPathError,
    StorageIOError,
    TaskDeskError,
)
from taskdesk.common.logger import get_logger
from taskdesk.config import Settings
from taskdesk.core.config_store import ConfigStore

logger = get_logger("taskdesk.core.collections")

EMPTY_DOCUMENT = "[]"


class Collection(str, Enum):
    TODOS = "todos"
    LISTS = "lists"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


class StoragePathState:
    """The storage-path override shared by every command handler.

    An empty string means "use the default data directory".
    """

    def __init__(self, path: str = "") -> None:
        self._path = path
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._path

    def set(self, path: str) -> None:
        with self._lock:
            self._path = path

    @contextmanager
    def held(self) -> Iterator[str]:
        """Hold the lock for a whole operation and yield the current value."""
        with self._lock:
            yield self._path

    def replace(self, path: str) -> None:
        """Assign while the caller already holds the lock through ``held``."""
        self._path = path


class CollectionStore:
    def __init__(
        self,
        config_store: ConfigStore,
        state: StoragePathState | None = None,
        strict: bool | None = None,
    ) -> None:
        self.config_store = config_store
        self.settings: Settings = config_store.settings
        self.state = state or StoragePathState()
        self.strict = self.settings.strict_path_switch if strict is None else strict

    @classmethod
    def from_config(cls, config_store: ConfigStore, strict: bool | None = None) -> "CollectionStore":
        """Build the store with its override read from the persisted record."""
        try:
            storage_path = config_store.load().storage_path
        except TaskDeskError as e:
            logger.warning(f"Falling back to default storage, configuration unavailable: {e}")
            storage_path = ""
        return cls(config_store, StoragePathState(storage_path), strict=strict)

    # -- path resolution -------------------------------------------------

    def default_data_dir(self) -> Path:
        base = self.settings.data_dir or user_data_dir(self.settings.app_name, appauthor=False)
        path = Path(base)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(str(e), original_error=e) from e
        return path

    def _path_for(self, collection: Collection, override: str) -> Path:
        if not override:
            return self.default_data_dir() / collection.filename
        return Path(override) / collection.filename

    def resolve_path(self, collection: Collection | str) -> Path:
        collection = Collection(collection)
        path = self._path_for(collection, self.state.get())
        logger.debug(f"Resolved {collection.value} to {path}")
        return path

    # -- storage path ----------------------------------------------------

    def set_storage_path(self, path: str) -> None:
        if self.strict:
            with self.state.held():
                self._apply_storage_path(path, self.state.replace)
        else:
            self._apply_storage_path(path, self.state.set)

    def _apply_storage_path(self, path: str, assign: Callable[[str], None]) -> None:
        if path:
            candidate = Path(path)
            if not candidate.exists():
                raise InvalidPathError("Path does not exist")
            if not candidate.is_dir():
                raise InvalidPathError("Path is not a directory")

        # Persist first so the record stays authoritative across a restart
        config = self.config_store.load()
        config.storage_path = path
        self.config_store.save(config)
        assign(path)
        if path:
            logger.info(f"Storage path set to {path}")
        else:
            logger.info("Storage path cleared, using default data directory")

    def get_storage_path(self) -> str:
        return self.config_store.load().storage_path

    # -- documents -------------------------------------------------------

    def load(self, collection: Collection | str) -> str:
        collection = Collection(collection)
        if self.strict:
            with self.state.held() as override:
                return self._read(self._path_for(collection, override))
        return self._read(self.resolve_path(collection))

    def save(self, collection: Collection | str, document: str) -> None:
        collection = Collection(collection)
        if self.strict:
            with self.state.held() as override:
                self._write(self._path_for(collection, override), document)
            return
        self._write(self.resolve_path(collection), document)

    def _read(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            logger.debug(f"{path} not found, returning empty collection")
            return EMPTY_DOCUMENT

    def _write(self, path: Path, document: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(document)
        except OSError as e:
            raise StorageIOError(str(e), original_error=e) from e
        logger.debug(f"Wrote {len(document)} chars to {path}")

    def load_todos(self) -> str:
        return self.load(Collection.TODOS)

    def save_todos(self, document: str) -> None:
        self.save(Collection.TODOS, document)

    def load_lists(self) -> str:
        return self.load(Collection.LISTS)

    def save_lists(self, document: str) -> None:
        self.save(Collection.LISTS, document)

    # -- queries ---------------------------------------------------------

    def list_has_todos(self, list_id: str) -> bool:
        raw = self.load_lists()
        try:
            lists = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DocumentParseError(str(e), original_error=e) from e
        if not isinstance(lists, list):
            raise DocumentParseError(f"expected a JSON array, got {type(lists).__name__}")

        for item in lists:
            if not isinstance(item, dict):
                continue
            list_key = item.get("id")
            todos = item.get("todos")
            if isinstance(list_key, str) and list_key == list_id:
                if isinstance(todos, list) and todos:
                    return True
        return False
