import json
import logging
import os
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from src.api.core.errors import StorageReadFailure, StorageWriteFailure

logger = logging.getLogger("timetable.storage")


class JsonStore:
    """Thread-safe single-document JSON file store.

    The whole document is read and rewritten on every access. Callers that
    read, mutate and write back hold ``locked()`` for the whole sequence so
    concurrent writers cannot drop each other's changes.
    """

    def __init__(self, file_path: str, initial_document: Callable[[], dict[str, Any]]):
        self._file_path = file_path
        self._lock = threading.RLock()
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(file_path):
            logger.info("Seeding new document at %s", file_path)
            self.write_all(initial_document())

    @contextmanager
    def locked(self) -> Iterator["JsonStore"]:
        with self._lock:
            yield self

    def read_all(self) -> dict[str, Any]:
        with self._lock:
            try:
                with open(self._file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as exc:
                logger.exception("Error reading database %s", self._file_path)
                raise StorageReadFailure() from exc
        if not isinstance(data, dict):
            logger.error("Database %s does not hold a JSON object", self._file_path)
            raise StorageReadFailure()
        return data

    def write_all(self, data: dict[str, Any]) -> None:
        tmp_path = self._file_path + ".tmp"
        with self._lock:
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False, allow_nan=False)
                os.replace(tmp_path, self._file_path)
            except (OSError, TypeError, ValueError) as exc:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                logger.exception("Error writing database %s", self._file_path)
                raise StorageWriteFailure() from exc
