"""
Whole-document JSON storage.

Each store owns one JSON document and rewrites it wholesale. The file
implementation guards every document with a process-wide re-entrant lock
keyed by its resolved path; callers hold ``storage.lock`` across a
read-modify-write so concurrent requests in this process cannot lose
updates. Separate processes writing the same file are NOT coordinated
and the last writer wins.
"""

import copy
import json
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.exceptions import StoreIOError
from ..utils.logger import get_logger

logger = get_logger(__name__)

_FILE_LOCKS: Dict[str, threading.RLock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _FILE_LOCKS_GUARD:
        lock = _FILE_LOCKS.get(key)
        if lock is None:
            lock = threading.RLock()
            _FILE_LOCKS[key] = lock
        return lock


class DocumentStorage:
    """Interface: load/save a whole JSON object document"""

    lock: threading.RLock

    def load(self) -> Dict[str, Any]:
        raise NotImplementedError

    def save(self, document: Dict[str, Any]) -> None:
        raise NotImplementedError


class JsonFileStorage(DocumentStorage):
    """JSON file with atomic replace on save"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load document", path=str(self.path), error=str(e))
            raise StoreIOError(f"Failed to load {self.path.name}", details=str(e))
        if not isinstance(data, dict):
            raise StoreIOError(
                f"Failed to load {self.path.name}",
                details=f"expected a JSON object, got {type(data).__name__}",
            )
        return data

    def save(self, document: Dict[str, Any]) -> None:
        """Atomically write the document"""
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8"
            ) as tf:
                temp_path = Path(tf.name)
                json.dump(document, tf, indent=2, ensure_ascii=False, default=str)
        except (OSError, TypeError, ValueError) as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            logger.error("Failed to write document", path=str(self.path), error=str(e))
            raise StoreIOError(f"Failed to save {self.path.name}", details=str(e))

        try:
            shutil.move(str(temp_path), str(self.path))
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            logger.error("Failed to save document", path=str(self.path), error=str(e))
            raise StoreIOError(f"Failed to save {self.path.name}", details=str(e))


class MemoryStorage(DocumentStorage):
    """In-process document, deep-copied on the way in and out"""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self._document = copy.deepcopy(document or {})
        self.lock = threading.RLock()

    def load(self) -> Dict[str, Any]:
        return copy.deepcopy(self._document)

    def save(self, document: Dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)
