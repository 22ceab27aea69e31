"""Per-user saved collections (the playlist), replaced wholesale on write."""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from ..models.account import CollectionsDocument
from ..storage.json_storage import DocumentStorage
from ..utils.exceptions import InvalidShapeError, StoreIOError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class CollectionStore:
    """
    Owner identifier -> ordered list of items.

    Items are opaque: duplicate ids and odd shapes are stored as given.
    Not adding the same track twice is up to the caller.
    """

    def __init__(self, storage: DocumentStorage):
        self._storage = storage

    def _load(self) -> Dict[str, List[Any]]:
        try:
            return CollectionsDocument.model_validate(self._storage.load()).root
        except PydanticValidationError as e:
            raise StoreIOError("Collection store is corrupt", details=str(e))

    def get(self, owner: str) -> List[Any]:
        return self._load().get(owner, [])

    def replace(self, owner: str, items: Any) -> None:
        """Overwrite the owner's whole collection"""
        if not isinstance(items, list):
            raise InvalidShapeError("Items must be an array")
        with self._storage.lock:
            collections = self._load()
            collections[owner] = items
            self._storage.save(collections)
        logger.info("Collection replaced", owner=owner, item_count=len(items))
