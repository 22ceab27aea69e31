"""Service layer"""

from .auth_gateway import AuthGateway
from .collection_store import CollectionStore

__all__ = [
    "AuthGateway",
    "CollectionStore",
]
