from .json_storage import DocumentStorage, JsonFileStorage, MemoryStorage

__all__ = [
    "DocumentStorage",
    "JsonFileStorage",
    "MemoryStorage",
]
