"""Key-value store backends."""
from .file_store import JsonFileKeyValueStore
from .memory_store import MemoryKeyValueStore
from .rest_store import RestKeyValueStore

__all__ = ["JsonFileKeyValueStore", "MemoryKeyValueStore", "RestKeyValueStore"]
