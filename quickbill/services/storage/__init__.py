"""
Storage Services Package

Provides the abstract key-value port and concrete implementations.
The JSON file backend is used by the page; the in-memory backend by tests.
"""

from quickbill.services.storage.interface import (
    KeyValueStoreInterface,
    NotFoundError,
    StorageCorruptError,
    StorageError,
)
from quickbill.services.storage.json_file import JsonFileKeyValueStore
from quickbill.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Exceptions
    "NotFoundError",
    "StorageCorruptError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
