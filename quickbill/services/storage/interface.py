"""
Abstract Storage Interface

DESIGN DECISION: The core only ever sees a string-valued key-value port.
This allows us to:
1. Back the page with a JSON file on disk
2. Use in-memory storage for testing
3. Swap in any other local store without touching the Expense Store

The interface is intentionally tiny - get, set, remove. Serialization of
expense records is the Expense Store's job, not the port's.
"""

from abc import ABC, abstractmethod
from typing import Optional

from quickbill.errors import QuickBillError


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a durable string-valued key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The slot to read

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageCorruptError: If the backing medium cannot be parsed
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        Args:
            key: The slot to write
            value: The string to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Erase a key. Removing an absent key is a no-op.

        Args:
            key: The slot to erase

        Raises:
            StorageError: If the write fails
        """
        pass

    def contains(self, key: str) -> bool:
        """Check whether a key currently holds a value."""
        return self.get(key) is not None


class StorageError(QuickBillError):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageCorruptError(StorageError):
    """Persisted data could not be parsed."""
    pass
