"""
Ports (interfaces) for durable storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    Port for a durable string-keyed, string-valued store.

    Implementations:
        - FileKeyValueStore: One file per key under a data directory.
        - MemoryKeyValueStore: Process-local dict, for tests and throwaway sessions.

    Any method may raise StorageError.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Return the value stored under ``key``, or None if absent.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value as a whole.
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete ``key``. Removing an absent key is not an error.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """
        Delete every key owned by this store.
        """
        pass
