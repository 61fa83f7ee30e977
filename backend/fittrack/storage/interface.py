"""
Storage Interface - Abstract key-value store used by every persistence path.

Keys are colon-separated strings such as ``user:<id>:food:<id>:<ms>``; values
are JSON-serializable objects. Implementations must support prefix scans,
which is the only query mechanism the application relies on.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple


class KeyValueStore(ABC):
    """
    Contract for key-value persistence.
    A hosted store or a database table can be plugged in behind the same calls.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Load the value stored under ``key``.

        Returns:
            The decoded value, or None if the key does not exist
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            ValueError: If the key is malformed
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether ``key`` holds a value."""
        pass

    @abstractmethod
    async def add(self, key: str, value: Any) -> bool:
        """
        Store ``value`` under ``key`` only if the key is absent.

        The check and the write are one atomic step, so of several concurrent
        calls for the same key exactly one succeeds.

        Returns:
            bool: True if the value was stored, False if the key already existed
        """
        pass

    @abstractmethod
    async def scan_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        """
        Return every ``(key, value)`` pair whose key starts with ``prefix``,
        sorted by key.
        """
        pass

    async def get_by_prefix(self, prefix: str) -> List[Any]:
        """Return only the values of :meth:`scan_prefix`."""
        return [value for _, value in await self.scan_prefix(prefix)]
