"""Key-value storage protocol for dependency injection."""
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    """Protocol for index, chunk and local-document persistence.

    Treated as eventually consistent: no multi-key transactions.
    """

    def get(self, key: str) -> Optional[Any]:
        """Get JSON-compatible value.

        Args:
            key: Storage key.

        Returns:
            Stored value, or None if absent.
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """Store JSON-compatible value, replacing any previous one.

        Args:
            key: Storage key.
            value: Value to store.

        Raises:
            StorageCapacityError: If the store refuses the write for size reasons.
        """
        ...

    def list(self, prefix: str = "") -> list[str]:
        """List keys starting with prefix."""
        ...

    def delete(self, key: str) -> None:
        """Delete key if present."""
        ...
