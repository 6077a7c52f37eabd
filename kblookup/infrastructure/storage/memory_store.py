import copy
import json
from typing import Any, Optional

from kblookup.core.errors import StorageCapacityError


class MemoryKeyValueStore:
    """In-process store with an optional byte budget."""

    def __init__(self, capacity_bytes: Optional[int] = None):
        self._data: dict[str, Any] = {}
        self._sizes: dict[str, int] = {}
        self._capacity_bytes = capacity_bytes

    def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        size = len(json.dumps(value, ensure_ascii=False).encode("utf-8"))
        if self._capacity_bytes is not None:
            used = sum(self._sizes.values()) - self._sizes.get(key, 0)
            if used + size > self._capacity_bytes:
                raise StorageCapacityError(
                    f"Writing {key} ({size} bytes) exceeds capacity "
                    f"of {self._capacity_bytes} bytes"
                )
        self._data[key] = copy.deepcopy(value)
        self._sizes[key] = size

    def list(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
        self._sizes.pop(key, None)
