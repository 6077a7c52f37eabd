import errno
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote, unquote

from kblookup.core.errors import StorageCapacityError

logger = logging.getLogger(__name__)

_CAPACITY_ERRNOS = {errno.ENOSPC, errno.EDQUOT, errno.EFBIG}


class JsonFileKeyValueStore:
    """Store each key as a JSON file in one directory."""

    def __init__(self, root: str = "./kb_store"):
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._root / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(dir=self._root, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp, path)
        except OSError as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            if e.errno in _CAPACITY_ERRNOS:
                raise StorageCapacityError(f"Disk full writing {key}: {e}") from e
            raise

    def list(self, prefix: str = "") -> list[str]:
        keys = [unquote(p.name[: -len(".json")]) for p in self._root.glob("*.json")]
        return sorted(k for k in keys if k.startswith(prefix))

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.debug(f"Deleted {key}")
