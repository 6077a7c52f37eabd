import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from kblookup.core.errors import StorageCapacityError

logger = logging.getLogger(__name__)

_CAPACITY_MARKERS = ("max request size", "maxmemory", "oom", "max storage")


class RestKeyValueStore:
    """Key-value store using a Redis REST API (Upstash / Vercel KV)."""

    def __init__(self, url: str, token: str, timeout: float = 30.0):
        """Initialize REST KV client.

        Args:
            url: REST endpoint, e.g. https://<db>.upstash.io.
            token: REST API token.
            timeout: Request timeout in seconds.
        """
        self._base_url = url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"}
        self._timeout = timeout

    def _url(self, command: str, key: str) -> str:
        return f"{self._base_url}/{command}/{quote(key, safe='')}"

    def _result(self, resp: requests.Response) -> Any:
        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        error = payload.get("error") if isinstance(payload, dict) else None

        if resp.status_code == 413 or (
            error and any(m in error.lower() for m in _CAPACITY_MARKERS)
        ):
            raise StorageCapacityError(error or f"HTTP {resp.status_code}")
        if error:
            raise RuntimeError(f"KV error [{resp.status_code}]: {error}")
        resp.raise_for_status()
        return payload.get("result")

    def get(self, key: str) -> Optional[Any]:
        resp = requests.get(self._url("get", key), headers=self._headers, timeout=self._timeout)
        raw = self._result(resp)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        resp = requests.post(
            self._url("set", key),
            headers=self._headers,
            data=json.dumps(value, ensure_ascii=False).encode("utf-8"),
            timeout=self._timeout,
        )
        self._result(resp)

    def list(self, prefix: str = "") -> list[str]:
        resp = requests.get(
            f"{self._url('keys', prefix)}*", headers=self._headers, timeout=self._timeout
        )
        return sorted(self._result(resp) or [])

    def delete(self, key: str) -> None:
        resp = requests.post(self._url("del", key), headers=self._headers, timeout=self._timeout)
        self._result(resp)
        logger.debug(f"Deleted {key}")
