import logging
from typing import Optional

import httpx

from kblookup.core.errors import CrawlFailure, RemoteFetchError
from kblookup.core.models.remote import ListPage

from .retry import RetryPolicy

logger = logging.getLogger(__name__)

LIST_FIELDS = "nextPageToken, files(id, name, mimeType, size, modifiedTime, md5Checksum)"


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"


class GoogleDriveClient:
    """Google Drive v3 REST client authenticated with a bearer token."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://www.googleapis.com/drive/v3",
        page_size: int = 1000,
        timeout: float = 60.0,
        retry: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Drive client.

        Args:
            access_token: OAuth access token with drive.readonly scope.
            base_url: Drive API URL.
            page_size: Items per listing page.
            timeout: Request timeout in seconds.
            retry: Retry policy for every request.
            transport: Custom httpx transport (tests).
        """
        self._base_url = base_url.rstrip("/")
        self._page_size = page_size
        self._retry = retry or RetryPolicy()
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GoogleDriveClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def list_children(
        self, folder_id: str, page_token: Optional[str] = None
    ) -> ListPage:
        """List one page of a folder's non-trashed children."""
        params = {
            "q": f"'{folder_id}' in parents and trashed = false",
            "fields": LIST_FIELDS,
            "pageSize": self._page_size,
            "supportsAllDrives": "true",
            "includeItemsFromAllDrives": "true",
        }
        if page_token:
            params["pageToken"] = page_token

        try:
            resp = await self._retry.call(
                lambda: self._client.get(f"{self._base_url}/files", params=params)
            )
        except httpx.TransportError as e:
            raise CrawlFailure(0, f"Transport error: {e!r}", folder_id) from e

        if resp.status_code != 200:
            raise CrawlFailure(resp.status_code, _error_message(resp), folder_id)

        try:
            data = resp.json()
        except ValueError as e:
            raise CrawlFailure(resp.status_code, "Invalid listing response", folder_id) from e

        return ListPage(
            items=data.get("files", []),
            next_page_token=data.get("nextPageToken"),
        )

    async def _fetch(self, file_id: str, url: str, params: dict) -> httpx.Response:
        try:
            resp = await self._retry.call(lambda: self._client.get(url, params=params))
        except httpx.TransportError as e:
            raise RemoteFetchError(0, f"Transport error: {e!r}", file_id) from e

        if resp.status_code != 200:
            raise RemoteFetchError(resp.status_code, _error_message(resp), file_id)
        return resp

    async def download(self, file_id: str) -> bytes:
        """Download raw bytes of a binary or plain-text file."""
        resp = await self._fetch(
            file_id,
            f"{self._base_url}/files/{file_id}",
            {"alt": "media", "supportsAllDrives": "true"},
        )
        logger.debug(f"Downloaded {file_id}: {len(resp.content)} bytes")
        return resp.content

    async def export(self, file_id: str, target_mime: str) -> str:
        """Export a Google Docs/Sheets/Slides file as text."""
        resp = await self._fetch(
            file_id,
            f"{self._base_url}/files/{file_id}/export",
            {"mimeType": target_mime},
        )
        return resp.content.decode("utf-8-sig", errors="replace")
