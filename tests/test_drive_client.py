import asyncio

import httpx
import pytest

from kblookup.core.errors import CrawlFailure, RemoteFetchError
from kblookup.infrastructure.drive import GoogleDriveClient, RetryPolicy, parse_drive_id

BASE = "https://drive.test/v3"


def _client(handler, attempts: int = 3) -> GoogleDriveClient:
    return GoogleDriveClient(
        access_token="token-123",
        base_url=BASE,
        page_size=2,
        retry=RetryPolicy(attempts=attempts, backoff=0),
        transport=httpx.MockTransport(handler),
    )


def test_list_children_sends_query_and_reads_page():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "files": [{"id": "f1", "name": "a.txt", "mimeType": "text/plain"}],
                "nextPageToken": "next-1",
            },
        )

    async def run():
        async with _client(handler) as client:
            return await client.list_children("folder-9", page_token="tok")

    page = asyncio.run(run())

    assert page.items[0]["id"] == "f1"
    assert page.next_page_token == "next-1"
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer token-123"
    assert request.url.path == "/v3/files"
    assert request.url.params["q"] == "'folder-9' in parents and trashed = false"
    assert request.url.params["pageSize"] == "2"
    assert request.url.params["pageToken"] == "tok"
    assert request.url.params["supportsAllDrives"] == "true"


def test_list_children_error_carries_status_and_message():
    def handler(request):
        return httpx.Response(
            403, json={"error": {"code": 403, "message": "The caller does not have permission"}}
        )

    async def run():
        async with _client(handler) as client:
            await client.list_children("secret")

    with pytest.raises(CrawlFailure) as exc:
        asyncio.run(run())

    assert exc.value.status == 403
    assert exc.value.message == "The caller does not have permission"
    assert exc.value.folder_id == "secret"
    assert str(exc.value) == "Drive API Error [403]: The caller does not have permission"


def test_retryable_status_is_retried():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503, text="busy")
        return httpx.Response(200, json={"files": []})

    async def run():
        async with _client(handler) as client:
            return await client.list_children("root")

    page = asyncio.run(run())

    assert len(calls) == 3
    assert page.items == []
    assert page.next_page_token is None


def test_retries_exhausted_returns_last_status():
    def handler(request):
        return httpx.Response(429, text="slow down")

    async def run():
        async with _client(handler, attempts=2) as client:
            await client.list_children("root")

    with pytest.raises(CrawlFailure) as exc:
        asyncio.run(run())

    assert exc.value.status == 429
    assert exc.value.message == "HTTP 429"


def test_transport_error_becomes_crawl_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async def run():
        async with _client(handler, attempts=2) as client:
            await client.list_children("root")

    with pytest.raises(CrawlFailure) as exc:
        asyncio.run(run())

    assert exc.value.status == 0


def test_download_and_export():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/export"):
            assert request.url.params["mimeType"] == "text/plain"
            return httpx.Response(200, content="\ufeff匯出文字".encode("utf-8"))
        assert request.url.params["alt"] == "media"
        return httpx.Response(200, content=b"%PDF-1.4 raw")

    async def run():
        async with _client(handler) as client:
            return await client.download("f1"), await client.export("g1", "text/plain")

    data, text = asyncio.run(run())

    assert data == b"%PDF-1.4 raw"
    assert text == "匯出文字"


def test_download_not_found():
    def handler(request):
        return httpx.Response(404, json={"error": {"message": "File not found: f9."}})

    async def run():
        async with _client(handler) as client:
            await client.download("f9")

    with pytest.raises(RemoteFetchError) as exc:
        asyncio.run(run())

    assert exc.value.status == 404
    assert exc.value.file_id == "f9"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://drive.google.com/drive/folders/1AbC_xyz?usp=sharing", "1AbC_xyz"),
        ("https://drive.google.com/file/d/1FiLe/view", "1FiLe"),
        ("https://drive.google.com/open?id=1OpEn", "1OpEn"),
        ("  1BareId  ", "1BareId"),
        ("", ""),
    ],
)
def test_parse_drive_id(value, expected):
    assert parse_drive_id(value) == expected


def test_listing_body_that_is_not_json():
    def handler(request):
        return httpx.Response(200, text="<html>login</html>")

    async def run():
        async with _client(handler) as client:
            await client.list_children("root")

    with pytest.raises(CrawlFailure) as exc:
        asyncio.run(run())

    assert exc.value.status == 200
    assert exc.value.message == "Invalid listing response"
