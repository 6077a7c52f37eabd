import asyncio

import pytest

from fakes import FakeDriveProvider, file, folder
from kblookup.core.errors import CrawlFailure
from kblookup.core.services.crawler import TreeCrawler


def test_cycle_terminates_and_returns_each_file_once():
    provider = FakeDriveProvider(
        {
            "A": [folder("B", "Sub"), file("f1", "one.txt")],
            "B": [folder("A", "Back"), file("f2", "two.txt"), file("f1", "one.txt")],
        }
    )

    result = asyncio.run(TreeCrawler(provider).crawl("A"))

    assert sorted(f.id for f in result.files) == ["f1", "f2"]
    assert {f.id: f.path for f in result.files} == {"f1": "one.txt", "f2": "Sub/two.txt"}
    assert result.diagnostics.folders_scanned == 2


def test_pagination_preserves_order():
    items = [file(f"f{i}", f"{i}.txt") for i in range(5)]
    provider = FakeDriveProvider({"root": items}, page_size=2)

    result = asyncio.run(TreeCrawler(provider).crawl("root"))

    assert [f.id for f in result.files] == ["f0", "f1", "f2", "f3", "f4"]
    assert provider.list_calls == [("root", None), ("root", "2"), ("root", "4")]
    assert result.diagnostics.pages_fetched == 3


def test_breadth_first_order_and_progress():
    provider = FakeDriveProvider(
        {
            "root": [folder("a", "A"), folder("b", "B"), file("r", "r.txt")],
            "a": [folder("a1", "A1"), file("fa", "a.txt")],
            "b": [file("fb", "b.txt")],
            "a1": [file("fa1", "a1.txt")],
        }
    )
    scanned = []

    result = asyncio.run(TreeCrawler(provider).crawl("root", on_progress=scanned.append))

    assert scanned == ["Root", "A", "B", "A1"]
    assert [f.path for f in result.files] == ["r.txt", "A/a.txt", "B/b.txt", "A/A1/a1.txt"]


def test_empty_folder_returns_nothing():
    result = asyncio.run(TreeCrawler(FakeDriveProvider({"root": []})).crawl("root"))

    assert result.files == []


def test_unsupported_types_are_still_listed():
    provider = FakeDriveProvider({"root": [file("img", "photo.png", mime_type="image/png")]})

    result = asyncio.run(TreeCrawler(provider).crawl("root"))

    assert [f.mime_type for f in result.files] == ["image/png"]


def test_listing_failure_aborts_crawl():
    provider = FakeDriveProvider(
        {"root": [file("f1", "one.txt"), folder("locked", "Locked")], "locked": []}
    )
    provider.failing_folders["locked"] = 403

    with pytest.raises(CrawlFailure) as exc:
        asyncio.run(TreeCrawler(provider).crawl("root"))

    assert exc.value.status == 403
    assert "permissions" in exc.value.message
