from kblookup.core.models.remote import IndexEntry, RemoteFileDescriptor
from kblookup.core.services.diff import diff


def _file(file_id: str, modified: str, mime: str = "text/plain") -> RemoteFileDescriptor:
    return RemoteFileDescriptor(id=file_id, name=f"{file_id}.txt", mime_type=mime, modified_time=modified)


def _entry(file_id: str, modified: str) -> IndexEntry:
    return IndexEntry(
        file_id=file_id,
        name=f"{file_id}.txt",
        modified_time=modified,
        chunk_store_ref=f"knowledge/root/{file_id}.json",
    )


def test_unchanged_file_is_reused():
    result = diff([_file("a", "T1")], [_entry("a", "T1")])

    assert [e.file_id for e in result.reuse] == ["a"]
    assert result.to_process == []
    assert result.stale == []


def test_modified_file_is_processed():
    result = diff([_file("a", "T2")], [_entry("a", "T1")])

    assert result.reuse == []
    assert [f.id for f in result.to_process] == ["a"]
    assert result.stale == []


def test_removed_file_is_stale():
    result = diff([], [_entry("a", "T1")])

    assert result.reuse == []
    assert result.to_process == []
    assert [e.file_id for e in result.stale] == ["a"]


def test_new_file_is_processed():
    result = diff([_file("a", "T1"), _file("b", "T1")], [_entry("a", "T1")])

    assert [e.file_id for e in result.reuse] == ["a"]
    assert [f.id for f in result.to_process] == ["b"]


def test_unsupported_files_set_aside():
    listing = [_file("a", "T1"), _file("img", "T1", mime="image/png")]

    result = diff(listing, [_entry("img", "T1")], is_supported=lambda f: f.mime_type != "image/png")

    assert [f.id for f in result.unsupported] == ["img"]
    assert [f.id for f in result.to_process] == ["a"]
    assert [e.file_id for e in result.stale] == ["img"]
