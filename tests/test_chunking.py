import pytest

from kblookup.core.models.document import DocSource
from kblookup.core.services.chunker import WindowChunker


def _text(length: int) -> str:
    return "".join(chr(ord("a") + i % 26) for i in range(length))


def test_windows_advance_by_size_minus_overlap():
    chunker = WindowChunker(window_size=1000, overlap=200)
    chunks = chunker.chunk(_text(2500), "f1", "a.txt", "dir/a.txt")

    assert [c.chunk_id for c in chunks] == ["f1_0", "f1_800", "f1_1600", "f1_2400"]
    assert [len(c.text) for c in chunks] == [1000, 1000, 900, 100]
    assert all(c.file_name == "a.txt" and c.path == "dir/a.txt" for c in chunks)
    assert chunks[0].text[800:] == chunks[1].text[:200]


def test_short_trailing_window_is_dropped():
    chunker = WindowChunker(window_size=1000, overlap=200)
    chunks = chunker.chunk(_text(2430), "f1", "a.txt")

    assert [c.chunk_id for c in chunks] == ["f1_0", "f1_800", "f1_1600"]


@pytest.mark.parametrize("length", [0, 49, 50, 999, 1000, 1001, 1799, 3333, 10007])
def test_chunks_bounded_and_cover_text(length):
    window, overlap, min_length = 1000, 200, 50
    text = _text(length)
    chunks = WindowChunker(window, overlap, min_length).chunk(text, "f", "f.txt")

    assert all(len(c.text) <= window for c in chunks)

    covered = [False] * length
    for c in chunks:
        start = int(c.chunk_id.rsplit("_", 1)[1])
        assert text[start : start + len(c.text)] == c.text
        for i in range(start, start + len(c.text)):
            covered[i] = True

    # Only a trailing remainder shorter than min_length may be uncovered
    first_gap = covered.index(False) if False in covered else length
    assert all(not v for v in covered[first_gap:])
    assert length - first_gap < min_length or not chunks and length < min_length


def test_chunking_is_idempotent():
    chunker = WindowChunker(window_size=300, overlap=50)
    text = "法規內容 " * 400

    first = chunker.chunk(text, "doc", "doc.txt")
    second = chunker.chunk(text, "doc", "doc.txt")

    assert [c.chunk_id for c in first] == [c.chunk_id for c in second]
    assert [c.text for c in first] == [c.text for c in second]


def test_snippet_and_source():
    chunks = WindowChunker(200, 20).chunk(_text(500), "x", "x.md", source=DocSource.LOCAL)

    assert chunks[0].snippet == chunks[0].text[:100]
    assert all(c.source is DocSource.LOCAL for c in chunks)


@pytest.mark.parametrize("window,overlap", [(0, 0), (100, 100), (100, 150), (100, -1)])
def test_invalid_parameters_rejected(window, overlap):
    with pytest.raises(ValueError):
        WindowChunker(window_size=window, overlap=overlap)
