"""Fixed-size overlapping window chunker."""

from ..models.document import Chunk, DocSource

SNIPPET_LENGTH = 100


class WindowChunker:
    """Slide a window of `window_size` chars, advancing by `window_size - overlap`.

    Chunk ids are `{file_id}_{start_offset}`, so re-chunking identical text
    yields identical ids. Windows shorter than `min_length` are dropped.
    """

    def __init__(
        self,
        window_size: int = 1000,
        overlap: int = 200,
        min_length: int = 50,
    ):
        """Initialize chunker.

        Args:
            window_size: Window size in characters.
            overlap: Characters shared by consecutive windows.
            min_length: Minimum window length to keep.
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        if not 0 <= overlap < window_size:
            raise ValueError(
                f"overlap must satisfy 0 <= overlap < window_size, got {overlap}"
            )
        self._window_size = window_size
        self._overlap = overlap
        self._min_length = min_length

    @property
    def step(self) -> int:
        return self._window_size - self._overlap

    def chunk(
        self,
        text: str,
        file_id: str,
        file_name: str,
        path: str = "",
        source: DocSource = DocSource.REMOTE,
    ) -> list[Chunk]:
        """Split text into overlapping windows.

        Args:
            text: Document text.
            file_id: Stable id of the source file.
            file_name: Display name of the source file.
            path: Materialized folder path.
            source: Origin of the document.

        Returns:
            Chunks in offset order.
        """
        chunks = []
        for start in range(0, len(text), self.step):
            window = text[start : start + self._window_size]
            if len(window) < self._min_length:
                continue
            chunks.append(
                Chunk(
                    chunk_id=f"{file_id}_{start}",
                    file_id=file_id,
                    file_name=file_name,
                    path=path,
                    text=window,
                    snippet=window[:SNIPPET_LENGTH],
                    source=source,
                )
            )
        return chunks
