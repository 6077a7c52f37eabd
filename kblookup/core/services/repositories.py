"""Repositories mapping domain records onto the key-value store."""

from collections import deque
from typing import Optional

from ..models.document import Chunk, LocalDocument, ProcessingOutcome
from ..models.remote import IndexEntry, KBMetadata
from ..protocols.storage import KeyValueStoreProtocol


class KnowledgeBaseRepository:
    """Index, chunk blobs and sync metadata of one or more remote roots."""

    def __init__(self, store: KeyValueStoreProtocol):
        self._store = store

    @staticmethod
    def index_key(root_id: str) -> str:
        return f"drive_index_{root_id}"

    @staticmethod
    def chunks_key(root_id: str) -> str:
        return f"drive_chunks_{root_id}"

    @staticmethod
    def chunk_blob_key(root_id: str, file_id: str) -> str:
        return f"knowledge/{root_id}/{file_id}.json"

    def load_index(self, root_id: str) -> list[IndexEntry]:
        raw = self._store.get(self.index_key(root_id)) or []
        return [IndexEntry.from_dict(e) for e in raw]

    def load_file_chunks(self, ref: str) -> Optional[list[Chunk]]:
        """Load a per-file chunk blob, or None if it is gone."""
        blob = self._store.get(ref)
        if blob is None:
            return None
        return [Chunk.from_dict(c) for c in blob["chunks"]]

    def save_file_chunks(
        self, root_id: str, file_id: str, name: str, chunks: list[Chunk]
    ) -> str:
        """Write a per-file chunk blob and return its reference."""
        ref = self.chunk_blob_key(root_id, file_id)
        self._store.set(
            ref,
            {"id": file_id, "name": name, "chunks": [c.to_dict() for c in chunks]},
        )
        return ref

    def delete_file_chunks(self, ref: str) -> None:
        self._store.delete(ref)

    def commit(
        self,
        root_id: str,
        index: list[IndexEntry],
        chunks: list[Chunk],
        metadata: KBMetadata,
    ) -> None:
        """Replace index, aggregated chunk set and metadata for a root."""
        self._store.set(self.index_key(root_id), [e.to_dict() for e in index])
        self._store.set(self.chunks_key(root_id), [c.to_dict() for c in chunks])
        self._store.set(f"last_sync_{root_id}", metadata.last_sync_at)
        self._store.set(f"kb_meta_{root_id}", metadata.to_dict())

    def load_chunks(self, root_id: str) -> list[Chunk]:
        """Aggregated chunk set written by the last sync."""
        raw = self._store.get(self.chunks_key(root_id)) or []
        return [Chunk.from_dict(c) for c in raw]

    def load_metadata(self, root_id: str) -> Optional[KBMetadata]:
        raw = self._store.get(f"kb_meta_{root_id}")
        return KBMetadata.from_dict(raw) if raw else None


class LocalDocumentRepository:
    """Local sandbox documents and the capped ingestion outcome log."""

    DOCS_KEY = "local_test_docs"
    OUTCOMES_KEY = "local_outcomes"

    def __init__(self, store: KeyValueStoreProtocol, outcome_limit: int = 500):
        self._store = store
        self._outcome_limit = outcome_limit

    def load(self) -> list[LocalDocument]:
        raw = self._store.get(self.DOCS_KEY) or []
        return [LocalDocument.from_dict(d) for d in raw]

    def save(self, documents: list[LocalDocument]) -> None:
        """Write the whole collection back in one value.

        Raises:
            StorageCapacityError: If the store is full.
        """
        self._store.set(self.DOCS_KEY, [d.to_dict() for d in documents])

    def load_outcomes(self) -> list[ProcessingOutcome]:
        raw = self._store.get(self.OUTCOMES_KEY) or []
        return [ProcessingOutcome.from_dict(o) for o in raw]

    def append_outcomes(self, outcomes: list[ProcessingOutcome]) -> list[ProcessingOutcome]:
        """Append to the log, keeping only the most recent entries."""
        log = deque(self.load_outcomes(), maxlen=self._outcome_limit)
        log.extend(outcomes)
        self._store.set(self.OUTCOMES_KEY, [o.to_dict() for o in log])
        return list(log)

    def clear_outcomes(self) -> None:
        self._store.delete(self.OUTCOMES_KEY)
