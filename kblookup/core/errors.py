"""Error taxonomy for crawling, syncing, ingestion and retrieval."""
from dataclasses import dataclass


class KBLookupError(Exception):
    """Base class for all knowledge-base errors."""


class CrawlFailure(KBLookupError):
    """Remote listing failed; the whole crawl is aborted."""

    def __init__(self, status: int, message: str, folder_id: str | None = None):
        self.status = status
        self.message = message
        self.folder_id = folder_id
        super().__init__(f"Drive API Error [{status}]: {message}")


class RemoteFetchError(KBLookupError):
    """Downloading or exporting a single remote file failed."""

    def __init__(self, status: int, message: str, file_id: str | None = None):
        self.status = status
        self.message = message
        self.file_id = file_id
        super().__init__(f"Download Error [{status}]: {message}")


class DecodeFailure(KBLookupError):
    """A format decoder could not turn bytes into text."""


class NoRelevantData(KBLookupError):
    """Chunks were searched but none matched the query."""

    def __init__(self, query: str, scope: str):
        self.query = query
        self.scope = scope
        super().__init__(f"No chunks relevant to '{query}' in scope '{scope}'")


class EmptyScope(KBLookupError):
    """The selected retrieval scope holds no chunks at all."""

    def __init__(self, scope: str):
        self.scope = scope
        super().__init__(
            f"Knowledge base for scope '{scope}' is empty; "
            "upload documents or sync the remote folder first"
        )


class StorageCapacityError(KBLookupError):
    """Backing store refused a write because it is full or the value is too large."""


class SyncInProgress(KBLookupError):
    """Another sync for the same root is already running."""

    def __init__(self, root_id: str):
        self.root_id = root_id
        super().__init__(f"Sync already in progress for root {root_id}")


@dataclass
class PersistenceWarning:
    """Non-fatal: documents are kept in memory but were not fully persisted."""
    message: str
    document_count: int


class AnswerSynthesisError(KBLookupError):
    """The language model returned something that is not a valid answer record."""
