"""Domain models."""
from .answer import Finding, QueryAnswer, RegulationAnswer, SourceRef
from .document import (
    Chunk,
    DocSource,
    IngestResult,
    LocalDocument,
    LocalFile,
    OutcomeStatus,
    Passage,
    ProcessingOutcome,
    RetrievalResponse,
    ScoredChunk,
    SearchScope,
)
from .remote import (
    CrawlDiagnostics,
    CrawlResult,
    DiffResult,
    IndexEntry,
    KBMetadata,
    KBStats,
    ListPage,
    RemoteFileDescriptor,
    SkippedFile,
    SyncReport,
)

__all__ = [
    "Chunk",
    "DocSource",
    "IngestResult",
    "LocalDocument",
    "LocalFile",
    "OutcomeStatus",
    "Passage",
    "ProcessingOutcome",
    "RetrievalResponse",
    "ScoredChunk",
    "SearchScope",
    "CrawlDiagnostics",
    "CrawlResult",
    "DiffResult",
    "IndexEntry",
    "KBMetadata",
    "KBStats",
    "ListPage",
    "RemoteFileDescriptor",
    "SkippedFile",
    "SyncReport",
    "Finding",
    "QueryAnswer",
    "RegulationAnswer",
    "SourceRef",
]
