"""Core business services."""
from .chunker import WindowChunker
from .crawler import TreeCrawler
from .diff import diff
from .ingest_service import IngestService
from .query_service import QueryService
from .repositories import KnowledgeBaseRepository, LocalDocumentRepository
from .scorer import RetrievalScorer
from .sync_service import SyncService

__all__ = [
    "WindowChunker",
    "TreeCrawler",
    "diff",
    "IngestService",
    "QueryService",
    "KnowledgeBaseRepository",
    "LocalDocumentRepository",
    "RetrievalScorer",
    "SyncService",
]
