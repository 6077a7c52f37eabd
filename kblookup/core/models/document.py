"""Document domain models."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from ..errors import PersistenceWarning


class DocSource(Enum):
    """Where a document or chunk came from."""
    LOCAL = "local"
    REMOTE = "remote"


class SearchScope(Enum):
    """User-selected retrieval boundary."""
    REMOTE = "remote"
    LOCAL = "local"
    BOTH = "both"

    def includes(self, source: DocSource) -> bool:
        if self is SearchScope.BOTH:
            return True
        return self.value == source.value


class OutcomeStatus(Enum):
    """Result of one ingestion attempt."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    DUPLICATE = "duplicate"


@dataclass
class Chunk:
    """Overlapping text window of a document."""
    chunk_id: str
    file_id: str
    file_name: str
    path: str
    text: str
    snippet: str
    source: DocSource = DocSource.REMOTE

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Chunk":
        text = data["text"]
        return cls(
            chunk_id=data["chunk_id"],
            file_id=data["file_id"],
            file_name=data["file_name"],
            path=data.get("path", ""),
            text=text,
            snippet=data.get("snippet", text[:100]),
            source=DocSource(data.get("source", DocSource.REMOTE.value)),
        )


@dataclass
class ScoredChunk:
    """Chunk with its query-scoped relevance score."""
    chunk: Chunk
    score: int

    @property
    def chunk_id(self) -> str:
        return self.chunk.chunk_id

    @property
    def file_name(self) -> str:
        return self.chunk.file_name

    @property
    def text(self) -> str:
        return self.chunk.text

    @property
    def source(self) -> DocSource:
        return self.chunk.source


@dataclass
class LocalFile:
    """User-supplied file waiting to be ingested."""
    relative_path: str
    data: bytes
    modified_time: float = 0.0
    mime_type: Optional[str] = None

    @property
    def name(self) -> str:
        return self.relative_path.replace("\\", "/").rsplit("/", 1)[-1]

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        name = self.name
        return "." + name.rsplit(".", 1)[-1].lower() if "." in name else ""

    @property
    def fingerprint(self) -> str:
        """Dedup key: size + modification time + relative path."""
        return f"{self.size}-{int(self.modified_time * 1000)}-{self.relative_path}"


@dataclass
class LocalDocument:
    """Decoded local document kept in the local sandbox."""
    id: str
    name: str
    content: str
    upload_date: float
    mime_type: str
    fingerprint: str
    size: int
    relative_path: Optional[str] = None
    source: DocSource = DocSource.LOCAL

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LocalDocument":
        return cls(
            id=data["id"],
            name=data["name"],
            content=data["content"],
            upload_date=data["upload_date"],
            mime_type=data.get("mime_type", "text/plain"),
            fingerprint=data["fingerprint"],
            size=data.get("size", 0),
            relative_path=data.get("relative_path"),
            source=DocSource(data.get("source", DocSource.LOCAL.value)),
        )


@dataclass
class ProcessingOutcome:
    """One entry of the ingestion outcome log."""
    id: str
    name: str
    status: OutcomeStatus
    timestamp: float
    reason: Optional[str] = None
    content_length: Optional[int] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProcessingOutcome":
        return cls(
            id=data["id"],
            name=data["name"],
            status=OutcomeStatus(data["status"]),
            timestamp=data["timestamp"],
            reason=data.get("reason"),
            content_length=data.get("content_length"),
        )


@dataclass
class Passage:
    """Retrieved text handed to the answer synthesizer."""
    source_label: str
    file_name: str
    text: str


@dataclass
class RetrievalResponse:
    """Query-time retrieval result for the presentation layer."""
    query: str
    scope: SearchScope
    chunks: list[ScoredChunk]
    passages: list[Passage] = field(default_factory=list)

    @property
    def sources(self) -> list[str]:
        """Unique source file names in ranking order."""
        seen = set()
        sources = []
        for c in self.chunks:
            if c.file_name not in seen:
                seen.add(c.file_name)
                sources.append(c.file_name)
        return sources


@dataclass
class IngestResult:
    """Outcome of one local ingestion run."""
    documents: list[LocalDocument]
    outcomes: list[ProcessingOutcome]
    cancelled: bool = False
    persistence_warning: Optional[PersistenceWarning] = None

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)
