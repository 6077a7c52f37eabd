"""Remote folder tree and sync models."""
from dataclasses import asdict, dataclass, field
from typing import Optional

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


@dataclass
class RemoteFileDescriptor:
    """Leaf file found during a crawl. Ephemeral, crawl-scoped."""
    id: str
    name: str
    mime_type: str
    size: int = 0
    modified_time: Optional[str] = None
    checksum: Optional[str] = None
    path: str = ""

    @classmethod
    def from_api(cls, item: dict, parent_path: str = "") -> "RemoteFileDescriptor":
        """Build descriptor from a Drive v3 `files` item."""
        name = item.get("name", "")
        return cls(
            id=item["id"],
            name=name,
            mime_type=item.get("mimeType", ""),
            size=int(item.get("size") or 0),
            modified_time=item.get("modifiedTime"),
            checksum=item.get("md5Checksum"),
            path=f"{parent_path}/{name}" if parent_path else name,
        )


@dataclass
class ListPage:
    """One page of a folder listing."""
    items: list[dict]
    next_page_token: Optional[str] = None


@dataclass
class CrawlDiagnostics:
    root_id: str
    folders_scanned: int = 0
    pages_fetched: int = 0
    last_status: int = 200
    error_message: Optional[str] = None

    @property
    def query(self) -> str:
        return f"'{self.root_id}' in parents (recursive scan)"


@dataclass
class CrawlResult:
    files: list[RemoteFileDescriptor]
    diagnostics: CrawlDiagnostics


@dataclass
class IndexEntry:
    """Persisted record of one synced file. Replaced, never mutated."""
    file_id: str
    name: str
    modified_time: Optional[str]
    chunk_store_ref: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "IndexEntry":
        return cls(
            file_id=data["file_id"],
            name=data.get("name", ""),
            modified_time=data.get("modified_time"),
            chunk_store_ref=data["chunk_store_ref"],
        )


@dataclass
class DiffResult:
    """Classification of a new listing against the previous index."""
    reuse: list[IndexEntry] = field(default_factory=list)
    to_process: list[RemoteFileDescriptor] = field(default_factory=list)
    stale: list[IndexEntry] = field(default_factory=list)
    unsupported: list[RemoteFileDescriptor] = field(default_factory=list)


@dataclass
class SkippedFile:
    name: str
    reason: str
    mime_type: Optional[str] = None


@dataclass
class SyncReport:
    root_id: str
    scanned: int = 0
    processed: int = 0
    reused: int = 0
    skipped: int = 0
    failed: int = 0
    stale: int = 0
    chunks: int = 0
    skipped_list: list[SkippedFile] = field(default_factory=list)
    last_sync_at: Optional[float] = None


@dataclass
class KBStats:
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass
class KBMetadata:
    """Summary of the last successful sync for a root folder."""
    root_folder_id: str
    last_sync_at: float
    fingerprint: str
    stats: KBStats = field(default_factory=KBStats)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "KBMetadata":
        return cls(
            root_folder_id=data["root_folder_id"],
            last_sync_at=data["last_sync_at"],
            fingerprint=data["fingerprint"],
            stats=KBStats(**data.get("stats", {})),
        )
