"""Sync service - incremental remote folder indexing."""

import asyncio
import hashlib
import logging
import time
from typing import Callable, Optional

from ..errors import DecodeFailure, KBLookupError, SyncInProgress
from ..models.document import Chunk
from ..models.remote import (
    IndexEntry,
    KBMetadata,
    KBStats,
    RemoteFileDescriptor,
    SkippedFile,
    SyncReport,
)
from ..protocols.decoder import DecodeErr, DocumentDecoderProtocol
from ..protocols.remote_provider import RemoteFileProviderProtocol
from .chunker import WindowChunker
from .crawler import TreeCrawler
from .diff import diff
from .repositories import KnowledgeBaseRepository

logger = logging.getLogger(__name__)

# Google-native formats have no bytes of their own and must be exported.
EXPORT_MIME_TYPES = {
    "application/vnd.google-apps.document": "text/plain",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "text/plain",
}


class SyncService:
    """Crawl a remote root, reuse unchanged files and re-chunk the rest."""

    def __init__(
        self,
        provider: RemoteFileProviderProtocol,
        repository: KnowledgeBaseRepository,
        decoder: DocumentDecoderProtocol,
        chunker: WindowChunker,
        default_root_id: str = "",
    ):
        """Initialize sync service.

        Args:
            provider: Remote file provider.
            repository: Index and chunk persistence.
            decoder: Decoder for downloaded binary/text files.
            chunker: Window chunker.
            default_root_id: Root folder used when `run` gets none.
        """
        self._provider = provider
        self._crawler = TreeCrawler(provider)
        self._repository = repository
        self._decoder = decoder
        self._chunker = chunker
        self._default_root_id = default_root_id
        self._locks: dict[str, asyncio.Lock] = {}

    def supports(self, file: RemoteFileDescriptor) -> bool:
        """Whether a remote file's type can be turned into text."""
        return file.mime_type in EXPORT_MIME_TYPES or self._decoder.supports(
            file.name, file.mime_type
        )

    async def run(
        self,
        root_id: Optional[str] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> SyncReport:
        """Run one sync of a root folder.

        Args:
            root_id: Root folder id, defaults to the configured root.
            on_progress: Called with each folder name during the crawl.

        Returns:
            Sync report.

        Raises:
            CrawlFailure: If the crawl fails; nothing is committed.
            SyncInProgress: If a sync for this root is already running.
        """
        root_id = root_id or self._default_root_id
        if not root_id:
            raise ValueError("No root folder id configured")

        lock = self._locks.setdefault(root_id, asyncio.Lock())
        if lock.locked():
            raise SyncInProgress(root_id)

        async with lock:
            return await self._sync(root_id, on_progress)

    async def _sync(
        self,
        root_id: str,
        on_progress: Optional[Callable[[str], None]],
    ) -> SyncReport:
        crawl = await self._crawler.crawl(root_id, on_progress=on_progress)
        report = SyncReport(root_id=root_id, scanned=len(crawl.files))

        old_index = self._repository.load_index(root_id)
        result = diff(crawl.files, old_index, is_supported=self.supports)

        for file in result.unsupported:
            report.skipped += 1
            report.skipped_list.append(
                SkippedFile(name=file.name, reason="unsupported format", mime_type=file.mime_type)
            )

        new_index: list[IndexEntry] = []
        all_chunks: list[Chunk] = []
        to_process = list(result.to_process)
        by_id = {f.id: f for f in crawl.files}

        for entry in result.reuse:
            try:
                chunks = self._repository.load_file_chunks(entry.chunk_store_ref)
            except Exception as e:
                logger.warning(f"Cannot read stored chunks for {entry.name}: {e}")
                chunks = None

            if chunks is None:
                logger.info(f"Stored chunks missing for {entry.name}, reprocessing")
                to_process.append(by_id[entry.file_id])
                continue

            all_chunks.extend(chunks)
            new_index.append(entry)
            report.reused += 1

        for file in to_process:
            try:
                text = await self._fetch_text(file)
            except KBLookupError as e:
                logger.warning(f"Failed to process {file.path or file.name}: {e}")
                report.failed += 1
                report.skipped_list.append(
                    SkippedFile(name=file.name, reason=str(e), mime_type=file.mime_type)
                )
                continue

            chunks = self._chunker.chunk(text, file.id, file.name, file.path)
            ref = self._repository.save_file_chunks(root_id, file.id, file.name, chunks)
            new_index.append(
                IndexEntry(
                    file_id=file.id,
                    name=file.name,
                    modified_time=file.modified_time,
                    chunk_store_ref=ref,
                )
            )
            all_chunks.extend(chunks)
            report.processed += 1
            logger.info(f"Processed {file.path or file.name}: {len(chunks)} chunks")

        report.chunks = len(all_chunks)
        report.stale = len(result.stale)
        report.last_sync_at = time.time()

        metadata = KBMetadata(
            root_folder_id=root_id,
            last_sync_at=report.last_sync_at,
            fingerprint=self._index_fingerprint(new_index),
            stats=KBStats(
                total=report.scanned,
                success=report.processed + report.reused,
                failed=report.failed,
                skipped=report.skipped,
            ),
        )
        self._repository.commit(root_id, new_index, all_chunks, metadata)

        kept_refs = {e.chunk_store_ref for e in new_index}
        for old in old_index:
            if old.chunk_store_ref not in kept_refs:
                self._repository.delete_file_chunks(old.chunk_store_ref)

        logger.info(
            f"Sync complete for {root_id}: scanned={report.scanned} "
            f"processed={report.processed} reused={report.reused} "
            f"failed={report.failed} skipped={report.skipped} "
            f"stale={report.stale} chunks={report.chunks}"
        )
        return report

    async def _fetch_text(self, file: RemoteFileDescriptor) -> str:
        target = EXPORT_MIME_TYPES.get(file.mime_type)
        if target:
            return await self._provider.export(file.id, target)

        data = await self._provider.download(file.id)
        result = await asyncio.to_thread(
            self._decoder.decode, file.name, data, file.mime_type
        )
        if isinstance(result, DecodeErr):
            raise DecodeFailure(result.reason)
        return result.text

    @staticmethod
    def _index_fingerprint(index: list[IndexEntry]) -> str:
        digest = hashlib.sha256()
        for entry in sorted(index, key=lambda e: e.file_id):
            digest.update(f"{entry.file_id}:{entry.modified_time}\n".encode())
        return digest.hexdigest()
