"""Ingest service - local document ingestion."""

import asyncio
import logging
import mimetypes
import time
import uuid
from typing import Callable, Optional

from ..errors import PersistenceWarning, StorageCapacityError
from ..models.document import (
    IngestResult,
    LocalDocument,
    LocalFile,
    OutcomeStatus,
    ProcessingOutcome,
)
from ..protocols.decoder import DecodeErr, DocumentDecoderProtocol
from .repositories import LocalDocumentRepository

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 5


class IngestService:
    """Service for decoding user-supplied files into the local sandbox."""

    def __init__(
        self,
        decoder: DocumentDecoderProtocol,
        repository: LocalDocumentRepository,
        batch_size: int = 50,
        supported_extensions: Optional[set[str]] = None,
    ):
        """Initialize ingest service.

        Args:
            decoder: Format decoder dispatcher.
            repository: Local document persistence.
            batch_size: Items processed between event-loop yields.
            supported_extensions: Allowed extensions, e.g. {".pdf", ".txt"}.
                None means whatever the decoder supports.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._decoder = decoder
        self._repository = repository
        self._batch_size = batch_size
        self._supported_extensions = (
            {e.lower() for e in supported_extensions} if supported_extensions else None
        )

    def _is_supported(self, item: LocalFile) -> bool:
        if self._supported_extensions is not None:
            if item.extension not in self._supported_extensions:
                return False
        return self._decoder.supports(item.name, item.mime_type)

    async def ingest(
        self,
        items: list[LocalFile],
        existing: list[LocalDocument],
        cancel: Optional[asyncio.Event] = None,
        on_batch: Optional[Callable[[int, int], None]] = None,
    ) -> IngestResult:
        """Decode items in batches, deduplicating by fingerprint.

        Cancellation is checked before each batch; a batch already started
        always completes and its results are kept.

        Args:
            items: Files to ingest.
            existing: Documents already in the sandbox.
            cancel: Set to stop before the next batch.
            on_batch: Called with (processed, total) after each batch.

        Returns:
            Updated document collection and one outcome per processed item.
        """
        documents = list(existing)
        known = {d.fingerprint for d in existing}
        outcomes: list[ProcessingOutcome] = []
        cancelled = False

        for start in range(0, len(items), self._batch_size):
            if cancel is not None and cancel.is_set():
                cancelled = True
                logger.info(
                    f"Ingestion cancelled after {len(outcomes)}/{len(items)} items"
                )
                break

            batch = items[start : start + self._batch_size]
            for offset, item in enumerate(batch):
                outcome, document = await self._process(item, start + offset, known)
                outcomes.append(outcome)
                if document is not None:
                    documents.append(document)
                    known.add(document.fingerprint)

            logger.info(f"Ingested batch: {len(outcomes)}/{len(items)}")
            if on_batch:
                on_batch(len(outcomes), len(items))
            # Let other tasks on the loop run between batches
            await asyncio.sleep(0)

        return IngestResult(documents=documents, outcomes=outcomes, cancelled=cancelled)

    async def _process(
        self, item: LocalFile, index: int, known: set[str]
    ) -> tuple[ProcessingOutcome, Optional[LocalDocument]]:
        now = time.time()
        item_id = f"local-{int(now * 1000)}-{index}"

        def outcome(status: OutcomeStatus, **kwargs) -> ProcessingOutcome:
            return ProcessingOutcome(
                id=item_id, name=item.name, status=status, timestamp=now, **kwargs
            )

        fingerprint = item.fingerprint
        if fingerprint in known:
            logger.debug(f"Skip duplicate: {item.relative_path}")
            return outcome(OutcomeStatus.DUPLICATE, reason="already ingested"), None

        if not self._is_supported(item):
            return outcome(
                OutcomeStatus.SKIPPED, reason=f"unsupported format '{item.extension}'"
            ), None

        mime_type = item.mime_type or mimetypes.guess_type(item.name)[0] or "text/plain"
        result = await asyncio.to_thread(
            self._decoder.decode, item.name, item.data, mime_type
        )

        if isinstance(result, DecodeErr):
            logger.warning(f"Failed to decode {item.relative_path}: {result.reason}")
            return outcome(OutcomeStatus.FAILED, reason=result.reason), None

        content = result.text
        if len(content.strip()) <= MIN_CONTENT_LENGTH:
            return outcome(OutcomeStatus.SKIPPED, reason="content too short"), None

        document = LocalDocument(
            id=f"{item_id}-{uuid.uuid4().hex[:8]}",
            name=item.name,
            content=content,
            upload_date=now,
            mime_type=mime_type,
            fingerprint=fingerprint,
            size=item.size,
            relative_path=item.relative_path,
        )
        return outcome(OutcomeStatus.SUCCESS, content_length=len(content)), document

    async def ingest_files(
        self,
        items: list[LocalFile],
        cancel: Optional[asyncio.Event] = None,
        on_batch: Optional[Callable[[int, int], None]] = None,
    ) -> IngestResult:
        """Ingest against the stored collection and write it back.

        A full store does not discard accepted documents; the result carries
        a persistence warning instead.
        """
        existing = self._repository.load()
        result = await self.ingest(items, existing, cancel=cancel, on_batch=on_batch)

        try:
            self._repository.save(result.documents)
        except StorageCapacityError as e:
            logger.warning(f"Local documents not fully persisted: {e}")
            result.persistence_warning = PersistenceWarning(
                message=str(e), document_count=len(result.documents)
            )

        try:
            self._repository.append_outcomes(result.outcomes)
        except StorageCapacityError as e:
            logger.warning(f"Outcome log not persisted: {e}")

        logger.info(
            f"Ingestion complete: success={result.count(OutcomeStatus.SUCCESS)} "
            f"failed={result.count(OutcomeStatus.FAILED)} "
            f"skipped={result.count(OutcomeStatus.SKIPPED)} "
            f"duplicate={result.count(OutcomeStatus.DUPLICATE)}"
        )
        return result

    def list_documents(self) -> list[LocalDocument]:
        return self._repository.load()

    def recent_outcomes(self) -> list[ProcessingOutcome]:
        return self._repository.load_outcomes()

    def delete(self, document_id: str) -> bool:
        """Delete one document. Returns False if it did not exist."""
        documents = self._repository.load()
        remaining = [d for d in documents if d.id != document_id]
        if len(remaining) == len(documents):
            return False
        self._repository.save(remaining)
        return True

    def clear(self) -> None:
        """Remove all local documents and the outcome log."""
        self._repository.save([])
        self._repository.clear_outcomes()
