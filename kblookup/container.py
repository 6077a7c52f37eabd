import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def build_store(settings: Settings):
    """Create the key-value store selected by `storage_backend`."""
    from .infrastructure.storage import (
        JsonFileKeyValueStore,
        MemoryKeyValueStore,
        RestKeyValueStore,
    )

    backend = settings.storage_backend.lower()
    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "file":
        return JsonFileKeyValueStore(settings.storage_path)
    if backend == "rest":
        if not settings.kv_rest_url or not settings.kv_rest_token:
            raise ValueError("rest storage requires KV_REST_URL and KV_REST_TOKEN")
        return RestKeyValueStore(settings.kv_rest_url, settings.kv_rest_token)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.decoder import DocumentDecoderProtocol
    from .core.protocols.remote_provider import RemoteFileProviderProtocol
    from .core.protocols.storage import KeyValueStoreProtocol
    from .core.protocols.synthesizer import AnswerSynthesizerProtocol
    from .core.services.chunker import WindowChunker
    from .core.services.ingest_service import IngestService
    from .core.services.query_service import QueryService
    from .core.services.repositories import (
        KnowledgeBaseRepository,
        LocalDocumentRepository,
    )
    from .core.services.scorer import RetrievalScorer
    from .core.services.sync_service import SyncService
    from .infrastructure.decoders import CompositeDecoder
    from .infrastructure.drive import GoogleDriveClient, RetryPolicy, parse_drive_id
    from .infrastructure.llm.openai_synthesizer import OpenAIAnswerSynthesizer

    root_id = parse_drive_id(settings.drive_root_folder_id)

    container.register(
        KeyValueStoreProtocol,
        lambda: build_store(settings),
        singleton=True,
    )

    container.register(
        DocumentDecoderProtocol,
        CompositeDecoder,
        singleton=True,
    )

    container.register(
        RemoteFileProviderProtocol,
        lambda: GoogleDriveClient(
            access_token=settings.drive_access_token,
            base_url=settings.drive_api_url,
            page_size=settings.drive_page_size,
            timeout=settings.drive_timeout,
            retry=RetryPolicy(
                attempts=settings.drive_retry_attempts,
                backoff=settings.drive_retry_backoff,
            ),
        ),
        singleton=True,
    )

    container.register(
        AnswerSynthesizerProtocol,
        lambda: OpenAIAnswerSynthesizer(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        ),
        singleton=True,
    )

    container.register(
        WindowChunker,
        lambda: WindowChunker(
            window_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            min_length=settings.chunk_min_length,
        ),
        singleton=True,
    )

    container.register(
        KnowledgeBaseRepository,
        lambda: KnowledgeBaseRepository(container.resolve(KeyValueStoreProtocol)),
        singleton=True,
    )

    container.register(
        LocalDocumentRepository,
        lambda: LocalDocumentRepository(
            container.resolve(KeyValueStoreProtocol),
            outcome_limit=settings.outcome_log_limit,
        ),
        singleton=True,
    )

    container.register(
        SyncService,
        lambda: SyncService(
            provider=container.resolve(RemoteFileProviderProtocol),
            repository=container.resolve(KnowledgeBaseRepository),
            decoder=container.resolve(DocumentDecoderProtocol),
            chunker=container.resolve(WindowChunker),
            default_root_id=root_id,
        ),
        singleton=True,
    )

    container.register(
        IngestService,
        lambda: IngestService(
            decoder=container.resolve(DocumentDecoderProtocol),
            repository=container.resolve(LocalDocumentRepository),
            batch_size=settings.ingest_batch_size,
            supported_extensions=set(settings.supported_extensions),
        ),
        singleton=True,
    )

    container.register(
        QueryService,
        lambda: QueryService(
            knowledge_base=container.resolve(KnowledgeBaseRepository),
            local_documents=container.resolve(LocalDocumentRepository),
            scorer=RetrievalScorer(name_match_weight=settings.name_match_weight),
            chunker=container.resolve(WindowChunker),
            synthesizer=container.resolve(AnswerSynthesizerProtocol),
            root_id=root_id,
            top_k=settings.rag_top_k,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
