"""Query service - retrieval and answer synthesis."""

import logging
from typing import Optional

from ..models.answer import QueryAnswer
from ..models.document import (
    Chunk,
    DocSource,
    LocalDocument,
    Passage,
    RetrievalResponse,
    SearchScope,
)
from ..protocols.synthesizer import AnswerSynthesizerProtocol
from .chunker import SNIPPET_LENGTH, WindowChunker
from .repositories import KnowledgeBaseRepository, LocalDocumentRepository
from .scorer import RetrievalScorer

logger = logging.getLogger(__name__)


class QueryService:
    """Gather chunks for a scope, score them and hand the best to the LLM.

    Remote chunks come pre-computed from the last sync. Local documents are
    chunked on the fly for every query; one shorter than the window minimum
    becomes a single chunk.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBaseRepository,
        local_documents: LocalDocumentRepository,
        scorer: RetrievalScorer,
        chunker: WindowChunker,
        synthesizer: Optional[AnswerSynthesizerProtocol] = None,
        root_id: str = "",
        top_k: int = 6,
    ):
        self._knowledge_base = knowledge_base
        self._local_documents = local_documents
        self._scorer = scorer
        self._chunker = chunker
        self._synthesizer = synthesizer
        self._root_id = root_id
        self._top_k = top_k

    def _gather(self, scope: SearchScope) -> list[Chunk]:
        chunks: list[Chunk] = []
        if scope.includes(DocSource.REMOTE) and self._root_id:
            chunks.extend(self._knowledge_base.load_chunks(self._root_id))
        if scope.includes(DocSource.LOCAL):
            for doc in self._local_documents.load():
                chunks.extend(self._local_chunks(doc))
        return chunks

    def _local_chunks(self, doc: LocalDocument) -> list[Chunk]:
        path = doc.relative_path or ""
        chunks = self._chunker.chunk(
            doc.content, doc.id, doc.name, path, source=DocSource.LOCAL
        )
        content = doc.content.strip()
        if chunks or not content:
            return chunks
        # Below the window minimum: the whole document is one chunk
        return [
            Chunk(
                chunk_id=f"{doc.id}_0",
                file_id=doc.id,
                file_name=doc.name,
                path=path,
                text=content,
                snippet=content[:SNIPPET_LENGTH],
                source=DocSource.LOCAL,
            )
        ]

    def retrieve(
        self,
        query: str,
        scope: SearchScope = SearchScope.BOTH,
        top_k: Optional[int] = None,
    ) -> RetrievalResponse:
        """Select the most relevant chunks for a query.

        Raises:
            EmptyScope: If the scope has no chunks.
            NoRelevantData: If nothing in scope matches.
        """
        top_k = top_k or self._top_k
        chunks = self._gather(scope)
        scored = self._scorer.score(chunks, query, top_k, scope=scope)

        passages = [
            Passage(source_label=c.source.value, file_name=c.file_name, text=c.text)
            for c in scored
        ]
        return RetrievalResponse(query=query, scope=scope, chunks=scored, passages=passages)

    async def answer(
        self,
        query: str,
        scope: SearchScope = SearchScope.BOTH,
        top_k: Optional[int] = None,
    ) -> QueryAnswer:
        """Retrieve and synthesize a structured answer."""
        if self._synthesizer is None:
            raise RuntimeError("No answer synthesizer configured")

        response = self.retrieve(query, scope, top_k)
        logger.info(
            f"Synthesizing answer for '{query[:50]}' from {len(response.passages)} passages"
        )
        answer = await self._synthesizer.synthesize(query, response.passages)
        return QueryAnswer(
            answer=answer,
            retrieved_chunks=len(response.chunks),
            model=self._synthesizer.model_name,
        )
