"""Retrieval scorer - lexical top-K selection."""

import logging

from ..errors import EmptyScope, NoRelevantData
from ..models.document import Chunk, ScoredChunk, SearchScope
from ..strategies.scoring import (
    ContentMatchStrategy,
    FileNameMatchStrategy,
    TermMatchStrategy,
    tokenize_query,
)

logger = logging.getLogger(__name__)


class RetrievalScorer:
    """Score chunks by substring term hits in text and file name."""

    def __init__(
        self,
        name_match_weight: int = 20,
        strategies: list[TermMatchStrategy] | None = None,
    ):
        """Initialize scorer.

        Args:
            name_match_weight: Points per query term found in the file name.
            strategies: Custom scoring strategies, replacing the defaults.
        """
        self._strategies = strategies or [
            ContentMatchStrategy(),
            FileNameMatchStrategy(name_match_weight),
        ]

    def score(
        self,
        chunks: list[Chunk],
        query: str,
        top_k: int,
        scope: SearchScope = SearchScope.BOTH,
    ) -> list[ScoredChunk]:
        """Return the top-K chunks with a positive score.

        Args:
            chunks: Candidate chunks.
            query: Natural-language query.
            top_k: Maximum number of results.
            scope: Restrict candidates to remote, local or both.

        Returns:
            Scored chunks, descending by score; ties keep input order.

        Raises:
            EmptyScope: If no chunk belongs to the selected scope.
            NoRelevantData: If no chunk in scope scores above zero.
        """
        candidates = [c for c in chunks if scope.includes(c.source)]
        if not candidates:
            raise EmptyScope(scope.value)

        terms = tokenize_query(query)
        scored = []
        for chunk in candidates:
            total = sum(s.score(terms, chunk) for s in self._strategies)
            if total > 0:
                scored.append(ScoredChunk(chunk=chunk, score=total))

        if not scored:
            logger.info(
                f"No relevant chunks for '{query[:50]}' among {len(candidates)} "
                f"in scope '{scope.value}'"
            )
            raise NoRelevantData(query, scope.value)

        # sorted() is stable, so equal scores keep input order
        scored = sorted(scored, key=lambda s: s.score, reverse=True)[: max(top_k, 1)]

        logger.info(
            f"Scored {len(candidates)} chunks, returning {len(scored)} "
            f"(top={scored[0].score}) for '{query[:50]}'"
        )
        return scored
