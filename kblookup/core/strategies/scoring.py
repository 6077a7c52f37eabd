import re
from abc import ABC, abstractmethod

from ..models.document import Chunk

# Whitespace plus common ASCII and CJK punctuation.
_TERM_SEPARATORS = re.compile(r"[\s,.;:!?()\[\]{}\"'，、。；：！？（）「」『』《》【】]+")

CONTENT_MATCH_WEIGHT = 10


def tokenize_query(query: str) -> list[str]:
    """Split query into lowercase terms, dropping empty tokens."""
    return [t for t in _TERM_SEPARATORS.split(query.lower()) if t]


class TermMatchStrategy(ABC):
    """Base class for per-term lexical scoring strategies."""

    @abstractmethod
    def score(self, terms: list[str], chunk: Chunk) -> int:
        """Score contribution of the query terms for one chunk."""
        ...


class ContentMatchStrategy(TermMatchStrategy):
    """Award weight for every term found in the chunk text."""

    def __init__(self, weight: int = CONTENT_MATCH_WEIGHT):
        self._weight = weight

    def score(self, terms: list[str], chunk: Chunk) -> int:
        content = chunk.text.lower()
        return sum(self._weight for term in terms if term in content)


class FileNameMatchStrategy(TermMatchStrategy):
    """Award weight for every term found in the source file name."""

    def __init__(self, weight: int = 20):
        """Initialize strategy.

        Args:
            weight: Points per matching term. Content matches are worth 10.
        """
        self._weight = weight

    def score(self, terms: list[str], chunk: Chunk) -> int:
        name = chunk.file_name.lower()
        return sum(self._weight for term in terms if term in name)
