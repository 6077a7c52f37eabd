"""Answer synthesizer protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.answer import RegulationAnswer
from ..models.document import Passage


@runtime_checkable
class AnswerSynthesizerProtocol(Protocol):
    """Protocol for the LLM that turns retrieved passages into an answer."""

    model_name: str

    async def synthesize(self, query: str, passages: list[Passage]) -> RegulationAnswer:
        """Produce a structured answer grounded in the passages.

        Args:
            query: User's question.
            passages: Retrieved passages with source labels.

        Returns:
            Structured answer record.
        """
        ...
