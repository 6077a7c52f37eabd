"""Format decoder protocol and tagged decode results."""
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class DecodeOk:
    text: str


@dataclass(frozen=True)
class DecodeErr:
    reason: str


DecodeResult = Union[DecodeOk, DecodeErr]


@runtime_checkable
class DecoderProtocol(Protocol):
    """Protocol for a single file-format decoder."""

    extensions: set[str]
    mime_types: set[str]

    def decode(self, data: bytes) -> str:
        """Decode raw bytes to plain text.

        Raises:
            DecodeFailure: Or any other exception on malformed input.
        """
        ...


@runtime_checkable
class DocumentDecoderProtocol(Protocol):
    """Protocol for dispatching bytes to the right format decoder."""

    def supports(self, name: str, mime_type: Optional[str] = None) -> bool:
        """Check whether a decoder exists for the file's extension or MIME type."""
        ...

    def decode(
        self, name: str, data: bytes, mime_type: Optional[str] = None
    ) -> DecodeResult:
        """Decode bytes, isolating decoder failures.

        Returns:
            DecodeOk with the text, or DecodeErr with the failure reason.
        """
        ...
