"""Protocol interfaces for dependency injection."""
from .decoder import (
    DecodeErr,
    DecodeOk,
    DecodeResult,
    DecoderProtocol,
    DocumentDecoderProtocol,
)
from .remote_provider import RemoteFileProviderProtocol
from .storage import KeyValueStoreProtocol
from .synthesizer import AnswerSynthesizerProtocol

__all__ = [
    "DecodeErr",
    "DecodeOk",
    "DecodeResult",
    "DecoderProtocol",
    "DocumentDecoderProtocol",
    "RemoteFileProviderProtocol",
    "KeyValueStoreProtocol",
    "AnswerSynthesizerProtocol",
]
