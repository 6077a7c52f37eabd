import logging
from typing import Optional

from kblookup.core.protocols.decoder import (
    DecodeErr,
    DecodeOk,
    DecodeResult,
    DecoderProtocol,
)

from .csv_decoder import CSVDecoder
from .docx_decoder import DocxDecoder
from .pdf_decoder import PDFDecoder
from .text_decoder import TextDecoder
from .xlsx_decoder import XlsxDecoder

logger = logging.getLogger(__name__)


def _extension(name: str) -> str:
    return "." + name.rsplit(".", 1)[-1].lower() if "." in name else ""


class CompositeDecoder:

    def __init__(self, decoders: Optional[list[DecoderProtocol]] = None):
        self._decoders = decoders or [
            PDFDecoder(),
            DocxDecoder(),
            XlsxDecoder(),
            CSVDecoder(),
            TextDecoder(),
        ]

    @property
    def extensions(self) -> set[str]:
        return set().union(*(d.extensions for d in self._decoders))

    def _find(self, name: str, mime_type: Optional[str]) -> Optional[DecoderProtocol]:
        ext = _extension(name)
        for decoder in self._decoders:
            if ext in decoder.extensions:
                return decoder
        for decoder in self._decoders:
            if mime_type and mime_type in decoder.mime_types:
                return decoder
        return None

    def supports(self, name: str, mime_type: Optional[str] = None) -> bool:
        return self._find(name, mime_type) is not None

    def decode(
        self, name: str, data: bytes, mime_type: Optional[str] = None
    ) -> DecodeResult:
        decoder = self._find(name, mime_type)
        if decoder is None:
            return DecodeErr(reason=f"No decoder for {name} ({mime_type})")
        try:
            return DecodeOk(text=decoder.decode(data))
        except Exception as e:
            logger.error(f"Failed to decode {name}: {e}")
            return DecodeErr(reason=str(e) or type(e).__name__)
