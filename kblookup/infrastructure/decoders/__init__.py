"""Format decoder implementations."""
from .composite_decoder import CompositeDecoder
from .csv_decoder import CSVDecoder
from .docx_decoder import DocxDecoder
from .pdf_decoder import PDFDecoder
from .text_decoder import TextDecoder
from .xlsx_decoder import XlsxDecoder

__all__ = [
    "PDFDecoder",
    "DocxDecoder",
    "XlsxDecoder",
    "CSVDecoder",
    "TextDecoder",
    "CompositeDecoder",
]
