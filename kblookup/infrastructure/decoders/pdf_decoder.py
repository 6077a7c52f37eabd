import io

from pypdf import PdfReader


class PDFDecoder:

    extensions = {".pdf"}
    mime_types = {"application/pdf"}

    def decode(self, data: bytes) -> str:
        reader = PdfReader(io.BytesIO(data))
        text_parts = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                text_parts.append(text.strip())
        return "\n".join(text_parts)
