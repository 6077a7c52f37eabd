import io

from docx import Document


class DocxDecoder:

    extensions = {".docx"}
    mime_types = {
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    }

    def decode(self, data: bytes) -> str:
        doc = Document(io.BytesIO(data))
        paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
        return "\n\n".join(paragraphs)
