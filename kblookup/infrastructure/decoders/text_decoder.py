from kblookup.core.errors import DecodeFailure


class TextDecoder:

    extensions = {".txt", ".md", ".markdown"}
    mime_types = {"text/plain", "text/markdown"}

    def decode(self, data: bytes) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeFailure(f"Not valid UTF-8 text: {e.reason}") from e
