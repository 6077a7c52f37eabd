import csv
import io

from kblookup.core.errors import DecodeFailure


class CSVDecoder:
    """Normalize CSV rows to comma-joined lines."""

    extensions = {".csv"}
    mime_types = {"text/csv"}

    def decode(self, data: bytes) -> str:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeFailure(f"Not valid UTF-8 CSV: {e.reason}") from e

        rows = csv.reader(io.StringIO(text))
        return "\n".join(",".join(cell.strip() for cell in row) for row in rows if row)
