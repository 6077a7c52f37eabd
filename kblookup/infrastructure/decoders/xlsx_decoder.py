import io

from openpyxl import load_workbook


class XlsxDecoder:
    """Render every worksheet as a `[Sheet: name]` header plus CSV-like rows."""

    extensions = {".xlsx"}
    mime_types = {"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"}

    def decode(self, data: bytes) -> str:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            parts = []
            for ws in wb.worksheets:
                rows = []
                for row in ws.iter_rows(values_only=True):
                    cells = ["" if cell is None else str(cell).strip() for cell in row]
                    if any(cells):
                        rows.append(",".join(cells))
                parts.append(f"[Sheet: {ws.title}]\n" + "\n".join(rows))
            return "\n".join(parts)
        finally:
            wb.close()
