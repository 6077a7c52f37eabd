from urllib.parse import urlparse


def parse_drive_id(value: str) -> str:
    """Extract a Drive folder/file id from a share URL or return the bare id.

    Handles `.../folders/<id>`, `.../d/<id>/...` and `?id=<id>` links.
    """
    value = (value or "").strip()
    if not value:
        return ""

    parsed = urlparse(value)
    if parsed.scheme and parsed.netloc:
        parts = [p for p in parsed.path.split("/") if p]
        for marker in ("folders", "d"):
            if marker in parts:
                idx = parts.index(marker)
                if idx + 1 < len(parts):
                    return parts[idx + 1]
        for param in parsed.query.split("&"):
            if param.startswith("id="):
                return param[3:]

    return value.split("?")[0].rstrip("/").split("/")[-1].strip()
