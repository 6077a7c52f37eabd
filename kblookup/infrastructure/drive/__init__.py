"""Google Drive remote file provider."""
from .client import GoogleDriveClient
from .ids import parse_drive_id
from .retry import RetryPolicy

__all__ = ["GoogleDriveClient", "RetryPolicy", "parse_drive_id"]
