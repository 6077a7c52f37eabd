"""Remote file provider protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.remote import ListPage


@runtime_checkable
class RemoteFileProviderProtocol(Protocol):
    """Protocol for a paginated remote folder tree (Google Drive)."""

    async def list_children(
        self,
        folder_id: str,
        page_token: Optional[str] = None,
    ) -> ListPage:
        """List immediate children of a folder.

        Args:
            folder_id: Folder to list.
            page_token: Continuation token from the previous page.

        Returns:
            Page of raw items and the next page token, if any.

        Raises:
            CrawlFailure: On auth, permission or quota errors.
        """
        ...

    async def download(self, file_id: str) -> bytes:
        """Download raw file content."""
        ...

    async def export(self, file_id: str, target_mime: str) -> str:
        """Export a rich document (Docs, Sheets, Slides) as text."""
        ...
