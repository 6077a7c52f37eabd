"""Remote tree crawler - breadth-first folder walk."""

import logging
from collections import deque
from typing import Callable, Optional

from ..errors import CrawlFailure
from ..models.remote import (
    FOLDER_MIME_TYPE,
    CrawlDiagnostics,
    CrawlResult,
    RemoteFileDescriptor,
)
from ..protocols.remote_provider import RemoteFileProviderProtocol

logger = logging.getLogger(__name__)


class TreeCrawler:
    """Walk a remote folder graph and collect its leaf files.

    Folders are visited in strict BFS order. A visited set guards against
    cycles and folders linked from several parents.
    """

    def __init__(self, provider: RemoteFileProviderProtocol):
        self._provider = provider

    async def crawl(
        self,
        root_id: str,
        on_progress: Optional[Callable[[str], None]] = None,
        root_name: str = "Root",
    ) -> CrawlResult:
        """Crawl the tree under `root_id`.

        Args:
            root_id: Root folder id.
            on_progress: Called with each folder name as it is scanned.
            root_name: Display name for the root folder.

        Returns:
            All leaf files with materialized paths, plus diagnostics.

        Raises:
            CrawlFailure: If any listing call fails. Nothing partial is returned.
        """
        diagnostics = CrawlDiagnostics(root_id=root_id)
        files: list[RemoteFileDescriptor] = []
        # (folder_id, folder_name, path relative to root)
        queue: deque[tuple[str, str, str]] = deque([(root_id, root_name, "")])
        visited: set[str] = set()
        seen_files: set[str] = set()

        while queue:
            folder_id, folder_name, folder_path = queue.popleft()
            if folder_id in visited:
                continue
            visited.add(folder_id)
            diagnostics.folders_scanned += 1

            if on_progress:
                on_progress(folder_name)
            logger.debug(f"Scanning folder: {folder_path or folder_name}")

            page_token: Optional[str] = None
            while True:
                try:
                    page = await self._provider.list_children(folder_id, page_token)
                except CrawlFailure as e:
                    diagnostics.last_status = e.status
                    diagnostics.error_message = e.message
                    logger.error(
                        f"Crawl aborted at folder {folder_id} "
                        f"[{e.status}]: {e.message}"
                    )
                    raise
                diagnostics.pages_fetched += 1

                for item in page.items:
                    if item.get("mimeType") == FOLDER_MIME_TYPE:
                        name = item.get("name", "")
                        child_path = f"{folder_path}/{name}" if folder_path else name
                        queue.append((item["id"], name, child_path))
                    elif item["id"] not in seen_files:
                        seen_files.add(item["id"])
                        files.append(RemoteFileDescriptor.from_api(item, folder_path))

                page_token = page.next_page_token
                if not page_token:
                    break

        logger.info(
            f"Crawl complete: {len(files)} files in "
            f"{diagnostics.folders_scanned} folders ({diagnostics.pages_fetched} pages)"
        )
        return CrawlResult(files=files, diagnostics=diagnostics)
