"""Diff engine - classify a new listing against the persisted index."""

import logging
from typing import Callable, Optional

from ..models.remote import DiffResult, IndexEntry, RemoteFileDescriptor

logger = logging.getLogger(__name__)


def diff(
    new_listing: list[RemoteFileDescriptor],
    old_index: list[IndexEntry],
    is_supported: Optional[Callable[[RemoteFileDescriptor], bool]] = None,
) -> DiffResult:
    """Split files into reuse / to-process / stale.

    A file is reusable iff an index entry with the same file id exists and its
    modified time equals the listing's. Entries missing from the listing, or
    no longer supported, are stale. With `is_supported`, unsupported files
    are set aside and never processed.

    Args:
        new_listing: Files from the latest crawl.
        old_index: Index from the previous sync.
        is_supported: Optional type filter.

    Returns:
        Diff result, lists in listing / index order.
    """
    old_by_id = {entry.file_id: entry for entry in old_index}
    listed_ids: set[str] = set()
    result = DiffResult()

    for file in new_listing:
        if is_supported is not None and not is_supported(file):
            result.unsupported.append(file)
            continue

        listed_ids.add(file.id)
        existing = old_by_id.get(file.id)
        if existing is not None and existing.modified_time == file.modified_time:
            result.reuse.append(existing)
        else:
            result.to_process.append(file)

    result.stale = [e for e in old_index if e.file_id not in listed_ids]

    logger.info(
        f"Diff: reuse={len(result.reuse)} to_process={len(result.to_process)} "
        f"stale={len(result.stale)} unsupported={len(result.unsupported)}"
    )
    return result
