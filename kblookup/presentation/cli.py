import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from kblookup.config.settings import settings
from kblookup.container import configure_container, container
from kblookup.core.errors import (
    CrawlFailure,
    EmptyScope,
    KBLookupError,
    NoRelevantData,
)
from kblookup.core.models.document import LocalFile, SearchScope
from kblookup.core.protocols.remote_provider import RemoteFileProviderProtocol
from kblookup.core.services.ingest_service import IngestService
from kblookup.core.services.query_service import QueryService
from kblookup.core.services.sync_service import SyncService
from kblookup.infrastructure.drive import parse_drive_id

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def collect_files(paths: list[str]) -> list[LocalFile]:
    """Read files and walk directories, skipping hidden entries."""
    items: list[LocalFile] = []
    for raw in paths:
        root = Path(raw)
        if root.is_dir():
            for path in sorted(root.rglob("*")):
                rel = path.relative_to(root)
                if not path.is_file() or any(p.startswith(".") for p in rel.parts):
                    continue
                items.append(
                    LocalFile(
                        relative_path=str(Path(root.name) / rel),
                        data=path.read_bytes(),
                        modified_time=path.stat().st_mtime,
                    )
                )
        elif root.is_file():
            items.append(
                LocalFile(
                    relative_path=root.name,
                    data=root.read_bytes(),
                    modified_time=root.stat().st_mtime,
                )
            )
        else:
            logger.warning(f"Not found: {raw}")
    return items


async def cmd_sync(args: argparse.Namespace) -> None:
    """Sync command - crawl and index the remote folder."""
    sync_service = container.resolve(SyncService)
    root_id = parse_drive_id(args.folder) if args.folder else None

    try:
        report = await sync_service.run(
            root_id, on_progress=lambda name: logger.info(f"Scanning: {name}")
        )
    finally:
        await container.resolve(RemoteFileProviderProtocol).aclose()

    logger.info(
        f"Scanned {report.scanned} files: {report.processed} updated, "
        f"{report.reused} unchanged, {report.failed} failed, "
        f"{report.skipped} skipped, {report.stale} removed; {report.chunks} chunks"
    )
    for skipped in report.skipped_list:
        logger.info(f"  skipped {skipped.name}: {skipped.reason}")


async def cmd_ingest(args: argparse.Namespace) -> None:
    """Ingest command - add local files to the sandbox."""
    ingest_service = container.resolve(IngestService)
    items = collect_files(args.paths)
    if not items:
        logger.info("No files to ingest")
        return

    result = await ingest_service.ingest_files(items)
    for outcome in result.outcomes:
        detail = outcome.reason or f"{outcome.content_length} chars"
        logger.info(f"[{outcome.status.value}] {outcome.name} ({detail})")
    if result.persistence_warning:
        logger.warning(f"Warning: {result.persistence_warning.message}")


async def cmd_query(args: argparse.Namespace) -> None:
    """Query command - retrieve chunks and optionally synthesize an answer."""
    query_service = container.resolve(QueryService)
    scope = SearchScope(args.mode)

    if args.no_llm:
        response = query_service.retrieve(args.text, scope, args.top_k)
        for i, c in enumerate(response.chunks, 1):
            logger.info(f"[{i}] score={c.score} {c.source.value}:{c.file_name}")
            logger.info(f"    {c.chunk.snippet}")
        return

    result = await query_service.answer(args.text, scope, args.top_k)
    answer = result.answer
    logger.info(f"{answer.food_item} ({answer.category})")
    logger.info(answer.summary)
    for finding in answer.findings:
        note = f" - {finding.note}" if finding.note else ""
        logger.info(f"  {finding.item}: {finding.limit}{note}")
    for source in answer.sources:
        logger.info(f"  source: {source.title}")
    logger.info(f"({result.retrieved_chunks} chunks, model {result.model})")


async def cmd_docs(args: argparse.Namespace) -> None:
    """Docs command - list local documents."""
    docs = container.resolve(IngestService).list_documents()
    for doc in docs:
        uploaded = datetime.fromtimestamp(doc.upload_date).isoformat(timespec="seconds")
        logger.info(f"{doc.id}  {doc.name}  {len(doc.content)} chars  {uploaded}")
    logger.info(f"{len(docs)} local documents")


async def cmd_outcomes(args: argparse.Namespace) -> None:
    """Outcomes command - show the recent ingestion log."""
    for outcome in container.resolve(IngestService).recent_outcomes():
        logger.info(f"[{outcome.status.value}] {outcome.name} {outcome.reason or ''}")


async def cmd_delete(args: argparse.Namespace) -> None:
    if not container.resolve(IngestService).delete(args.doc_id):
        raise KBLookupError(f"No local document {args.doc_id}")
    logger.info(f"Deleted {args.doc_id}")


async def cmd_clear(args: argparse.Namespace) -> None:
    container.resolve(IngestService).clear()
    logger.info("Local sandbox cleared")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kblookup", description="Regulation lookup CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("sync", help="Sync the remote folder")
    p.add_argument("--folder", help="Folder id or share URL")
    p.set_defaults(func=cmd_sync)

    p = sub.add_parser("ingest", help="Ingest local files or directories")
    p.add_argument("paths", nargs="+")
    p.set_defaults(func=cmd_ingest)

    p = sub.add_parser("query", help="Ask a question")
    p.add_argument("text")
    p.add_argument("--mode", choices=[s.value for s in SearchScope], default="remote")
    p.add_argument("--top-k", type=int, default=None)
    p.add_argument("--no-llm", action="store_true", help="Only show retrieved chunks")
    p.set_defaults(func=cmd_query)

    sub.add_parser("docs", help="List local documents").set_defaults(func=cmd_docs)
    sub.add_parser("outcomes", help="Show ingestion log").set_defaults(func=cmd_outcomes)

    p = sub.add_parser("delete", help="Delete one local document")
    p.add_argument("doc_id")
    p.set_defaults(func=cmd_delete)

    sub.add_parser("clear", help="Clear local documents").set_defaults(func=cmd_clear)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_container(settings)

    try:
        asyncio.run(args.func(args))
    except CrawlFailure as e:
        logger.error(f"Sync failed [{e.status}]: {e.message}")
        sys.exit(1)
    except EmptyScope as e:
        logger.error(f"Nothing to search in scope '{e.scope}': {e}")
        sys.exit(1)
    except NoRelevantData as e:
        logger.error(f"Searched scope '{e.scope}': nothing matched '{e.query}'")
        sys.exit(1)
    except KBLookupError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
