"""
Manifest reconciliation — finds files on disk with no manifest record (orphans,
left by an upload whose manifest write failed) and records whose file is gone.
Can be run as a cron job or scheduled task.
"""

import argparse
import asyncio
import logging
import time

from rich.console import Console
from rich.table import Table

from docpreview.config import Settings
from docpreview.models.file_record import FileRecord
from docpreview.services.manifest_store import ManifestStore
from docpreview.utils.storage import LocalStorage

logger = logging.getLogger(__name__)

console = Console()


async def find_orphan_files(store: ManifestStore, storage: LocalStorage) -> list[str]:
    """Stored names present in the upload directory but referenced by no record."""
    referenced = {r.stored_name for r in await store.load()}
    return [name for name in storage.list_names() if name not in referenced]


async def find_dangling_records(store: ManifestStore, storage: LocalStorage) -> list[FileRecord]:
    """Records whose file is no longer on disk."""
    return [r for r in await store.load() if not storage.exists(r.stored_name)]


async def prune_orphan_files(
    store: ManifestStore,
    storage: LocalStorage,
    min_age_minutes: int,
) -> list[str]:
    """Delete orphans older than ``min_age_minutes``. Returns the removed names."""
    cutoff = time.time() - (min_age_minutes * 60)
    removed = []

    for name in await find_orphan_files(store, storage):
        try:
            if storage.resolve(name).stat().st_mtime >= cutoff:
                continue
            await storage.delete(name)
            removed.append(name)
            logger.info("Removed orphan file: %s", name)
        except OSError as e:
            logger.warning("Failed to remove orphan %s: %s", name, e)

    return removed


async def reconcile(settings: Settings, prune: bool = False) -> tuple[list[str], list[FileRecord], list[str]]:
    store = ManifestStore(settings.MANIFEST_PATH)
    storage = LocalStorage(settings.UPLOAD_DIR)

    orphans = await find_orphan_files(store, storage)
    dangling = await find_dangling_records(store, storage)
    removed = []
    if prune:
        removed = await prune_orphan_files(store, storage, settings.ORPHAN_MIN_AGE_MINUTES)
    return orphans, dangling, removed


def print_report(orphans: list[str], dangling: list[FileRecord], removed: list[str]) -> None:
    table = Table(title="Upload directory reconciliation")
    table.add_column("Kind", style="bold")
    table.add_column("Name")
    table.add_column("Record id")

    for name in orphans:
        kind = "[red]orphan (removed)[/]" if name in removed else "[yellow]orphan[/]"
        table.add_row(kind, name, "")
    for record in dangling:
        table.add_row("[magenta]missing file[/]", record.stored_name, record.id)

    if orphans or dangling:
        console.print(table)
    console.print(
        f"[bold green]✓[/] {len(orphans)} orphan file(s), "
        f"{len(dangling)} record(s) without a file, {len(removed)} removed"
    )


def run_cleanup(prune: bool = False, settings: Settings | None = None):
    """Synchronous entry point for the reconciliation report."""
    settings = settings or Settings()
    logger.info("Starting reconciliation...")
    orphans, dangling, removed = asyncio.run(reconcile(settings, prune=prune))
    print_report(orphans, dangling, removed)
    return orphans, dangling, removed


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reconcile the upload directory with the manifest")
    parser.add_argument(
        "--prune", action="store_true",
        help="Delete orphan files older than ORPHAN_MIN_AGE_MINUTES",
    )
    args = parser.parse_args()

    cli_settings = Settings()
    logging.basicConfig(level=cli_settings.LOG_LEVEL)
    run_cleanup(prune=args.prune, settings=cli_settings)
