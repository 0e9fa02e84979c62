"""
Main sync engine for Shelf Sync.

Orchestrates one sync run from the Goodreads feed into the Notion database.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from shelf_sync.api.base import APIError
from shelf_sync.api.goodreads import GoodreadsClient
from shelf_sync.api.notion import NotionClient
from shelf_sync.config import SyncConfig
from shelf_sync.sync.models import SyncRunResult
from shelf_sync.sync.reconciler import dedupe_books, reconcile
from shelf_sync.sync.writer import BatchWriter, BatchWriteError
from shelf_sync.utils.logging import SyncLogger


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SyncEngine:
    """
    Runs the sync phases in order:

    1. index the pages already in Notion
    2. fetch the books in the Goodreads feed
    3. reconcile them into creates and updates
    4. write creates, then updates, in batches

    Notion is only written to in the last phase, so a failure while
    reading either side leaves the database untouched.
    """

    def __init__(
        self,
        goodreads: GoodreadsClient,
        notion: NotionClient,
        database_id: str,
        batch_size: int = 25,
    ):
        """
        Initialize sync engine.

        Args:
            goodreads: Feed client
            notion: Notion client
            database_id: Target Notion database id
            batch_size: Concurrent writes per batch
        """
        self.goodreads = goodreads
        self.notion = notion
        self.database_id = database_id
        self.writer = BatchWriter(notion, database_id, batch_size=batch_size)

    def sync(self, run_id: Optional[str] = None) -> SyncRunResult:
        """
        Run a full sync operation.

        Args:
            run_id: Optional run ID (auto-generated if not provided)

        Returns:
            SyncRunResult with sync details

        Raises:
            APIError: If Goodreads or Notion cannot be read
            BatchWriteError: If any write failed, after all batches ran
        """
        run_id = run_id or str(uuid.uuid4())[:8]
        sync_logger = SyncLogger(run_id)

        result = SyncRunResult(run_id=run_id, started_at=_now())

        sync_logger.info("Starting sync run")

        try:
            index = self.notion.get_book_index(self.database_id)
            result.pages_indexed = len(index)

            books = dedupe_books(self.goodreads.get_books())
            result.books_fetched = len(books)
        except APIError:
            sync_logger.exception("Sync run failed while reading")
            raise

        plan = reconcile(books, index)
        result.unchanged = plan.unchanged

        sync_logger.info(
            "Reconciled books",
            fetched=len(books),
            to_create=len(plan.to_create),
            to_update=len(plan.to_update),
            unchanged=plan.unchanged
        )

        created = self.writer.create_all(plan.to_create)
        updated = self.writer.update_all(plan.to_update)

        result.created = created.succeeded
        result.updated = updated.succeeded
        result.failures = created.failures + updated.failures
        result.completed_at = _now()

        if result.failures:
            result.success = False
            result.error_message = f"{len(result.failures)} write(s) failed"
            sync_logger.error(
                "Sync run finished with failed writes",
                created=result.created,
                updated=result.updated,
                failed=len(result.failures)
            )
            raise BatchWriteError(result.failures, result=result)

        sync_logger.info(
            "Notion database is synced with Goodreads",
            created=result.created,
            updated=result.updated,
            unchanged=result.unchanged
        )

        return result

    def close(self) -> None:
        """Close all clients."""
        self.goodreads.close()
        self.notion.close()


def create_sync_engine(config: SyncConfig) -> SyncEngine:
    """
    Create a sync engine from configuration.
    """
    goodreads = GoodreadsClient(
        config.goodreads_id,
        rss_key=config.goodreads_rss_key,
        timeout=config.http_timeout_seconds,
    )
    notion = NotionClient(
        config.notion_key,
        timeout=config.http_timeout_seconds,
        pool_size=config.batch_size,
    )
    return SyncEngine(
        goodreads,
        notion,
        config.notion_database_id,
        batch_size=config.batch_size,
    )
