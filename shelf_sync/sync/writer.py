"""
Batched writes to the Notion database.

Writes inside a batch run concurrently; the next batch starts once every
call of the current one has finished. Failed calls are collected and the
remaining batches still run.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from shelf_sync.api.base import APIError
from shelf_sync.api.notion import NotionClient
from shelf_sync.sync.models import BatchReport, Book, WriteFailure
from shelf_sync.sync.properties import cover_for, to_properties
from shelf_sync.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 25

T = TypeVar("T")


class BatchWriteError(Exception):
    """Raised after a run in which some writes failed."""

    def __init__(self, failures: List[WriteFailure], result=None):
        self.failures = failures
        self.result = result
        super().__init__(f"{len(failures)} Notion write(s) failed")


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split items into consecutive groups of at most size."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class BatchWriter:
    """
    Creates and updates Notion pages in bounded concurrent batches.
    """

    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.client = client
        self.database_id = database_id
        self.batch_size = batch_size

    def _create(self, book: Book) -> str:
        return self.client.create_page(
            self.database_id,
            to_properties(book),
            cover=cover_for(book.cover_url),
        )

    def _update(self, update: Tuple[str, Book]) -> None:
        page_id, book = update
        self.client.update_page(
            page_id,
            to_properties(book),
            cover=cover_for(book.cover_url),
        )

    def _run(
        self,
        items: Sequence[T],
        write: Callable[[T], object],
        describe: Callable[[T], Tuple[Book, Optional[str]]],
        action: str,
    ) -> BatchReport:
        report = BatchReport()

        for batch in chunk(items, self.batch_size):
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = [executor.submit(write, item) for item in batch]

                for item, future in zip(batch, futures):
                    try:
                        future.result()
                    except Exception as e:
                        book, page_id = describe(item)
                        error = str(e) if isinstance(e, APIError) else f"{type(e).__name__}: {e}"
                        logger.error(
                            f"Failed to {action} page",
                            book_id=book.book_id,
                            title=book.title,
                            page_id=page_id,
                            error=error
                        )
                        report.failures.append(WriteFailure(book=book, error=error, page_id=page_id))
                    else:
                        report.succeeded += 1

            report.batches += 1
            logger.info(f"Completed {action} batch", size=len(batch), batch=report.batches)

        return report

    def create_all(self, books: Sequence[Book]) -> BatchReport:
        """Create a page for every book."""
        return self._run(books, self._create, lambda book: (book, None), "create")

    def update_all(self, updates: Sequence[Tuple[str, Book]]) -> BatchReport:
        """Update every (page id, book) pair."""
        return self._run(updates, self._update, lambda update: (update[1], update[0]), "update")
