"""
Decides which books need to be written to Notion.
"""

from typing import Dict, List, Iterable

from shelf_sync.sync.models import Book, IndexEntry, SyncPlan
from shelf_sync.utils.logging import get_logger

logger = get_logger(__name__)


def dedupe_books(books: Iterable[Book]) -> List[Book]:
    """
    Drop repeated book ids, keeping the first occurrence.

    The feed lists the most recently edited entry first.
    """
    seen = set()
    unique = []

    for book in books:
        if book.book_id in seen:
            logger.warning("Duplicate book in feed", book_id=book.book_id, title=book.title)
            continue
        seen.add(book.book_id)
        unique.append(book)

    return unique


def reconcile(books: Iterable[Book], index: Dict[int, IndexEntry]) -> SyncPlan:
    """
    Split books into pages to create and pages to update.

    A book already in the index is only updated when its shelf changed.
    Input order is kept within each list.

    Args:
        books: Books from the feed
        index: Existing pages keyed by book id

    Returns:
        SyncPlan
    """
    plan = SyncPlan()

    for book in books:
        entry = index.get(book.book_id)

        if entry is None:
            plan.to_create.append(book)
        elif entry.shelf != book.shelf:
            plan.to_update.append((entry.page_id, book))
        else:
            plan.unchanged += 1

    return plan
