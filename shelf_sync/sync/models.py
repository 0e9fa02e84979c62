"""
Data models for sync operations.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple
from datetime import date, datetime

DEFAULT_SHELF = "read"


@dataclass
class Book:
    """A book entry from the Goodreads feed."""
    book_id: int
    title: str
    author_name: str
    isbn: Optional[int] = None
    date_added: Optional[date] = None
    date_read: Optional[date] = None
    shelf: str = DEFAULT_SHELF
    cover_url: Optional[str] = None

    def __post_init__(self):
        # Goodreads reports the default shelf as an empty value
        if not self.shelf:
            self.shelf = DEFAULT_SHELF


@dataclass
class IndexEntry:
    """A page already present in the Notion database."""
    page_id: str
    book_id: int
    shelf: Optional[str] = None


@dataclass
class SyncPlan:
    """Books split by the write they need."""
    to_create: List[Book] = field(default_factory=list)
    to_update: List[Tuple[str, Book]] = field(default_factory=list)
    unchanged: int = 0


@dataclass
class WriteFailure:
    """A create or update call that did not go through."""
    book: Book
    error: str
    page_id: Optional[str] = None


@dataclass
class BatchReport:
    """Outcome of writing one list of books."""
    succeeded: int = 0
    batches: int = 0
    failures: List[WriteFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class SyncRunResult:
    """Result of a complete sync run."""
    run_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None

    # Counts
    books_fetched: int = 0
    pages_indexed: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0

    # Status
    success: bool = True
    error_message: Optional[str] = None

    failures: List[WriteFailure] = field(default_factory=list)
