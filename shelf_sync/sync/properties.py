"""
Mapping from Book to the Notion database schema.

Database columns:
    Name (title), Book ID (number), Book ISBN (number), Author (rich text),
    Shelf (multi-select), Date (date range), URL (url)
"""

from typing import Optional, Dict, Any

from shelf_sync.sync.models import Book, DEFAULT_SHELF

BOOK_URL_BASE = "https://www.goodreads.com/book/show/"


def book_url(book_id: int) -> str:
    return f"{BOOK_URL_BASE}{book_id}"


def _text(content: str) -> list:
    return [{"type": "text", "text": {"content": content or ""}}]


def date_range(book: Book) -> Optional[Dict[str, Optional[str]]]:
    """
    Reading period from date added to date read.

    The end never precedes the start: a read date before the added date
    is replaced by the added date. Without an added date the read date
    becomes the start.
    """
    start, end = book.date_added, book.date_read

    if start is None:
        start, end = end, None
    if start is None:
        return None
    if end is not None and end < start:
        end = start

    return {
        "start": start.isoformat(),
        "end": end.isoformat() if end else None,
    }


def to_properties(book: Book) -> Dict[str, Any]:
    """Build the Notion property set for a book."""
    return {
        "Name": {"title": _text(book.title)},
        "Book ID": {"number": book.book_id},
        "Book ISBN": {"number": book.isbn},
        "Author": {"rich_text": _text(book.author_name)},
        "Shelf": {"multi_select": [{"name": book.shelf or DEFAULT_SHELF}]},
        "Date": {"date": date_range(book)},
        "URL": {"url": book_url(book.book_id)},
    }


def cover_for(url: Optional[str]) -> Optional[Dict[str, Any]]:
    """External file object for a cover image, None without a url."""
    if not url:
        return None
    return {"type": "external", "external": {"url": url}}
