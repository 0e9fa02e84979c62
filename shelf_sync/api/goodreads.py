"""
Goodreads RSS client for Shelf Sync.

Goodreads has no public API anymore; the per-user review list RSS feed is
the only machine readable source. It only carries the last 100 edits, so
libraries larger than that need a manual import for the initial setup.

Feed schema used here (all children of <item>, all optional):
    book_id, isbn, title, author_name, user_date_created, user_read_at,
    user_shelves, book_large_image_url
"""

import re
from datetime import date, timezone
from typing import Optional, List, Dict, Any

from bs4 import BeautifulSoup
from bs4.element import Tag
from dateutil import parser as date_parser

from shelf_sync.api.base import BaseClient, APIError
from shelf_sync.sync.models import Book
from shelf_sync.utils.logging import get_logger

logger = get_logger(__name__)

GOODREADS_BASE_URL = "https://www.goodreads.com"
ALL_SHELVES = "#ALL#"

CDATA_RE = re.compile(r"^\s*(?:<!)?\[CDATA\[(.*)\]\]>?\s*$", re.DOTALL)


class FeedError(APIError):
    """Raised when the feed body is not an RSS document."""


def strip_cdata(text: Optional[str]) -> Optional[str]:
    """
    Unwrap a CDATA block left as literal text.

    "[CDATA[Some Title]]" and "<![CDATA[Some Title]]>" both give
    "Some Title"; anything else is returned unchanged.
    """
    if text is None:
        return None
    match = CDATA_RE.match(text)
    return match.group(1) if match else text


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse an integer field, None when missing or invalid."""
    if not text:
        return None
    try:
        return int(strip_cdata(text).strip())
    except ValueError:
        return None


def parse_date(text: Optional[str]) -> Optional[date]:
    """
    Best-effort parse of a feed date into a calendar date.

    Timezone-aware values are converted to UTC first. Returns None for
    empty or unparsable input.
    """
    text = (strip_cdata(text) or "").strip()
    if not text:
        return None
    try:
        parsed = date_parser.parse(text)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()
    except (ValueError, OverflowError):
        logger.debug("Unparsable feed date", value=text)
        return None


def first_shelf(text: Optional[str]) -> str:
    """First label of a comma separated shelf list."""
    text = (strip_cdata(text) or "").strip()
    return text.split(",")[0].strip()


def _field(item: Tag, name: str) -> Optional[str]:
    """Text of a direct child element, None when absent."""
    element = item.find(name, recursive=False)
    if element is None:
        return None
    return element.get_text()


def parse_item(item: Tag) -> Optional[Book]:
    """
    Parse a feed <item> into a Book.

    Returns:
        Book, or None when the item has no usable book id
    """
    book_id = parse_int(_field(item, "book_id"))
    if book_id is None:
        return None

    cover_url = (strip_cdata(_field(item, "book_large_image_url")) or "").strip()

    return Book(
        book_id=book_id,
        isbn=parse_int(_field(item, "isbn")),
        title=(strip_cdata(_field(item, "title")) or "").strip(),
        author_name=(strip_cdata(_field(item, "author_name")) or "").strip(),
        date_added=parse_date(_field(item, "user_date_created")),
        date_read=parse_date(_field(item, "user_read_at")),
        shelf=first_shelf(_field(item, "user_shelves")),
        cover_url=cover_url or None,
    )


def parse_feed(xml: str) -> List[Book]:
    """
    Parse a Goodreads review list RSS document.

    Raises:
        FeedError: If the document has no RSS channel
    """
    soup = BeautifulSoup(xml, "xml")
    channel = soup.find("channel")
    if channel is None:
        raise FeedError("Goodreads feed is not an RSS document")

    channel_title = channel.find("title", recursive=False)
    if channel_title is not None:
        logger.info("Reading Goodreads feed", feed=channel_title.get_text().strip())

    books = []
    for item in channel.find_all("item", recursive=False):
        book = parse_item(item)
        if book is None:
            logger.warning(
                "Skipping feed item without book id",
                title=(strip_cdata(_field(item, "title")) or "").strip()
            )
            continue
        books.append(book)

    return books


class GoodreadsClient(BaseClient):
    """
    Client for a Goodreads user's review list feed.
    """

    def __init__(
        self,
        user_id: str,
        rss_key: Optional[str] = None,
        timeout: int = 30,
    ):
        """
        Initialize Goodreads client.

        Args:
            user_id: Goodreads user id
            rss_key: Key required by private profiles
            timeout: Request timeout in seconds
        """
        super().__init__(GOODREADS_BASE_URL, timeout=timeout, pool_size=1)
        self.user_id = user_id
        self.rss_key = rss_key

    def feed_params(self) -> Dict[str, Any]:
        params = {"shelf": ALL_SHELVES}
        if self.rss_key:
            params["key"] = self.rss_key
        return params

    def fetch_feed(self) -> str:
        """
        Download the raw RSS document.

        Raises:
            APIError: If Goodreads is unreachable or answers with an error
        """
        return self.get_text(
            f"/review/list_rss/{self.user_id}",
            params=self.feed_params(),
        )

    def get_books(self) -> List[Book]:
        """
        Get every book in the feed, in feed order.

        Raises:
            APIError: If the feed cannot be fetched
            FeedError: If the feed cannot be parsed
        """
        books = parse_feed(self.fetch_feed())

        logger.info("Retrieved books from Goodreads", count=len(books))

        return books
