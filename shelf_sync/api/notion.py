"""
Notion API client for Shelf Sync.

Documentation: https://developers.notion.com/reference
"""

from typing import Optional, List, Dict, Any

from shelf_sync.api.base import BaseClient
from shelf_sync.sync.models import IndexEntry
from shelf_sync.utils.logging import get_logger

logger = get_logger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

BOOK_ID_PROPERTY = "Book ID"
SHELF_PROPERTY = "Shelf"

# Largest page size the query endpoint accepts
QUERY_PAGE_SIZE = 100


def parse_index_entry(page: Dict[str, Any]) -> Optional[IndexEntry]:
    """
    Parse a database page into an IndexEntry.

    Returns:
        IndexEntry, or None when the page has no Book ID
    """
    properties = page.get("properties") or {}

    book_id = (properties.get(BOOK_ID_PROPERTY) or {}).get("number")
    if book_id is None:
        return None

    options = (properties.get(SHELF_PROPERTY) or {}).get("multi_select") or []
    shelf = options[0].get("name") if options else None

    return IndexEntry(page_id=page["id"], book_id=int(book_id), shelf=shelf)


def build_index(pages: List[Dict[str, Any]]) -> Dict[int, IndexEntry]:
    """
    Index pages by Book ID.

    When two pages share a Book ID the later one in query order wins.
    """
    index: Dict[int, IndexEntry] = {}

    for page in pages:
        entry = parse_index_entry(page)
        if entry is None:
            logger.debug("Skipping page without Book ID", page_id=page.get("id"))
            continue

        shadowed = index.get(entry.book_id)
        if shadowed is not None:
            logger.warning(
                "Duplicate Book ID in Notion database",
                book_id=entry.book_id,
                kept=entry.page_id,
                shadowed=shadowed.page_id
            )
        index[entry.book_id] = entry

    return index


class NotionClient(BaseClient):
    """
    Client for the Notion REST API.

    Covers what the sync needs: querying a database and creating or
    updating its pages.
    """

    def __init__(self, token: str, timeout: int = 30, pool_size: int = 25):
        """
        Initialize Notion client.

        Args:
            token: Notion integration token
            timeout: Request timeout in seconds
            pool_size: Connections kept open for concurrent writes
        """
        super().__init__(NOTION_API_URL, timeout=timeout, pool_size=pool_size)

        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        })

    def query_database(self, database_id: str) -> List[Dict[str, Any]]:
        """
        Get every page of a database, following the pagination cursor.

        Args:
            database_id: Notion database id

        Returns:
            All pages; only returned once the last page has been read

        Raises:
            APIError: If any page request fails
        """
        pages: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            body: Dict[str, Any] = {"page_size": QUERY_PAGE_SIZE}
            if cursor:
                body["start_cursor"] = cursor

            response = self.post(f"/databases/{database_id}/query", json=body)
            pages.extend(response.get("results", []))

            cursor = response.get("next_cursor")
            if not response.get("has_more") or not cursor:
                break

        return pages

    def get_book_index(self, database_id: str) -> Dict[int, IndexEntry]:
        """
        Get the pages already synced, keyed by Goodreads book id.

        Args:
            database_id: Notion database id

        Returns:
            Mapping of book id to IndexEntry
        """
        pages = self.query_database(database_id)
        index = build_index(pages)

        logger.info(
            "Retrieved books from Notion",
            pages=len(pages),
            indexed=len(index)
        )

        return index

    def create_page(
        self,
        database_id: str,
        properties: Dict[str, Any],
        cover: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create a page in a database.

        Returns:
            The new page id
        """
        body: Dict[str, Any] = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }
        if cover:
            body["cover"] = cover

        response = self.post("/pages", json=body)
        return response["id"]

    def update_page(
        self,
        page_id: str,
        properties: Dict[str, Any],
        cover: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Update the properties (and cover) of an existing page.

        Returns:
            The updated page
        """
        body: Dict[str, Any] = {"properties": properties}
        if cover:
            body["cover"] = cover

        return self.patch(f"/pages/{page_id}", json=body)
