import pytest
from datetime import date
from unittest.mock import Mock

from shelf_sync.sync.models import Book


SAMPLE_FEED = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>Reader's bookshelf: all</title>
    <item>
      <guid><![CDATA[https://www.goodreads.com/review/show/1?utm_medium=api]]></guid>
      <title><![CDATA[The Hobbit]]></title>
      <book_id>5907</book_id>
      <book_large_image_url><![CDATA[https://images.example.com/hobbit.jpg]]></book_large_image_url>
      <book id="5907">
        <num_pages>366</num_pages>
      </book>
      <author_name>J.R.R. Tolkien</author_name>
      <isbn>0618260307</isbn>
      <user_read_at><![CDATA[Tue, 05 Jan 2021 23:30:00 -0800]]></user_read_at>
      <user_date_created><![CDATA[Fri, 01 Jan 2021 10:00:00 -0800]]></user_date_created>
      <user_shelves></user_shelves>
    </item>
    <item>
      <title><![CDATA[Dune]]></title>
      <book_id>44767458</book_id>
      <book_large_image_url></book_large_image_url>
      <author_name>Frank Herbert</author_name>
      <isbn></isbn>
      <user_read_at></user_read_at>
      <user_date_created><![CDATA[Mon, 01 Mar 2021 08:00:00 +0000]]></user_date_created>
      <user_shelves>currently-reading, favorites</user_shelves>
    </item>
    <item>
      <title>Broken entry</title>
      <author_name>Nobody</author_name>
    </item>
  </channel>
</rss>
"""


def _make_response(status_code=200, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


def _make_book(book_id=1, **overrides):
    fields = dict(
        book_id=book_id,
        title=f"Book {book_id}",
        author_name="Author",
        isbn=None,
        date_added=date(2021, 1, 1),
        date_read=None,
        shelf="read",
        cover_url=None,
    )
    fields.update(overrides)
    return Book(**fields)


@pytest.fixture
def sample_feed():
    """A Goodreads review list RSS document."""
    return SAMPLE_FEED


@pytest.fixture
def make_response():
    """Factory for fake requests responses."""
    return _make_response


@pytest.fixture
def make_book():
    """Factory for Book instances with sensible defaults."""
    return _make_book
