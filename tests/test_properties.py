import pytest
from datetime import date

from shelf_sync.sync.properties import BOOK_URL_BASE, cover_for, date_range, to_properties


def test_to_properties(make_book):
    """Test every column of the database schema."""
    book = make_book(
        101,
        title="The Hobbit",
        author_name="J.R.R. Tolkien",
        isbn=618260307,
        date_added=date(2021, 1, 1),
        date_read=date(2021, 1, 6),
        shelf="read",
    )

    assert to_properties(book) == {
        "Name": {"title": [{"type": "text", "text": {"content": "The Hobbit"}}]},
        "Book ID": {"number": 101},
        "Book ISBN": {"number": 618260307},
        "Author": {"rich_text": [{"type": "text", "text": {"content": "J.R.R. Tolkien"}}]},
        "Shelf": {"multi_select": [{"name": "read"}]},
        "Date": {"date": {"start": "2021-01-01", "end": "2021-01-06"}},
        "URL": {"url": "https://www.goodreads.com/book/show/101"},
    }


@pytest.mark.parametrize("shelf", ["", None])
def test_empty_shelf_maps_to_read(make_book, shelf):
    """Test the default shelf is stored as 'read'."""
    book = make_book(shelf=shelf)
    assert to_properties(book)["Shelf"] == {"multi_select": [{"name": "read"}]}


def test_shelf_cleared_after_construction(make_book):
    book = make_book()
    book.shelf = None
    assert to_properties(book)["Shelf"] == {"multi_select": [{"name": "read"}]}


def test_other_shelf_kept(make_book):
    book = make_book(shelf="currently-reading")
    assert to_properties(book)["Shelf"] == {"multi_select": [{"name": "currently-reading"}]}


def test_read_date_before_added_date(make_book):
    """Test the end of the range never precedes its start."""
    book = make_book(date_added=date(2021, 5, 1), date_read=date(2020, 1, 1))
    assert date_range(book) == {"start": "2021-05-01", "end": "2021-05-01"}


@pytest.mark.parametrize("added, read", [
    (date(2021, 1, 1), date(2021, 1, 1)),
    (date(2021, 1, 1), date(2022, 6, 30)),
    (date(2021, 1, 1), date(2019, 12, 31)),
    (date(2021, 1, 1), None),
    (None, date(2021, 1, 1)),
])
def test_range_end_not_before_start(make_book, added, read):
    result = to_properties(make_book(date_added=added, date_read=read))["Date"]["date"]
    assert result["start"] is not None
    if result["end"] is not None:
        assert date.fromisoformat(result["end"]) >= date.fromisoformat(result["start"])


def test_unread_book_has_open_range(make_book):
    assert date_range(make_book(date_added=date(2021, 1, 1))) == {"start": "2021-01-01", "end": None}


def test_read_date_without_added_date(make_book):
    assert date_range(make_book(date_added=None, date_read=date(2021, 3, 4))) == {"start": "2021-03-04", "end": None}


def test_no_dates(make_book):
    book = make_book(date_added=None, date_read=None)
    assert to_properties(book)["Date"] == {"date": None}


@pytest.mark.parametrize("book_id", [1, 5907, 44767458])
def test_url_built_from_book_id(make_book, book_id):
    """Test the book page url is derived from the book id only."""
    assert to_properties(make_book(book_id))["URL"]["url"] == f"{BOOK_URL_BASE}{book_id}"


def test_missing_isbn_is_null(make_book):
    assert to_properties(make_book(isbn=None))["Book ISBN"] == {"number": None}


def test_cover_for():
    assert cover_for("https://example.com/c.jpg") == {
        "type": "external",
        "external": {"url": "https://example.com/c.jpg"},
    }
    assert cover_for("") is None
    assert cover_for(None) is None
