import math

import pytest

from dbadmin.core.browser import (
    browse,
    normalize_direction,
    page_window,
    parse_positive_int,
)
from dbadmin.core.catalog import catalog_for
from dbadmin.core.errors import InvalidIdentifier


@pytest.mark.parametrize(
    "value, expected",
    [("3", 3), (7, 7), (None, 1), ("abc", 1), ("0", 1), ("-4", 1), ("", 1)],
)
def test_parse_positive_int(value, expected):
    assert parse_positive_int(value, 1) == expected


def test_window_defaults():
    """Missing page and limit fall back to page 1 of 50"""
    window = page_window(None, None)
    assert (window.page, window.limit, window.offset) == (1, 50, 0)


@pytest.mark.parametrize("page, limit, total", [(1, 10, 25), (2, 10, 25), (3, 7, 50), (5, 1, 3)])
def test_window_arithmetic(page, limit, total):
    window = page_window(page, limit)
    assert window.offset == (page - 1) * limit
    assert window.total_pages(total) == math.ceil(total / limit)


def test_window_limit_is_capped():
    assert page_window(1, 100000, max_limit=1000).limit == 1000


@pytest.mark.parametrize(
    "value, expected",
    [("desc", "DESC"), ("DESC", "DESC"), (" Desc ", "DESC"), ("asc", "ASC"), (None, "ASC"), ("sideways", "ASC")],
)
def test_normalize_direction(value, expected):
    assert normalize_direction(value) == expected


@pytest.mark.asyncio
async def test_browse_second_page(fixture_session):
    """Page 2 of 10 over 25 rows holds rows 11-20"""
    page = await browse(catalog_for(fixture_session), "t", page=2, limit=10)

    assert [row["id"] for row in page.data] == list(range(11, 21))
    assert page.total == 25
    assert page.page == 2
    assert page.total_pages == 3


@pytest.mark.asyncio
async def test_browse_last_partial_page(fixture_session):
    page = await browse(catalog_for(fixture_session), "t", page="3", limit="10")
    assert [row["id"] for row in page.data] == list(range(21, 26))
    assert set(page.data[0]) == {"id", "x", "name"}


@pytest.mark.asyncio
async def test_browse_sorted_descending(fixture_session):
    page = await browse(catalog_for(fixture_session), "t", limit=5, sort="x", direction="desc")
    assert [row["x"] for row in page.data] == [250, 240, 230, 220, 210]


@pytest.mark.asyncio
async def test_browse_rejects_unknown_sort_column(fixture_session):
    """Sort columns are checked against the live schema before use"""
    with pytest.raises(InvalidIdentifier):
        await browse(catalog_for(fixture_session), "t", sort="id; DROP TABLE t")


@pytest.mark.asyncio
async def test_browse_rejects_unknown_table(fixture_session):
    with pytest.raises(InvalidIdentifier):
        await browse(catalog_for(fixture_session), "missing")
