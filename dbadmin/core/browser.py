import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import column, func, literal_column, select, table
from sqlalchemy.exc import SQLAlchemyError

from dbadmin.core.catalog import Catalog
from dbadmin.core.errors import CatalogReadError, driver_message
from dbadmin.core.identifiers import ensure_known
from dbadmin.core.rows import shape_row
from dbadmin.core.schemas import ContentPage

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50


def parse_positive_int(value: Any, default: int) -> int:
    """Parse ``value`` as a positive integer, falling back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def normalize_direction(direction: Optional[str]) -> str:
    # Anything but an explicit "desc" sorts ascending
    if direction and direction.strip().lower() == "desc":
        return "DESC"
    return "ASC"


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def page_window(
    page: Any,
    limit: Any,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None,
) -> PageWindow:
    """
    Build the offset/limit window for a page request.

    Missing or invalid values fall back to page 1 and ``default_limit``;
    ``max_limit`` caps the page size when given.
    """
    page = parse_positive_int(page, DEFAULT_PAGE)
    limit = parse_positive_int(limit, default_limit)
    if max_limit is not None:
        limit = min(limit, max_limit)
    return PageWindow(page=page, limit=limit)


async def browse(
    catalog: Catalog,
    table_name: str,
    page: Any = None,
    limit: Any = None,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None,
) -> ContentPage:
    """
    Fetch one page of a table plus its total row count.

    The table and the sort column must both exist in the live catalog before
    they are put into the statement.
    """
    await catalog.ensure_table(table_name)
    if sort:
        ensure_known(sort, await catalog.column_names(table_name), kind="column")

    window = page_window(page, limit, default_limit, max_limit)
    source = table(table_name)

    query = select(literal_column("*")).select_from(source)
    if sort:
        sort_column = column(sort)
        query = query.order_by(
            sort_column.desc() if normalize_direction(direction) == "DESC" else sort_column.asc()
        )
    query = query.limit(window.limit).offset(window.offset)

    count_query = select(func.count().label("total")).select_from(source)

    connection = catalog.connection
    try:
        result = await connection.execute(query)
        rows = [shape_row(row) for row in result.mappings()]
        total = (await connection.execute(count_query)).scalar_one()
    except SQLAlchemyError as error:
        logging.error(f"Failed to read content of {table_name}: {error}")
        raise CatalogReadError(driver_message(error)) from error

    return ContentPage(
        data=rows,
        total=total,
        page=window.page,
        total_pages=window.total_pages(total),
    )
