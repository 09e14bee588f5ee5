from typing import Optional

from fastapi import APIRouter

from dbadmin.core import browser, schemas
from dbadmin.core.config import settings
from dbadmin.core.database import catalog_dep

router = APIRouter(prefix="/tables", tags=["Tables"])


@router.get("", response_model=schemas.TablesResponse)
async def list_tables(catalog: catalog_dep):
    return {"tables": await catalog.list_tables()}


@router.get("/{name}/schema", response_model=schemas.SchemaResponse)
async def table_schema(name: str, catalog: catalog_dep):
    """Return column and index definitions of a table."""
    return await catalog.describe_table(name)


@router.get("/{name}/content", response_model=schemas.ContentPage)
async def table_content(
    name: str,
    catalog: catalog_dep,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    dir: Optional[str] = None,
):
    """
    Return one page of rows.

    ``page`` and ``limit`` are taken as strings so that junk input falls back
    to the defaults instead of failing validation.
    """
    return await browser.browse(
        catalog,
        name,
        page=page,
        limit=limit,
        sort=sort,
        direction=dir,
        default_limit=settings.DEFAULT_PAGE_LIMIT,
        max_limit=settings.MAX_PAGE_LIMIT,
    )
