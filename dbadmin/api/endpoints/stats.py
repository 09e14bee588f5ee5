from fastapi import APIRouter

from dbadmin.core import schemas
from dbadmin.core.database import catalog_dep

router = APIRouter(tags=["Dashboard"])


@router.get("/stats", response_model=schemas.StatsResponse)
async def get_stats(catalog: catalog_dep):
    """Return table count, storage sizes and key counts for the current database."""
    return {"stats": await catalog.compute_stats()}
