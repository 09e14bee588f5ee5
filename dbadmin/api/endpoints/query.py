from fastapi import APIRouter

from dbadmin.core import schemas
from dbadmin.core.database import session_dep
from dbadmin.core.executor import execute_statement

router = APIRouter(tags=["Query"])


@router.post("/query", response_model=schemas.QueryResult)
async def run_query(payload: schemas.QueryRequest, session: session_dep):
    return await execute_statement(session, payload.query)
