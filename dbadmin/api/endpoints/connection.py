from fastapi import APIRouter, status

from dbadmin.core import schemas
from dbadmin.core.database import manager_dep

router = APIRouter(tags=["Connection"])


@router.post(
    "/connect",
    response_model=schemas.MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def connect(credentials: schemas.ConnectRequest, manager: manager_dep):
    # Replaces any previous session; failures surface as 401
    await manager.connect(
        host=credentials.host,
        user=credentials.user,
        password=credentials.password,
        database=credentials.database,
    )
    return {"message": "Connected successfully"}
