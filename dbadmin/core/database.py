from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from dbadmin.core.catalog import Catalog, catalog_for
from dbadmin.core.session import DatabaseSession, SessionManager


# The manager lives on app.state, created once in the lifespan
def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


manager_dep = Annotated[SessionManager, Depends(get_session_manager)]


# This is the gate every route except /connect goes through
async def get_active_session(manager: manager_dep) -> AsyncIterator[DatabaseSession]:
    async with manager.require_session() as session:
        yield session


session_dep = Annotated[DatabaseSession, Depends(get_active_session)]


def get_catalog(session: session_dep) -> Catalog:
    return catalog_for(session)


catalog_dep = Annotated[Catalog, Depends(get_catalog)]
