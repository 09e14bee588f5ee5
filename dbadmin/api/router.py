from fastapi import APIRouter
from dbadmin.api.endpoints import connection, stats, tables, query

api_router = APIRouter(prefix="/api")

# Combine all sub-routers into one
api_router.include_router(connection.router)
api_router.include_router(stats.router)
api_router.include_router(tables.router)
api_router.include_router(query.router)
