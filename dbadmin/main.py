import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dbadmin.api.router import api_router
from dbadmin.core.config import settings
from dbadmin.core.errors import DBAdminError
from dbadmin.core.session import SessionManager

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# One session manager per process, released when the app shuts down
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.session_manager = SessionManager(
        driver=settings.DB_DRIVER, port=settings.DB_PORT, echo=settings.SQL_ECHO
    )
    yield
    await app.state.session_manager.close()


app = FastAPI(title="Database Admin API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every core failure is answered as {success: false, message}
@app.exception_handler(DBAdminError)
async def dbadmin_error_handler(request: Request, error: DBAdminError):
    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "message": error.message},
    )


# Include the master router containing all our endpoints
app.include_router(api_router)

# The bundled front end is served from the root once the API routes are in place
if settings.STATIC_DIR:
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
