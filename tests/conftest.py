import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from dbadmin.main import app
from dbadmin.core.database import get_session_manager
from dbadmin.core.session import SessionManager

# Force the tests onto in-memory SQLite databases
TEST_DRIVER = "sqlite+aiosqlite"
MEMORY = ":memory:"


# Fresh manager for every test, no session yet
@pytest_asyncio.fixture(scope="function")
async def manager():
    session_manager = SessionManager(driver=TEST_DRIVER)
    yield session_manager
    await session_manager.close()


# Manager holding a session on an empty in-memory database
@pytest_asyncio.fixture(scope="function")
async def connected_manager(manager: SessionManager):
    await manager.connect(host="localhost", user="tester", password="", database=MEMORY)
    return manager


# Session whose database holds a deterministic 25-row table "t"
@pytest_asyncio.fixture(scope="function")
async def fixture_session(connected_manager: SessionManager):
    async with connected_manager.require_session() as session:
        await session.connection.exec_driver_sql(
            "CREATE TABLE t (id INTEGER PRIMARY KEY, x INTEGER, name TEXT)"
        )
        for row_id in range(1, 26):
            await session.connection.exec_driver_sql(
                f"INSERT INTO t (id, x, name) VALUES ({row_id}, {row_id * 10}, 'row {row_id}')"
            )
        yield session


# Session whose database has keys, indexes and a foreign key
@pytest_asyncio.fixture(scope="function")
async def library_session(connected_manager: SessionManager):
    async with connected_manager.require_session() as session:
        for statement in (
            "CREATE TABLE authors (id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE)",
            "CREATE TABLE books ("
            " id INTEGER PRIMARY KEY,"
            " author_id INTEGER REFERENCES authors(id),"
            " title TEXT DEFAULT 'untitled')",
            "CREATE INDEX idx_books_title ON books (title)",
        ):
            await session.connection.exec_driver_sql(statement)
        yield session


# Client
@pytest_asyncio.fixture(scope="function")
async def client(manager: SessionManager):
    app.dependency_overrides[get_session_manager] = lambda: manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# Client already connected to an in-memory database
@pytest_asyncio.fixture(scope="function")
async def connected_client(client: AsyncClient):
    response = await client.post(
        "/api/connect",
        json={"host": "localhost", "user": "tester", "password": "", "database": MEMORY},
    )
    assert response.status_code == 200
    return client
