import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from dbadmin.core.errors import ConnectionFailed, NoActiveSession, driver_message


@dataclass
class DatabaseSession:
    """The one live connection plus the identity it was opened with."""

    engine: AsyncEngine
    connection: AsyncConnection
    host: Optional[str]
    user: Optional[str]
    database: Optional[str]

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name


def build_url(
    driver: str,
    host: Optional[str],
    user: Optional[str],
    password: Optional[str],
    database: Optional[str],
    port: Optional[int] = None,
) -> URL:
    # SQLite refuses URLs carrying a host or credentials
    if driver.startswith("sqlite"):
        return URL.create(driver, database=database or ":memory:")

    return URL.create(
        driver,
        username=user or None,
        password=password or None,
        host=host or None,
        port=port,
        database=database or None,
    )


class SessionManager:
    """
    Owns the single database session of the process.

    Every use of the connection goes through ``require_session()``, which holds
    the session lock for as long as the caller works with the connection.
    ``connect()`` takes the same lock, so a reconnect waits for in-flight work
    on the old connection to finish before tearing it down.
    """

    def __init__(
        self, driver: str, port: Optional[int] = None, echo: bool = False
    ) -> None:
        self.driver = driver
        self.port = port
        self.echo = echo
        self._session: Optional[DatabaseSession] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    async def connect(
        self,
        host: Optional[str],
        user: Optional[str],
        password: Optional[str],
        database: Optional[str],
    ) -> DatabaseSession:
        """
        Open a new connection and make it the current session.

        The previous session is only released once the new connection is up;
        a failed attempt leaves the previous session untouched.

        Raises:
            ConnectionFailed: the driver could not connect (bad credentials,
                unreachable host, unknown database, missing driver).
        """
        async with self._lock:
            engine = None
            try:
                url = build_url(self.driver, host, user, password, database, self.port)
                # Every ad-hoc statement commits on its own, like a console client
                engine = create_async_engine(
                    url, echo=self.echo, isolation_level="AUTOCOMMIT"
                )
                connection = await engine.connect()
            except (SQLAlchemyError, ImportError) as error:
                # A declared driver package that is not installed fails with ImportError
                if engine is not None:
                    await engine.dispose()
                logging.error(f"Connection to {host}/{database} failed: {error}")
                raise ConnectionFailed(driver_message(error)) from error

            previous, self._session = self._session, DatabaseSession(
                engine=engine,
                connection=connection,
                host=host,
                user=user,
                database=database,
            )
            if previous is not None:
                await self._release(previous)

            logging.info(f"Connected to {database} on {host} as {user}")
            return self._session

    @asynccontextmanager
    async def require_session(self) -> AsyncIterator[DatabaseSession]:
        """Yield the current session with the connection lock held."""
        if self._session is None:
            raise NoActiveSession()

        async with self._lock:
            # A failed reconnect never clears the session, but close() does
            if self._session is None:
                raise NoActiveSession()
            yield self._session

    async def close(self) -> None:
        async with self._lock:
            if self._session is not None:
                await self._release(self._session)
                self._session = None

    async def _release(self, session: DatabaseSession) -> None:
        """Close a replaced session; failures are logged, never raised."""
        try:
            await session.connection.close()
        except Exception as error:
            logging.warning(
                f"Failed to close previous connection to {session.database}: {error}"
            )
        finally:
            try:
                await session.engine.dispose()
            except Exception as error:
                logging.warning(
                    f"Failed to dispose engine of {session.database}: {error}"
                )
