from fastapi import status


class DBAdminError(Exception):
    """Base error for everything the admin core surfaces to a caller.

    ``status_code`` is the HTTP status the API layer answers with; ``message``
    is passed through to the client verbatim.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoActiveSession(DBAdminError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not connected to database. Please login."):
        super().__init__(message)


class ConnectionFailed(DBAdminError):
    status_code = status.HTTP_401_UNAUTHORIZED


class CatalogReadError(DBAdminError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class QueryExecutionError(DBAdminError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidIdentifier(DBAdminError):
    status_code = status.HTTP_400_BAD_REQUEST


def driver_message(error: Exception) -> str:
    """Return the DBAPI error text without SQLAlchemy's wrapping."""
    orig = getattr(error, "orig", None)
    return str(orig if orig is not None else error)
