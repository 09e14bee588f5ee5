import logging

from sqlalchemy.exc import SQLAlchemyError

from dbadmin.core.errors import QueryExecutionError, driver_message
from dbadmin.core.rows import shape_row
from dbadmin.core.schemas import QueryResult
from dbadmin.core.session import DatabaseSession


async def execute_statement(session: DatabaseSession, sql: str) -> QueryResult:
    """
    Run caller-supplied SQL verbatim and normalize the outcome.

    No statement type is filtered out: this is a full SQL console. Row-set
    results report their rows and column names, everything else reports the
    affected-row count.

    Raises:
        QueryExecutionError: empty text, or any error reported by the driver.
    """
    if not sql or not sql.strip():
        raise QueryExecutionError("Query is empty")

    logging.info(f"Executing query: {sql}")
    try:
        # no_parameters keeps the driver from treating "%" as a placeholder
        result = await session.connection.exec_driver_sql(
            sql, execution_options={"no_parameters": True}
        )
        if result.returns_rows:
            columns = list(result.keys())
            rows = [shape_row(row) for row in result.mappings()]
        else:
            # DDL reports -1 on some drivers
            affected_rows = max(result.rowcount, 0)
            insert_id = result.lastrowid or 0
    except SQLAlchemyError as error:
        logging.error(f"SQL execution error: {error}")
        raise QueryExecutionError(driver_message(error)) from error

    if result.returns_rows:
        return QueryResult(
            data=rows,
            meta={"columns": columns},
            message=f"{len(rows)} rows returned",
        )

    return QueryResult(
        data={"affectedRows": affected_rows, "insertId": insert_id},
        affected_rows=affected_rows,
        message=f"Query OK, {affected_rows} rows affected.",
    )
