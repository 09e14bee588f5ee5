import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from dbadmin.core.errors import CatalogReadError, driver_message
from dbadmin.core.identifiers import ensure_known, quote_identifier
from dbadmin.core.schemas import (
    ColumnInfo,
    IndexInfo,
    SchemaDescriptor,
    StatsSummary,
    TableSize,
)
from dbadmin.core.session import DatabaseSession

# -----------------------------------------------------------------------------
# CATALOG MODULE
# Purpose: read table lists, sizes, key counts and column definitions from the
# database's own metadata. One reader per dialect, same return types.
# -----------------------------------------------------------------------------

TOP_TABLES = 10


def first_value(row: Any) -> Any:
    """
    Return the sole value of a catalog row without relying on its key name.

    ``SHOW TABLES`` names its column ``Tables_in_<database>``, so rows are read
    positionally. Accepts SQLAlchemy rows, plain sequences and mappings.
    """
    if hasattr(row, "_mapping"):
        row = row._mapping
    if isinstance(row, dict) or hasattr(row, "values"):
        return next(iter(row.values()))
    return row[0]


def format_mb(value: Optional[Any]) -> str:
    # Null sums come back for schemas without tables
    return f"{float(value or 0):.2f}"


def build_stats(
    table_count: int,
    total_size_mb: Optional[Any],
    avg_table_size_mb: Optional[Any],
    table_sizes: Sequence[Any],
    index_count: Optional[Any],
    pk_count: Optional[Any],
    fk_count: Optional[Any],
    database: Optional[str],
    user: Optional[str],
) -> StatsSummary:
    """Shape raw catalog aggregates into the stats summary."""
    element_sizes = [
        TableSize(name=name, size=round(float(size or 0), 2))
        for name, size in table_sizes
    ]
    element_sizes.sort(key=lambda item: item.size, reverse=True)

    return StatsSummary(
        table_count=table_count,
        total_size_mb=format_mb(total_size_mb),
        avg_table_size_mb=format_mb(avg_table_size_mb),
        index_count=int(index_count or 0),
        pk_count=int(pk_count or 0),
        fk_count=int(fk_count or 0),
        db_name=database,
        user=user,
        element_sizes=element_sizes[:TOP_TABLES],
    )


class Catalog:
    """Base reader; subclasses issue the dialect specific catalog queries."""

    def __init__(self, session: DatabaseSession) -> None:
        self.session = session
        self.connection = session.connection

    async def list_tables(self) -> List[str]:
        raise NotImplementedError

    async def compute_stats(self) -> StatsSummary:
        raise NotImplementedError

    async def describe_table(self, table_name: str) -> SchemaDescriptor:
        raise NotImplementedError

    async def column_names(self, table_name: str) -> List[str]:
        schema = await self.describe_table(table_name)
        return [column.field for column in schema.columns]

    async def ensure_table(self, table_name: str) -> str:
        return ensure_known(table_name, await self.list_tables(), kind="table")

    async def _rows(self, statement, params: Optional[Dict[str, Any]] = None):
        try:
            if isinstance(statement, str):
                result = await self.connection.exec_driver_sql(
                    statement, execution_options={"no_parameters": True}
                )
            else:
                result = await self.connection.execute(statement, params or {})
            return result.all()
        except SQLAlchemyError as error:
            logging.error(f"Catalog query failed: {error}")
            raise CatalogReadError(driver_message(error)) from error


class MySQLCatalog(Catalog):
    async def list_tables(self) -> List[str]:
        rows = await self._rows("SHOW TABLES")
        return [first_value(row) for row in rows]

    async def compute_stats(self) -> StatsSummary:
        schema = {"schema": self.session.database}

        tables = await self.list_tables()

        size_rows = await self._rows(
            text(
                """
                SELECT
                    SUM(data_length + index_length) / 1024 / 1024 AS total_size_mb,
                    AVG(data_length + index_length) / 1024 / 1024 AS avg_table_size_mb
                FROM information_schema.TABLES
                WHERE table_schema = :schema
                """
            ),
            schema,
        )

        table_sizes = await self._rows(
            text(
                """
                SELECT
                    table_name AS name,
                    (data_length + index_length) / 1024 / 1024 AS size
                FROM information_schema.TABLES
                WHERE table_schema = :schema
                ORDER BY size DESC
                LIMIT :top
                """
            ),
            {**schema, "top": TOP_TABLES},
        )

        index_rows = await self._rows(
            text(
                """
                SELECT COUNT(*) AS total
                FROM information_schema.STATISTICS
                WHERE table_schema = :schema
                """
            ),
            schema,
        )

        key_rows = await self._rows(
            text(
                """
                SELECT
                    SUM(CASE WHEN CONSTRAINT_NAME = 'PRIMARY' THEN 1 ELSE 0 END) AS pk_count,
                    SUM(CASE WHEN REFERENCED_TABLE_NAME IS NOT NULL THEN 1 ELSE 0 END) AS fk_count
                FROM information_schema.KEY_COLUMN_USAGE
                WHERE table_schema = :schema
                """
            ),
            schema,
        )

        sizes = size_rows[0] if size_rows else None
        keys = key_rows[0] if key_rows else None
        return build_stats(
            table_count=len(tables),
            total_size_mb=sizes.total_size_mb if sizes else None,
            avg_table_size_mb=sizes.avg_table_size_mb if sizes else None,
            table_sizes=[(row.name, row.size) for row in table_sizes],
            index_count=index_rows[0].total if index_rows else 0,
            pk_count=keys.pk_count if keys else None,
            fk_count=keys.fk_count if keys else None,
            database=self.session.database,
            user=self.session.user,
        )

    async def describe_table(self, table_name: str) -> SchemaDescriptor:
        await self.ensure_table(table_name)
        quoted = quote_identifier(table_name)

        column_rows = await self._rows(f"SHOW FULL COLUMNS FROM {quoted}")
        index_rows = await self._rows(f"SHOW INDEX FROM {quoted}")

        return SchemaDescriptor(
            columns=[ColumnInfo.model_validate(dict(row._mapping)) for row in column_rows],
            indexes=[IndexInfo.model_validate(dict(row._mapping)) for row in index_rows],
        )


class SQLiteCatalog(Catalog):
    """
    Catalog reader for SQLite databases.

    SQLite keeps no per-table size metadata unless the optional ``dbstat``
    extension is compiled in, so table sizes are reported as 0.
    """

    async def list_tables(self) -> List[str]:
        rows = await self._rows(
            text(
                "SELECT name FROM sqlite_master "
                "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
        )
        return [first_value(row) for row in rows]

    async def compute_stats(self) -> StatsSummary:
        tables = await self.list_tables()

        index_rows = await self._rows(
            text(
                """
                SELECT COUNT(*) AS total
                FROM sqlite_master AS m
                JOIN pragma_index_list(m.name) AS il
                JOIN pragma_index_info(il.name) AS ii
                WHERE m.type = 'table' AND m.name NOT LIKE 'sqlite_%'
                """
            )
        )
        pk_rows = await self._rows(
            text(
                """
                SELECT COUNT(*) AS total
                FROM sqlite_master AS m
                JOIN pragma_table_info(m.name) AS p
                WHERE m.type = 'table' AND m.name NOT LIKE 'sqlite_%' AND p.pk > 0
                """
            )
        )
        fk_rows = await self._rows(
            text(
                """
                SELECT COUNT(*) AS total
                FROM sqlite_master AS m
                JOIN pragma_foreign_key_list(m.name) AS fk
                WHERE m.type = 'table' AND m.name NOT LIKE 'sqlite_%'
                """
            )
        )

        return build_stats(
            table_count=len(tables),
            total_size_mb=None,
            avg_table_size_mb=None,
            table_sizes=[(name, 0) for name in tables],
            index_count=index_rows[0].total,
            pk_count=pk_rows[0].total,
            fk_count=fk_rows[0].total,
            database=self.session.database,
            user=self.session.user,
        )

    async def describe_table(self, table_name: str) -> SchemaDescriptor:
        await self.ensure_table(table_name)
        quoted = quote_identifier(table_name)

        column_rows = await self._rows(f"PRAGMA table_info({quoted})")
        index_list = await self._rows(f"PRAGMA index_list({quoted})")

        indexes: List[IndexInfo] = []
        key_roles: Dict[str, str] = {}
        for index in index_list:
            index_columns = await self._rows(
                f"PRAGMA index_info({quote_identifier(index.name)})"
            )
            for position, index_column in enumerate(index_columns, start=1):
                is_primary = index.origin == "pk"
                indexes.append(
                    IndexInfo(
                        table=table_name,
                        non_unique=0 if index.unique else 1,
                        key_name="PRIMARY" if is_primary else index.name,
                        seq_in_index=position,
                        column_name=index_column.name,
                    )
                )
                # The first column of an index decides the MySQL style key role
                if position == 1 and index_column.name not in key_roles:
                    key_roles[index_column.name] = "UNI" if index.unique else "MUL"

        columns = []
        for row in column_rows:
            key = "PRI" if row.pk else key_roles.get(row.name, "")
            columns.append(
                ColumnInfo(
                    field=row.name,
                    type=row.type,
                    null="NO" if row.notnull or row.pk else "YES",
                    key=key,
                    default=row.dflt_value,
                )
            )

        return SchemaDescriptor(columns=columns, indexes=indexes)


CATALOGS = {
    "mysql": MySQLCatalog,
    "mariadb": MySQLCatalog,
    "sqlite": SQLiteCatalog,
}


def catalog_for(session: DatabaseSession) -> Catalog:
    try:
        catalog_class = CATALOGS[session.dialect]
    except KeyError:
        raise CatalogReadError(f"Unsupported database dialect: {session.dialect}")
    return catalog_class(session)
