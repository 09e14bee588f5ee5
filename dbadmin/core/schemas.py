from typing import Optional, List, Dict, Any, Union

from pydantic import BaseModel, ConfigDict, Field


# =========================
# Requests
# =========================
class ConnectRequest(BaseModel):
    host: str = "localhost"
    user: str
    password: str = ""
    database: str


class QueryRequest(BaseModel):
    query: str


# =========================
# Envelope
# =========================
class Envelope(BaseModel):
    success: bool = True


class MessageResponse(Envelope):
    message: str


# =========================
# STATS
# =========================
class TableSize(BaseModel):
    name: str
    size: float


class StatsSummary(BaseModel):
    table_count: int = Field(alias="tableCount")
    total_size_mb: str = Field(alias="totalSizeMB")
    avg_table_size_mb: str = Field(alias="avgTableSizeMB")
    index_count: int = Field(alias="indexCount")
    pk_count: int = Field(alias="pkCount")
    fk_count: int = Field(alias="fkCount")
    db_name: Optional[str] = Field(default=None, alias="dbName")
    user: Optional[str] = None
    element_sizes: List[TableSize] = Field(default=[], alias="elementSizes")

    model_config = ConfigDict(populate_by_name=True)


class StatsResponse(Envelope):
    stats: StatsSummary


# =========================
# SCHEMA
# =========================
class ColumnInfo(BaseModel):
    """One row of ``SHOW FULL COLUMNS``, keyed the way MySQL names them."""

    field: str = Field(alias="Field")
    type: str = Field(alias="Type")
    collation: Optional[str] = Field(default=None, alias="Collation")
    null: str = Field(alias="Null")
    key: str = Field(default="", alias="Key")
    default: Optional[Any] = Field(default=None, alias="Default")
    extra: str = Field(default="", alias="Extra")
    privileges: str = Field(default="", alias="Privileges")
    comment: str = Field(default="", alias="Comment")

    model_config = ConfigDict(populate_by_name=True)


class IndexInfo(BaseModel):
    """
    One row of ``SHOW INDEX``: a single column of a single index.

    Columns beyond the ones named here (``Sub_part``, ``Visible``, ...) are kept
    as they come from the server.
    """

    table: str = Field(alias="Table")
    non_unique: int = Field(alias="Non_unique")
    key_name: str = Field(alias="Key_name")
    seq_in_index: int = Field(alias="Seq_in_index")
    column_name: Optional[str] = Field(default=None, alias="Column_name")
    cardinality: Optional[int] = Field(default=None, alias="Cardinality")
    index_type: str = Field(default="BTREE", alias="Index_type")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class SchemaDescriptor(BaseModel):
    columns: List[ColumnInfo]
    indexes: List[IndexInfo]


class SchemaResponse(Envelope, SchemaDescriptor):
    pass


class TablesResponse(Envelope):
    tables: List[str]


# =========================
# CONTENT / QUERY
# =========================
class ContentPage(Envelope):
    data: List[Dict[str, Any]]
    total: int
    page: int
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class QueryResult(Envelope):
    """
    Outcome of an ad-hoc statement.

    Row-set results carry their rows in ``data`` and the column names in
    ``meta``. Mutations carry the result header (``affectedRows``, ``insertId``)
    in ``data`` and an empty ``meta``.
    """

    data: Union[List[Dict[str, Any]], Dict[str, Any]]
    affected_rows: Optional[int] = Field(default=None, alias="affectedRows")
    meta: Dict[str, List[str]] = {}
    message: str

    model_config = ConfigDict(populate_by_name=True)

    @property
    def returns_rows(self) -> bool:
        return isinstance(self.data, list)
