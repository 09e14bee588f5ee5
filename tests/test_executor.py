import pytest

from dbadmin.core.errors import QueryExecutionError
from dbadmin.core.executor import execute_statement


@pytest.mark.asyncio
async def test_select_one_is_a_row_set(fixture_session):
    result = await execute_statement(fixture_session, "SELECT 1")

    assert result.returns_rows
    assert len(result.data) == 1
    assert len(result.meta["columns"]) == 1
    assert list(result.data[0].values()) == [1]
    assert result.message == "1 rows returned"


@pytest.mark.asyncio
async def test_update_without_matches_is_a_mutation(connected_manager):
    async with connected_manager.require_session() as session:
        await execute_statement(session, "CREATE TABLE t (x INTEGER)")
        result = await execute_statement(session, "UPDATE t SET x=1 WHERE 1=0")

    assert not result.returns_rows
    assert result.affected_rows == 0
    assert result.message == "Query OK, 0 rows affected."


@pytest.mark.asyncio
async def test_mutation_reports_affected_rows(fixture_session):
    result = await execute_statement(fixture_session, "UPDATE t SET x = 0 WHERE id <= 5")
    assert result.affected_rows == 5
    assert result.message == "Query OK, 5 rows affected."

    # Changes are committed right away
    check = await execute_statement(fixture_session, "SELECT COUNT(*) AS zeros FROM t WHERE x = 0")
    assert check.data == [{"zeros": 5}]


@pytest.mark.asyncio
async def test_columns_follow_select_order(fixture_session):
    result = await execute_statement(
        fixture_session, "SELECT name, id FROM t WHERE id IN (1, 2) ORDER BY id"
    )
    assert result.meta["columns"] == ["name", "id"]
    assert result.data == [{"name": "row 1", "id": 1}, {"name": "row 2", "id": 2}]
    assert result.message == "2 rows returned"


@pytest.mark.asyncio
async def test_sql_is_passed_verbatim(fixture_session):
    """Percent signs and colons are not mistaken for parameters"""
    result = await execute_statement(
        fixture_session, "SELECT '100%' AS pct, 'a:b' AS pair, COUNT(*) AS n FROM t WHERE name LIKE 'row 1%'"
    )
    assert result.data == [{"pct": "100%", "pair": "a:b", "n": 11}]


@pytest.mark.asyncio
async def test_driver_error_is_surfaced(fixture_session):
    with pytest.raises(QueryExecutionError) as error:
        await execute_statement(fixture_session, "SELEC * FROM t")
    assert "syntax error" in error.value.message
    assert error.value.status_code == 400


@pytest.mark.asyncio
async def test_missing_table_error_text_is_kept(fixture_session):
    with pytest.raises(QueryExecutionError) as error:
        await execute_statement(fixture_session, "SELECT * FROM nowhere")
    assert error.value.message == "no such table: nowhere"


@pytest.mark.asyncio
async def test_empty_query_rejected(fixture_session):
    with pytest.raises(QueryExecutionError):
        await execute_statement(fixture_session, "   ")


@pytest.mark.asyncio
async def test_binary_values_become_buffers(fixture_session):
    """Bytes that are not valid UTF-8 still come back JSON safe"""
    result = await execute_statement(fixture_session, "SELECT X'FF00' AS b, 'text' AS s")
    assert result.data == [{"b": {"type": "Buffer", "data": [255, 0]}, "s": "text"}]


@pytest.mark.asyncio
async def test_insert_reports_result_header(fixture_session):
    result = await execute_statement(
        fixture_session, "INSERT INTO t (id, x, name) VALUES (26, 260, 'row 26')"
    )
    assert result.data == {"affectedRows": 1, "insertId": 26}
    assert result.meta == {}
