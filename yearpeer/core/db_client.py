"""SQLite database client wrapper with CRUD operations."""

import asyncio
import json
import logging
import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from yearpeer.core.config import settings


logger = logging.getLogger(__name__)


class DatabaseError(RuntimeError):
    """Raised when a persistence operation fails."""


class RecordNotFoundError(KeyError):
    """Raised when a record with the given ID does not exist."""


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def sanitize_param(value: str | int | float | bool | None) -> str:
    """Escape a value for safe embedding in filter queries via json.dumps."""
    return json.dumps(str(value))[1:-1]


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO string with fixed microsecond width."""
    return datetime.now(UTC).isoformat(timespec="microseconds")


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


def _parse_value(value: str, *, is_like: bool = False) -> str | int | float | bool | None:
    """Parse a string value to the appropriate Python type for SQLite."""
    if is_like:
        escaped = value.replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"

    if value.isdigit():
        return int(value)
    if value.replace(".", "", 1).isdigit():
        return float(value)

    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False

    return value


def _get_sql_operator(op: str) -> str:
    """Map filter operator to SQL operator."""
    op_map = {
        "=": "=",
        "!=": "!=",
        ">": ">",
        "<": "<",
        ">=": ">=",
        "<=": "<=",
        "~": "LIKE",
    }
    sql_op = op_map.get(op)
    if not sql_op:
        msg = f"Unsupported operator: {op}"
        raise ValueError(msg)
    return sql_op


# A value may hold the other quote character but never its own delimiter
FILTER_COMPARISON_PATTERN = re.compile(r"""^(\w+)\s*(!=|>=|<=|=|>|<|~)\s*(['"])((?:(?!\3).)*)\3$""")


def _parse_single_comparison(comparison: str) -> tuple[str, str | int | float | bool | None]:
    """Parse a single comparison expression into a SQL condition and parameter."""
    match = FILTER_COMPARISON_PATTERN.match(comparison.strip())
    if not match:
        msg = f"Invalid filter syntax: {comparison}"
        raise ValueError(msg)

    field = match.group(1)
    op = match.group(2)
    raw_value = match.group(4)

    sql_op = _get_sql_operator(op)
    is_like = sql_op == "LIKE"
    value = _parse_value(raw_value, is_like=is_like)

    if is_like:
        return f"{field} LIKE ? ESCAPE '\\'", value
    return f"{field} {sql_op} ?", value


def _parse_or_group(or_group: str) -> tuple[str, list[str | int | float | bool | None]]:
    """Parse a parenthesized OR group into a SQL condition and parameters."""
    inner = or_group[1:-1]  # Remove parentheses
    or_parts = [p.strip() for p in inner.split("||")]
    or_conditions = []
    or_params = []

    for part in or_parts:
        cond, value = _parse_single_comparison(part)
        or_conditions.append(cond)
        or_params.append(value)

    return f"({' OR '.join(or_conditions)})", or_params


def split_and_conditions(filter_query: str) -> list[str]:
    """Split filter query by && while preserving parenthesized groups."""
    parts = []
    current = ""
    paren_depth = 0

    for char in filter_query:
        if char == "(":
            paren_depth += 1
        elif char == ")":
            paren_depth -= 1

        current += char

        if paren_depth == 0 and current.endswith("&&"):
            parts.append(current[:-2].strip())
            current = ""

    if current.strip():
        parts.append(current.strip())

    return parts


def parse_filter(filter_query: str) -> tuple[str, list[str | int | float | bool | None]]:
    """Parse filter syntax into a SQL WHERE clause and parameter list.

    Supports `field op "value"` comparisons joined with `&&`, and
    parenthesized `||` groups of single comparisons.
    """
    if not filter_query:
        return "", []

    parts = split_and_conditions(filter_query)
    conditions = []
    params = []

    for raw_part in parts:
        part = raw_part.strip()

        # Handle parenthesized OR groups
        if part.startswith("(") and part.endswith(")"):
            cond, cond_params = _parse_or_group(part)
            conditions.append(cond)
            params.extend(cond_params)
        else:
            cond, value = _parse_single_comparison(part)
            conditions.append(cond)
            params.append(value)

    return " AND ".join(conditions), params


def parse_sort(sort: str) -> str:
    """Translate `+field`, `-field` or `field [ASC|DESC]` into an ORDER BY clause."""
    if not sort:
        return "rowid ASC"

    sort = sort.strip()
    if sort.startswith(("+", "-")):
        direction = "DESC" if sort[0] == "-" else "ASC"
        sort = f"{sort[1:]} {direction}"

    # Only allow: column_name [ASC|DESC]
    if re.match(r"^[A-Za-z_][A-Za-z0-9_]*(\s+(ASC|DESC))?$", sort, re.IGNORECASE):
        return sort

    logger.warning("Invalid sort parameter, using default", extra={"sort": sort})
    return "rowid ASC"


def _serialize_value(value: Any) -> Any:
    """Convert Python values into SQLite-compatible parameters."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value


_db_connections: dict[tuple[int, str], tuple[asyncio.AbstractEventLoop, aiosqlite.Connection]] = {}
_write_locks: dict[int, tuple[asyncio.AbstractEventLoop, asyncio.Lock]] = {}


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the running loop and db path."""
    loop = asyncio.get_running_loop()
    path = get_db_path(db_path)
    cache_key = (id(loop), str(path))

    cached = _db_connections.get(cache_key)
    if cached is not None:
        cached_loop, cached_conn = cached
        if cached_loop is loop:
            return cached_conn
        # A previous loop with the same id is gone, the connection is stale
        _db_connections.pop(cache_key, None)

    path.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(path))
    await conn.execute("PRAGMA foreign_keys = ON")
    await conn.execute("PRAGMA journal_mode = WAL")

    _db_connections[cache_key] = (loop, conn)

    logger.info("Created new SQLite connection", extra={"db_path": str(path), "loop_id": id(loop)})
    return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the running loop and db path."""
    loop = asyncio.get_running_loop()
    path = get_db_path(db_path)
    cache_key = (id(loop), str(path))

    cached = _db_connections.pop(cache_key, None)
    if cached is None:
        return

    try:
        await cached[1].close()
        logger.info("Closed SQLite connection", extra={"loop_id": id(loop), "db_path": str(path)})
    except Exception as e:
        logger.warning("Error closing SQLite connection", extra={"error": str(e), "loop_id": id(loop)})


def write_lock() -> asyncio.Lock:
    """Return the lock that serializes validate-then-write sequences on the running loop."""
    loop = asyncio.get_running_loop()
    cached = _write_locks.get(id(loop))
    if cached is None or cached[0] is not loop:
        cached = (loop, asyncio.Lock())
        _write_locks[id(loop)] = cached
    return cached[1]


@asynccontextmanager
async def serialized_write() -> AsyncIterator[None]:
    """Hold the write lock for the duration of a check-then-act block."""
    async with write_lock():
        yield


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from yearpeer.core import schema  # noqa: PLC0415 - schema imports this module

    await schema.init_db(db_path=db_path)


def _row_to_record(cursor: aiosqlite.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    columns = [description[0] for description in cursor.description]
    return dict(zip(columns, row, strict=True))


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it with its generated id and timestamps."""
    _validate_collection_name(collection)

    now = utc_timestamp()
    record_data = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **data}

    try:
        conn = await get_connection()

        columns = list(record_data.keys())
        columns_str = ", ".join(columns)
        placeholders_str = ", ".join("?" for _ in columns)
        values = [_serialize_value(record_data[key]) for key in columns]

        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608 - collection is validated
        await conn.execute(query, values)
        await conn.commit()
    except aiosqlite.OperationalError as e:
        if "no such table" in str(e):
            logger.error("Table not found", extra={"collection": collection})
            msg = f"Table '{collection}' does not exist. Call init_db() first."
            raise DatabaseError(msg) from e
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e
    except Exception as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": record_data["id"]})
    return await get_record(collection=collection, record_id=record_data["id"])


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)

    try:
        conn = await get_connection()

        query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.debug("Retrieved record", extra={"collection": collection, "record_id": record_id})
    return _row_to_record(cursor, row)


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Update a record by ID, refresh its updated_at timestamp, and return it."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    _validate_collection_name(collection)
    update_data = {**data, "updated_at": utc_timestamp()}

    try:
        conn = await get_connection()

        set_clause = ", ".join(f"{key} = ?" for key in update_data)
        values = [_serialize_value(val) for val in update_data.values()]
        values.append(record_id)

        query = f"UPDATE {collection} SET {set_clause} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, values)
        await conn.commit()
    except Exception as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to update record in {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id)


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)

    try:
        conn = await get_connection()

        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        await conn.commit()
    except Exception as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def _select(
    *,
    collection: str,
    filter_query: str,
    sort: str,
    limit: int | None = None,
    offset: int = 0,
) -> list[dict[str, Any]]:
    _validate_collection_name(collection)

    where_clause, params = parse_filter(filter_query)
    where_sql = f"WHERE {where_clause}" if where_clause else ""
    query = f"SELECT * FROM {collection} {where_sql} ORDER BY {parse_sort(sort)}"  # noqa: S608 - collection is validated
    if limit is not None:
        query += " LIMIT ? OFFSET ?"
        params.extend([limit, offset])

    conn = await get_connection()
    cursor = await conn.execute(query, params)
    rows = await cursor.fetchall()
    return [_row_to_record(cursor, row) for row in rows]


async def get_full_list(*, collection: str, filter_query: str = "", sort: str = "") -> list[dict[str, Any]]:
    """List every record matching the filter, without pagination."""
    try:
        records = await _select(collection=collection, filter_query=filter_query, sort=sort)
    except Exception as e:
        logger.error("get_full_list_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.debug("Listed all records", extra={"collection": collection, "count": len(records)})
    return records


async def get_first_record(*, collection: str, filter_query: str) -> dict[str, Any] | None:
    """Return the first record matching the filter, or None."""
    try:
        records = await _select(collection=collection, filter_query=filter_query, sort="", limit=1)
    except Exception as e:
        logger.error(
            "get_first_record_failed", extra={"collection": collection, "filter_query": filter_query, "error": str(e)}
        )
        msg = f"Failed to get first record from {collection}: {e}"
        raise DatabaseError(msg) from e

    return records[0] if records else None


async def count_records(*, collection: str, filter_query: str = "") -> int:
    """Count records matching the filter."""
    try:
        _validate_collection_name(collection)
        where_clause, params = parse_filter(filter_query)
        where_sql = f"WHERE {where_clause}" if where_clause else ""

        conn = await get_connection()
        query = f"SELECT COUNT(*) FROM {collection} {where_sql}"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, params)
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("count_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to count records in {collection}: {e}"
        raise DatabaseError(msg) from e

    return int(row[0]) if row else 0
