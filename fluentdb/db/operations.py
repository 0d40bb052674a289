# fluentdb — fluent SQL query builder over DB-API connections
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Stateless statement helpers.

All functions take a DB-API connection as their first argument and pass
SQL straight through to a fresh cursor.  Parameters may be a sequence
(``?`` / ``%s`` placeholders) or a mapping (``:name`` / ``%(name)s``),
whichever the driver's paramstyle accepts.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from fluentdb.db.connection import dialect_of

logger = logging.getLogger(__name__)

Params = Union[Sequence[Any], Mapping[str, Any]]


def execute(conn: Any, sql: str, params: Params | None = ()) -> Any:
    """Execute a single statement and return the cursor.

    Useful for INSERT / UPDATE / DELETE where you might need
    ``cursor.lastrowid`` or ``cursor.rowcount``.  With *params* set to
    ``None`` the SQL is sent without a parameter argument, so format
    drivers leave literal ``%`` characters alone.
    """
    logger.debug("SQL: %s | params=%r", sql, params)
    cur = conn.cursor()
    if params is None:
        cur.execute(sql)
    else:
        cur.execute(sql, params)
    return cur


def executemany(conn: Any, sql: str, params_seq: Sequence[Params]) -> int:
    """Execute a statement for each parameter set and return the row count."""
    logger.debug("SQL (many): %s", sql)
    cur = conn.cursor()
    cur.executemany(sql, params_seq)
    return cur.rowcount


def fetch_one(conn: Any, sql: str, params: Params = ()) -> Any:
    """Execute and return the first row, or ``None``."""
    return execute(conn, sql, params).fetchone()


def fetch_all(conn: Any, sql: str, params: Params = ()) -> list[Any]:
    """Execute and return all rows."""
    return execute(conn, sql, params).fetchall()


def fetch_scalar(conn: Any, sql: str, params: Params = ()) -> Any:
    """Execute and return the first column of the first row, or ``None``."""
    row = fetch_one(conn, sql, params)
    if row is None:
        return None
    # RealDictRow has no positional access.
    if isinstance(row, Mapping):
        return next(iter(row.values()), None)
    return row[0]


def table_exists(conn: Any, name: str) -> bool:
    """Check whether a table exists on any of the supported backends."""
    dialect = dialect_of(conn)
    if dialect == "sqlite":
        sql = "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?"
    elif dialect == "mysql":
        sql = (
            "SELECT 1 FROM information_schema.tables"
            " WHERE table_schema = DATABASE() AND table_name=%s"
        )
    else:
        sql = "SELECT 1 FROM information_schema.tables WHERE table_name=%s"
    return fetch_one(conn, sql, (name,)) is not None


def create_tables(conn: Any, schema_sql: str) -> None:
    """Execute a (possibly multi-statement) schema DDL string.

    SQLite runs the whole string via ``executescript()``.  Other drivers
    get one ``execute()`` per ``;``-terminated statement.
    """
    if dialect_of(conn) == "sqlite":
        conn.executescript(schema_sql)
        return
    cur = conn.cursor()
    for statement in schema_sql.split(";"):
        if statement.strip():
            cur.execute(statement)
