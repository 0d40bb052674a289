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

"""Database connection factories.

Each function returns a standard DB-API 2.0 connection in autocommit
mode, so that a single statement behaves the way it does under PDO.
Explicit transactions go through :func:`fluentdb.db.transaction`.

SQLite uses the built-in ``sqlite3`` module.  MySQL uses
``mysql.connector`` and PostgreSQL uses ``psycopg2``; both are optional
dependencies.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def connect_sqlite(
    path: str | Path,
    *,
    wal_mode: bool = True,
    foreign_keys: bool = True,
    **options: Any,
) -> sqlite3.Connection:
    """Open (or create) a SQLite database and return a connection.

    Args:
        path: File path (``":memory:"`` for in-memory).
        wal_mode: Enable WAL journal mode for better concurrent access.
        foreign_keys: Enforce foreign key constraints.
        options: Extra keyword arguments for ``sqlite3.connect``.
    """
    path = str(Path(path).expanduser()) if path != ":memory:" else ":memory:"

    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    options.setdefault("check_same_thread", False)
    conn = sqlite3.connect(path, isolation_level=None, **options)
    conn.row_factory = sqlite3.Row

    if wal_mode and path != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    if foreign_keys:
        conn.execute("PRAGMA foreign_keys=ON")

    logger.debug("SQLite connection opened: %s", path)
    return conn


def connect_mysql(
    *,
    host: str = "localhost",
    port: int | None = None,
    database: str | None = None,
    user: str | None = None,
    password: str | None = None,
    unix_socket: str | None = None,
    charset: str | None = "utf8",
    **options: Any,
) -> Any:
    """Open a MySQL connection via ``mysql.connector``.

    *unix_socket*, when given, takes precedence over *host*/*port*.
    """
    try:
        import mysql.connector
    except ImportError:
        raise ImportError(
            "mysql-connector-python not installed. Install with: pip install fluentdb[mysql]"
        )

    params: dict[str, Any] = {"database": database, "autocommit": True, "buffered": True}
    if unix_socket:
        params["unix_socket"] = unix_socket
    else:
        params["host"] = host
        if port is not None:
            params["port"] = port
    if user is not None:
        params["user"] = user
    if password is not None:
        params["password"] = password
    if charset:
        params["charset"] = charset
    params.update(options)

    conn = mysql.connector.connect(**params)
    logger.debug(
        "MySQL connection opened: %s/%s", unix_socket or f"{host}:{port or 3306}", database
    )
    return conn


def connect_postgresql(
    dsn: str | None = None,
    *,
    host: str = "localhost",
    port: int | None = 5432,
    database: str | None = None,
    user: str | None = None,
    password: str | None = None,
    **options: Any,
) -> Any:
    """Open a PostgreSQL connection via psycopg2.

    Either provide a full libpq *dsn* string, or individual parameters.

    Returns:
        A ``psycopg2`` connection with ``RealDictCursor`` as the default
        cursor factory.
    """
    try:
        import psycopg2
        import psycopg2.extras
    except ImportError:
        raise ImportError(
            "psycopg2 not installed. Install with: pip install fluentdb[postgresql]"
        )

    options.setdefault("cursor_factory", psycopg2.extras.RealDictCursor)
    if dsn:
        conn = psycopg2.connect(dsn, **options)
    else:
        conn = psycopg2.connect(
            host=host,
            port=port or 5432,
            dbname=database,
            user=user,
            password=password,
            **options,
        )
    conn.autocommit = True

    logger.debug("PostgreSQL connection opened: %s:%s/%s", host, port, database)
    return conn


def dialect_of(conn: Any) -> str:
    """Return ``"sqlite"``, ``"mysql"`` or ``"pgsql"`` for a DB-API connection."""
    module_name = type(conn).__module__
    if "sqlite3" in module_name:
        return "sqlite"
    if module_name.startswith("mysql"):
        return "mysql"
    return "pgsql"


def placeholder_for(conn: Any) -> str:
    """Return the parameter placeholder for this connection's driver."""
    return "?" if dialect_of(conn) == "sqlite" else "%s"
