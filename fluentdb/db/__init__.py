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

"""Driver layer — connection factories and pure functions over DB-API connections.

Supports SQLite (built-in), MySQL (optional, via mysql-connector-python)
and PostgreSQL (optional, via psycopg2).

Usage::

    from fluentdb.db import connect_sqlite, fetch_all, execute, transaction

    conn = connect_sqlite("~/.myapp/data.db")
    with transaction(conn):
        execute(conn, "INSERT INTO items (sku, name) VALUES (?, ?)", ("A-1", "Widget"))
    rows = fetch_all(conn, "SELECT * FROM items")
"""

from fluentdb.db.connection import (
    connect_mysql,
    connect_postgresql,
    connect_sqlite,
    dialect_of,
    placeholder_for,
)
from fluentdb.db.operations import (
    create_tables,
    execute,
    executemany,
    fetch_all,
    fetch_one,
    fetch_scalar,
    table_exists,
)
from fluentdb.db.transactions import begin, commit, rollback, transaction

__all__ = [
    "connect_sqlite",
    "connect_mysql",
    "connect_postgresql",
    "dialect_of",
    "placeholder_for",
    "execute",
    "executemany",
    "fetch_one",
    "fetch_all",
    "fetch_scalar",
    "table_exists",
    "create_tables",
    "begin",
    "commit",
    "rollback",
    "transaction",
]
