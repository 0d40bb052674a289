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

"""Transaction control for autocommit connections."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from fluentdb.db.connection import dialect_of

logger = logging.getLogger(__name__)


def begin(conn: Any) -> None:
    """Open an explicit transaction."""
    statement = "START TRANSACTION" if dialect_of(conn) == "mysql" else "BEGIN"
    conn.cursor().execute(statement)


def commit(conn: Any) -> None:
    """Commit the open transaction."""
    conn.cursor().execute("COMMIT")


def rollback(conn: Any) -> None:
    """Roll back the open transaction."""
    conn.cursor().execute("ROLLBACK")


@contextmanager
def transaction(conn: Any) -> Generator[Any, None, None]:
    """Context manager that commits on success, rolls back on exception.

    Usage::

        with transaction(conn):
            execute(conn, "INSERT INTO ...")
            execute(conn, "UPDATE ...")
        # auto-committed here

    Connections from :mod:`fluentdb.db.connection` run in autocommit
    mode, so the transaction is opened and closed with explicit SQL
    statements instead of ``conn.commit()`` / ``conn.rollback()``.
    """
    begin(conn)
    try:
        yield conn
    except Exception:
        logger.warning("Rolling back transaction after error", exc_info=True)
        rollback(conn)
        raise
    commit(conn)
