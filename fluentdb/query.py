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

"""Fluent query builder.

Every clause method appends a fragment of SQL text to a statement
buffer and returns the builder, so calls chain.  A terminal call
(:meth:`Database.execute`, :meth:`Database.fetch`,
:meth:`Database.fetch_all`) runs the buffer as a prepared statement with
the bound parameters and then clears both.

Clause arguments are inserted verbatim.  Values coming from users belong
in :meth:`Database.bind`, referenced by the driver's placeholder
(:attr:`Database.placeholder`), never in the SQL text.

Usage::

    db = Database().driver("sqlite").db_path(":memory:").connect()
    db.query("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT, qty INTEGER)")
    db.insert("items").columns("name", "qty").values("?", "?").bind("bolt", 40).execute()
    rows = db.select("name", "qty").from_("items").where("qty > ?").bind(10).fetch_all()
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fluentdb import backup as _backup
from fluentdb.config import (
    DEFAULT_CHARSET,
    DEFAULT_DRIVER,
    DEFAULT_HOST,
    ConnectionConfig,
    validate_db_path,
    validate_driver,
    validate_port,
)
from fluentdb.db import (
    begin,
    commit,
    connect_mysql,
    connect_postgresql,
    connect_sqlite,
    execute,
    placeholder_for,
    rollback,
    transaction,
)
from fluentdb.db.operations import Params
from fluentdb.errors import EmptyStatementError, NotConnectedError, ValidationError
from fluentdb.fetch import FetchMode, coerce_mode, column_names, shape_row
from fluentdb.reference import render_sql_reference
from fluentdb.validation import validate_integer, validate_string

logger = logging.getLogger(__name__)


def _join(items: Sequence[Any], label: str) -> str:
    """Validate each item as a string and join them with commas."""
    return ",".join(validate_string(item, label) for item in items)


def _literal(value: Any) -> str:
    return "NULL" if value is None else str(value)


class Database:
    """Chainable SQL statement builder bound to one DB-API connection.

    Args:
        config: Connection settings.  The fluent setters (:meth:`driver`,
            :meth:`host`, ...) modify it in place until :meth:`connect`.
    """

    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self._config = config if config is not None else ConnectionConfig()
        self._conn: Any = None
        self._fragments: list[str] = []
        self._params: Params | None = None

        self.row_count: int = -1
        self.last_row_id: Any = None
        self.result: Any = None

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Database:
        return cls(config)

    @classmethod
    def from_env(cls, prefix: str = "FLUENTDB_") -> Database:
        """Create a builder configured from ``<prefix>*`` environment variables."""
        return cls(ConnectionConfig.from_env(prefix))

    def __repr__(self) -> str:
        state = "connected" if self._conn is not None else "disconnected"
        return f"<Database {self._config.driver} {state} sql={self.sql!r}>"

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Connection settings -----------------------------------------------

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def driver(self, driver: str = DEFAULT_DRIVER) -> Database:
        """Set the driver: ``"mysql"`` (default), ``"sqlite"`` or ``"pgsql"``."""
        self._config.driver = validate_driver(driver)
        return self

    def host(self, host: str = DEFAULT_HOST) -> Database:
        self._config.host = validate_string(host, "Database host name")
        return self

    def port(self, port: int | None = None) -> Database:
        """Set the server port, or ``None`` for the driver default."""
        self._config.port = validate_port(port)
        return self

    def db_name(self, db_name: str) -> Database:
        self._config.db_name = validate_string(db_name, "Database name")
        return self

    def unix_socket(self, unix_socket: str | None = None) -> Database:
        self._config.unix_socket = validate_string(unix_socket, "Unix socket", allow_none=True)
        return self

    def charset(self, charset: str = DEFAULT_CHARSET) -> Database:
        self._config.charset = validate_string(charset, "Charset")
        return self

    def db_path(self, db_path: str | Path, *, create: bool = False) -> Database:
        """Set the SQLite database file.

        The file must already exist unless *create* is set or the path
        is ``":memory:"``.
        """
        self._config.db_path = validate_db_path(db_path, create=create)
        return self

    def username(self, username: str) -> Database:
        self._config.username = validate_string(username, "Username")
        return self

    def password(self, password: str) -> Database:
        self._config.password = validate_string(password, "Password")
        return self

    def options(self, options: Mapping[str, Any]) -> Database:
        """Extra keyword arguments for the driver's ``connect()``."""
        if not isinstance(options, Mapping):
            raise ValidationError("Options must be a mapping.")
        self._config.options = dict(options)
        return self

    # --- Connection lifecycle ----------------------------------------------

    def connect(self) -> Database:
        """Open the driver connection described by the current settings.

        An already open connection is closed first.
        """
        config = self._config
        config.validate()
        self.close()
        logger.debug("Connecting to %s", config.dsn)

        if config.driver == "sqlite":
            self._conn = connect_sqlite(config.db_path, **config.options)
        elif config.driver == "mysql":
            self._conn = connect_mysql(
                host=config.host,
                port=config.port,
                database=config.db_name,
                user=config.username,
                password=config.password,
                unix_socket=config.unix_socket,
                charset=config.charset,
                **config.options,
            )
        else:
            self._conn = connect_postgresql(
                host=config.host,
                port=config.port,
                database=config.db_name,
                user=config.username,
                password=config.password,
                **config.options,
            )
        return self

    @property
    def connection(self) -> Any:
        """The underlying DB-API connection."""
        if self._conn is None:
            raise NotConnectedError("Not connected. Call connect() first.")
        return self._conn

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Connection closed: %s", self._config.dsn)

    @property
    def placeholder(self) -> str:
        """Positional parameter marker for the driver (``?`` or ``%s``)."""
        if self._conn is not None:
            return placeholder_for(self._conn)
        return "?" if self._config.driver == "sqlite" else "%s"

    # --- Statement buffer --------------------------------------------------

    @property
    def sql(self) -> str:
        """The statement assembled so far."""
        return "".join(self._fragments).strip()

    @property
    def params(self) -> Params | None:
        """Parameters bound for the next statement."""
        return self._params

    def reset(self) -> Database:
        """Discard the statement buffer and bound parameters."""
        self._fragments = []
        self._params = None
        return self

    def _append(self, fragment: str) -> Database:
        self._fragments.append(fragment)
        return self

    def bind(self, *values: Any, **named: Any) -> Database:
        """Bind parameters for the next statement.

        ``bind((1, 2))`` and ``bind(1, 2)`` both bind a positional tuple;
        ``bind({"id": 1})`` and ``bind(id=1)`` bind named parameters.
        """
        if values and named:
            raise ValidationError("Bind either positional or named parameters, not both.")
        if named:
            self._params = dict(named)
        elif len(values) == 1 and isinstance(values[0], (Mapping, list, tuple)):
            only = values[0]
            self._params = dict(only) if isinstance(only, Mapping) else tuple(only)
        else:
            self._params = tuple(values)
        return self

    # --- SELECT ------------------------------------------------------------

    def select(self, *columns: str) -> Database:
        """``SELECT a,b``.  With no columns, ``SELECT *``."""
        cols = _join(columns, "`SELECT` statement") if columns else "*"
        return self._append(f" SELECT {cols}")

    def union(self) -> Database:
        return self._append(" UNION")

    def union_all(self) -> Database:
        return self._append(" UNION ALL")

    def union_distinct(self) -> Database:
        return self._append(" UNION DISTINCT")

    def from_(self, table: str) -> Database:
        table = validate_string(table, "`FROM` table name")
        return self._append(f" FROM {table}")

    def where(self, where: str) -> Database:
        where = validate_string(where, "`WHERE` statement")
        return self._append(f" WHERE {where}")

    def group_by(self, *group_by: str) -> Database:
        cols = _join(group_by, "`GROUP BY` statement")
        return self._append(f" GROUP BY {cols}")

    def order_by(self, order_by: str | Sequence[str]) -> Database:
        """``ORDER BY``; a list orders by several columns."""
        if isinstance(order_by, (list, tuple)):
            order_by = _join(order_by, "`ORDER BY` statement")
        order_by = validate_string(order_by, "`ORDER BY` statement")
        return self._append(f" ORDER BY {order_by}")

    def limit(self, limit: int | str) -> Database:
        """``LIMIT n`` or, as a string, ``LIMIT offset,count`` and the like."""
        if validate_integer(limit, "`LIMIT` statement", allow_none=True) is None:
            limit = validate_string(limit, "`LIMIT` statement")
        return self._append(f" LIMIT {limit}")

    def left_join(self, tables: str) -> Database:
        tables = validate_string(tables, "`LEFT JOIN` table names")
        return self._append(f" LEFT JOIN {tables}")

    def inner_join(self, tables: str) -> Database:
        tables = validate_string(tables, "`INNER JOIN` table names")
        return self._append(f" INNER JOIN {tables}")

    def on(self, condition: str) -> Database:
        condition = validate_string(condition, "`ON` table names")
        return self._append(f" ON ({condition})")

    def into_outfile(self, file: str) -> Database:
        file = validate_string(file, "`INTO OUTFILE` file name")
        return self._append(f" INTO OUTFILE {file}")

    # --- INSERT / REPLACE / UPDATE / DELETE --------------------------------

    def insert(self, table: str) -> Database:
        table = validate_string(table, "`INSERT` table name")
        return self._append(f" INSERT INTO {table}")

    def replace(self, table: str) -> Database:
        table = validate_string(table, "`REPLACE INTO` table name")
        return self._append(f" REPLACE INTO {table}")

    def columns(self, *columns: str) -> Database:
        cols = _join(columns, "Column statement")
        return self._append(f" ({cols})")

    def values(self, *values: Any) -> Database:
        """``VALUES (..)``.

        Items are written as-is (``None`` becomes ``NULL``), so pass
        placeholders and :meth:`bind` the data.
        """
        rendered = ",".join(_literal(v) for v in values)
        return self._append(f" VALUES ({rendered})")

    def on_duplicate_key_update(self, params: str) -> Database:
        params = validate_string(params, "`ON DUPLICATE KEY UPDATE` parameters")
        return self._append(f" ON DUPLICATE KEY UPDATE {params}")

    def update(self, table: str) -> Database:
        table = validate_string(table, "`UPDATE` table name")
        return self._append(f" UPDATE {table}")

    def set(self, *assignments: str) -> Database:
        cols = _join(assignments, "`SET` columns")
        return self._append(f" SET {cols}")

    def delete(self, table: str) -> Database:
        table = validate_string(table, "`DELETE FROM` table name")
        return self._append(f" DELETE FROM {table}")

    # --- LOAD DATA INFILE (MySQL) -------------------------------------------

    def load_data_infile(self, file: str) -> Database:
        file = validate_string(file, "`LOAD DATA INFILE` file name")
        return self._append(f" LOAD DATA INFILE {file}")

    def character_set(self, character_set: str) -> Database:
        character_set = validate_string(character_set, "Character set")
        return self._append(f" CHARACTER SET {character_set}")

    def fields_terminated_by(self, terminator: str) -> Database:
        terminator = validate_string(terminator, "`FIELDS TERMINATED BY` string")
        return self._append(f" FIELDS TERMINATED BY {terminator}")

    def lines_terminated_by(self, terminator: str) -> Database:
        terminator = validate_string(terminator, "`LINES TERMINATED BY` string")
        return self._append(f" LINES TERMINATED BY {terminator}")

    def enclosed_by(self, enclosure: str, optionally: bool = False) -> Database:
        enclosure = validate_string(enclosure, "`ENCLOSED BY` string")
        prefix = " OPTIONALLY" if optionally else ""
        return self._append(f"{prefix} ENCLOSED BY {enclosure}")

    def escaped_by(self, escape: str) -> Database:
        escape = validate_string(escape, "`ESCAPED BY` string")
        return self._append(f" ESCAPED BY {escape}")

    def starting_by(self, prefix: str) -> Database:
        prefix = validate_string(prefix, "`STARTING BY` string")
        return self._append(f" STARTING BY {prefix}")

    def ignore(self, lines: int) -> Database:
        """Skip the first *lines* lines of the file (e.g. a CSV header)."""
        lines = validate_integer(lines, "`IGNORE LINES` count")
        return self._append(f" IGNORE {lines} LINES")

    # --- Running statements ------------------------------------------------

    def _take(self) -> tuple[str, Params | None]:
        """Detach the buffer and bound parameters, leaving both empty."""
        sql, params = self.sql, self._params
        self.reset()
        return sql, params

    def _run(self, sql: str, params: Params | None) -> Any:
        conn = self.connection
        if not sql:
            raise EmptyStatementError("No statement to execute.")
        return execute(conn, sql, params)

    def execute(self) -> int:
        """Run the statement and return the number of affected rows."""
        cur = self._run(*self._take())
        self.row_count = cur.rowcount
        self.last_row_id = getattr(cur, "lastrowid", None)
        cur.close()
        return self.row_count

    def query(self, query: str, params: Params | None = None) -> int:
        """Run a complete SQL statement, replacing anything in the buffer."""
        self.reset()
        query = validate_string(query, "Query statement")
        self._fragments.append(query)
        if params is not None:
            self.bind(params)
        return self.execute()

    def fetch(self, mode: FetchMode | str = FetchMode.ASSOC) -> Any:
        """Run the statement and return the first row, or ``None``."""
        sql, params = self._take()
        mode = coerce_mode(mode)
        cur = self._run(sql, params)
        row = cur.fetchone()
        self.result = shape_row(row, column_names(cur.description), mode)
        cur.close()
        return self.result

    def fetch_all(self, mode: FetchMode | str = FetchMode.ASSOC) -> list[Any]:
        """Run the statement and return every row."""
        sql, params = self._take()
        mode = coerce_mode(mode)
        cur = self._run(sql, params)
        columns = column_names(cur.description)
        self.result = [shape_row(row, columns, mode) for row in cur.fetchall()]
        cur.close()
        return self.result

    def truncate(self, table: str) -> int:
        """Empty *table* immediately.

        SQLite has no ``TRUNCATE``; there it runs ``DELETE FROM``.
        """
        self.reset()
        table = validate_string(table, "`TRUNCATE` table name")
        if self._config.driver == "sqlite":
            return self.query(f"DELETE FROM {table}")
        return self.query(f"TRUNCATE TABLE {table}")

    # --- Transactions ------------------------------------------------------

    def begin(self) -> Database:
        begin(self.connection)
        return self

    def commit(self) -> Database:
        commit(self.connection)
        return self

    def rollback(self) -> Database:
        rollback(self.connection)
        return self

    @contextmanager
    def transaction(self) -> Generator[Database, None, None]:
        """Commit on success, roll back on exception."""
        with transaction(self.connection):
            yield self

    # --- Maintenance -------------------------------------------------------

    def backup(self, file: str | Path) -> Path:
        """Back up the database to *file* (online copy or dump tool)."""
        if not isinstance(file, Path):
            validate_string(file, "Backup file name")
        return _backup.backup(self._config, file, conn=self._conn)

    def mysqldump(self, file: str | Path) -> Path:
        if not isinstance(file, Path):
            validate_string(file, "`mysqldump` file name")
        return _backup.mysqldump(self._config, file)

    def sql_ref(self) -> str:
        """Example queries for the configured driver."""
        return render_sql_reference(self._config.driver)
