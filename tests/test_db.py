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

"""Tests for fluentdb.db — connection, operations, and transactions."""

from __future__ import annotations

import logging
import sys
from unittest.mock import MagicMock, patch

import pytest

from fluentdb.db import (
    connect_mysql,
    connect_sqlite,
    create_tables,
    dialect_of,
    execute,
    executemany,
    fetch_all,
    fetch_one,
    fetch_scalar,
    placeholder_for,
    table_exists,
    transaction,
)


def _mem_conn():
    return connect_sqlite(":memory:")


class TestConnection:
    def test_sqlite_memory(self):
        conn = _mem_conn()
        assert conn is not None
        assert conn.isolation_level is None
        conn.close()

    def test_sqlite_file_creates_parent_dir(self, tmp_path):
        path = tmp_path / "nested" / "data.db"
        conn = connect_sqlite(path)
        assert path.parent.is_dir()
        assert fetch_scalar(conn, "PRAGMA journal_mode") == "wal"
        conn.close()

    def test_dialect_and_placeholder(self):
        conn = _mem_conn()
        assert dialect_of(conn) == "sqlite"
        assert placeholder_for(conn) == "?"

    def test_mysql_connect_params(self):
        fake = MagicMock()
        with patch.dict(sys.modules, {"mysql": fake, "mysql.connector": fake.connector}):
            connect_mysql(host="db", port=3307, database="inv", user="app", password="pw")

        fake.connector.connect.assert_called_once_with(
            database="inv",
            autocommit=True,
            buffered=True,
            host="db",
            port=3307,
            user="app",
            password="pw",
            charset="utf8",
        )

    def test_mysql_unix_socket_replaces_host(self):
        fake = MagicMock()
        with patch.dict(sys.modules, {"mysql": fake, "mysql.connector": fake.connector}):
            connect_mysql(database="inv", unix_socket="/run/mysqld.sock")

        kwargs = fake.connector.connect.call_args.kwargs
        assert kwargs["unix_socket"] == "/run/mysqld.sock"
        assert "host" not in kwargs

    def test_mysql_missing_driver(self):
        with patch.dict(sys.modules, {"mysql": None, "mysql.connector": None}):
            with pytest.raises(ImportError, match="fluentdb\\[mysql\\]"):
                connect_mysql(database="inv")


class TestOperations:
    def test_create_and_query(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE IF NOT EXISTS t (id INTEGER PRIMARY KEY, name TEXT);")
        assert table_exists(conn, "t")
        assert not table_exists(conn, "nonexistent")

    def test_execute_insert_and_fetch(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT);")

        cur = execute(conn, "INSERT INTO t (val) VALUES (?)", ("hello",))
        assert cur.lastrowid == 1

        row = fetch_one(conn, "SELECT val FROM t WHERE id=?", (1,))
        assert row["val"] == "hello"

        rows = fetch_all(conn, "SELECT * FROM t")
        assert len(rows) == 1

    def test_named_params(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT);")
        execute(conn, "INSERT INTO t (val) VALUES (:val)", {"val": "named"})
        assert fetch_scalar(conn, "SELECT val FROM t WHERE id = :id", {"id": 1}) == "named"

    def test_fetch_scalar(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, n INTEGER);")
        execute(conn, "INSERT INTO t (n) VALUES (?)", (42,))

        val = fetch_scalar(conn, "SELECT n FROM t WHERE id=1")
        assert val == 42

    def test_execute_without_params(self):
        cur = MagicMock()
        conn = MagicMock()
        conn.cursor.return_value = cur
        assert execute(conn, "SELECT '5%'", None) is cur
        cur.execute.assert_called_once_with("SELECT '5%'")

    def test_fetch_scalar_dict_rows(self):
        cur = MagicMock()
        cur.fetchone.return_value = {"n": 7}
        conn = MagicMock()
        conn.cursor.return_value = cur
        assert fetch_scalar(conn, "SELECT n FROM t") == 7

    def test_fetch_one_returns_none(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY);")
        assert fetch_one(conn, "SELECT * FROM t WHERE id=999") is None
        assert fetch_scalar(conn, "SELECT * FROM t WHERE id=999") is None

    def test_executemany(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT);")
        count = executemany(conn, "INSERT INTO t (v) VALUES (?)", [("a",), ("b",), ("c",)])
        assert count == 3
        rows = fetch_all(conn, "SELECT v FROM t ORDER BY v")
        assert [r["v"] for r in rows] == ["a", "b", "c"]

    def test_create_tables_splits_statements_for_servers(self):
        cur = MagicMock()
        conn = MagicMock()
        conn.cursor.return_value = cur
        create_tables(conn, "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\n")
        assert cur.execute.call_count == 2


class TestTransaction:
    def test_commit_on_success(self):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT);")

        with transaction(conn):
            execute(conn, "INSERT INTO t (v) VALUES (?)", ("committed",))

        assert not conn.in_transaction
        assert fetch_scalar(conn, "SELECT v FROM t") == "committed"

    def test_rollback_on_error(self, caplog):
        conn = _mem_conn()
        create_tables(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT);")

        with caplog.at_level(logging.WARNING, logger="fluentdb.db.transactions"):
            with pytest.raises(RuntimeError):
                with transaction(conn):
                    execute(conn, "INSERT INTO t (v) VALUES (?)", ("rollback",))
                    raise RuntimeError("boom")

        assert fetch_one(conn, "SELECT * FROM t") is None
        assert "Rolling back" in caplog.text

    def test_mysql_uses_start_transaction(self):
        cur = MagicMock()
        conn = MagicMock()
        conn.cursor.return_value = cur
        with patch("fluentdb.db.transactions.dialect_of", return_value="mysql"):
            with transaction(conn):
                pass
        statements = [c.args[0] for c in cur.execute.call_args_list]
        assert statements == ["START TRANSACTION", "COMMIT"]
