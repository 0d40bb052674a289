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

"""Database backups.

SQLite databases are copied with the online backup API.  MySQL and
PostgreSQL are dumped by their command-line tools (``mysqldump`` /
``pg_dump``).  The tools are run without a shell, and passwords are
handed over through the child environment, never on the command line.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from fluentdb.config import ConnectionConfig
from fluentdb.errors import BackupError, ConfigurationError

logger = logging.getLogger(__name__)


def backup_sqlite(conn: sqlite3.Connection, file: str | Path) -> Path:
    """Copy a live SQLite database to *file*."""
    target = Path(file).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    dest = sqlite3.connect(str(target))
    try:
        conn.backup(dest)
    finally:
        dest.close()
    logger.info("SQLite backup written to %s", target)
    return target


def _run_dump(args: list[str], env_extra: dict[str, str], file: str | Path) -> Path:
    """Run a dump tool into *file*.

    Output goes to a temporary file beside the target, which replaces the
    target only when the tool succeeds.  An existing backup survives a
    failed run.
    """
    target = Path(file).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    env = {**os.environ, **env_extra}

    fd, partial_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".part"
    )
    partial = Path(partial_name)
    logger.debug("Running %s", " ".join(args))
    try:
        with os.fdopen(fd, "wb") as out:
            try:
                result = subprocess.run(
                    args, stdout=out, stderr=subprocess.PIPE, env=env, check=False
                )
            except FileNotFoundError:
                raise BackupError(f"`{args[0]}` was not found on PATH")

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise BackupError(f"`{args[0]}` exited with status {result.returncode}: {stderr}")
        os.replace(partial, target)
    finally:
        partial.unlink(missing_ok=True)

    logger.info("Database dump written to %s", target)
    return target


def mysqldump(config: ConnectionConfig, file: str | Path) -> Path:
    """Dump a MySQL database to *file* with ``mysqldump``."""
    if not config.db_name:
        raise ConfigurationError("mysqldump requires a database name.")
    args = ["mysqldump"]
    if config.username:
        args.append(f"--user={config.username}")
    if config.unix_socket:
        args.append(f"--socket={config.unix_socket}")
    else:
        args.append(f"--host={config.host}")
        if config.port is not None:
            args.append(f"--port={config.port}")
    if config.charset:
        args.append(f"--default-character-set={config.charset}")
    args.append(config.db_name)

    env = {"MYSQL_PWD": config.password} if config.password else {}
    return _run_dump(args, env, file)


def pg_dump(config: ConnectionConfig, file: str | Path) -> Path:
    """Dump a PostgreSQL database to *file* with ``pg_dump``."""
    if not config.db_name:
        raise ConfigurationError("pg_dump requires a database name.")
    args = ["pg_dump", f"--host={config.host}"]
    if config.port is not None:
        args.append(f"--port={config.port}")
    if config.username:
        args.append(f"--username={config.username}")
    args.append(config.db_name)

    env = {"PGPASSWORD": config.password} if config.password else {}
    return _run_dump(args, env, file)


def backup(config: ConnectionConfig, file: str | Path, conn: Any = None) -> Path:
    """Back up the database described by *config* to *file*.

    SQLite needs the open connection *conn*; the server drivers only
    need the config.
    """
    if config.driver == "sqlite":
        if conn is None:
            raise ConfigurationError("SQLite backups require an open connection.")
        return backup_sqlite(conn, file)
    if config.driver == "mysql":
        return mysqldump(config, file)
    return pg_dump(config, file)
