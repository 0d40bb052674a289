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

"""Connection settings and DSN construction.

A :class:`ConnectionConfig` can be filled in field by field (the fluent
setters on :class:`fluentdb.Database` do this) or resolved from the
environment::

    export FLUENTDB_DRIVER=mysql
    export FLUENTDB_DB_NAME=inventory
    export FLUENTDB_USERNAME=app
    export FLUENTDB_PASSWORD=secret

    config = ConnectionConfig.from_env()
    config.dsn  # 'mysql:host=localhost;dbname=inventory;charset=utf8'
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fluentdb.errors import ConfigurationError

SUPPORTED_DRIVERS = ("mysql", "sqlite", "pgsql")

DEFAULT_DRIVER = "mysql"
DEFAULT_HOST = "localhost"
DEFAULT_CHARSET = "utf8"
MEMORY_PATH = ":memory:"

ENV_PREFIX = "FLUENTDB_"


def validate_driver(driver: Any) -> str:
    """Return *driver* if it names a supported driver."""
    if driver in SUPPORTED_DRIVERS:
        return driver
    supported = ", ".join(f"`{d}`" for d in SUPPORTED_DRIVERS)
    raise ConfigurationError(f"Unsupported driver {driver!r}. Valid options: {supported}")


def validate_port(port: Any) -> int | None:
    """Return *port* if it is ``None`` or an integer in 0..65535."""
    if port is None:
        return None
    if isinstance(port, int) and not isinstance(port, bool) and 0 <= port <= 65535:
        return port
    raise ConfigurationError(
        "Invalid port number. Must be `None` or an integer ranging between 0 and 65535 inclusive."
    )


def validate_db_path(path: str | Path, *, create: bool = False) -> str:
    """Return the SQLite database path as a string.

    The path must be ``":memory:"`` or an existing file.  With *create*,
    a file that does not exist yet is accepted as long as its parent
    directory does.
    """
    if path == MEMORY_PATH:
        return MEMORY_PATH
    resolved = Path(path).expanduser()
    if resolved.is_file() or (create and resolved.parent.is_dir()):
        return str(resolved)
    raise ConfigurationError(f"You have entered an invalid path (`{path}`) to the database file.")


@dataclass
class ConnectionConfig:
    """Everything needed to open a connection.

    Attributes:
        driver: One of ``"mysql"``, ``"sqlite"`` or ``"pgsql"``.
        host: Server host name (ignored for SQLite).
        port: Server port, or ``None`` for the driver default.
        db_name: Database (schema) name on the server.
        unix_socket: Path to a MySQL Unix socket; takes precedence over host/port.
        charset: Connection character set (MySQL only).
        db_path: SQLite database file or ``":memory:"``.
        username: Login name.
        password: Login password.  Excluded from ``repr()``.
        options: Extra keyword arguments passed to the driver's ``connect()``.
    """

    driver: str = DEFAULT_DRIVER
    host: str = DEFAULT_HOST
    port: int | None = None
    db_name: str | None = None
    unix_socket: str | None = None
    charset: str = DEFAULT_CHARSET
    db_path: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> ConnectionConfig:
        """Build a config from ``<prefix>*`` environment variables.

        Unset variables keep their defaults.  ``<prefix>PORT`` must parse
        as an integer.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(prefix + name)
            return value if value else None

        port_text = get("PORT")
        try:
            port = int(port_text) if port_text is not None else None
        except ValueError:
            raise ConfigurationError(f"{prefix}PORT must be an integer, got {port_text!r}")

        config = cls(
            driver=validate_driver(get("DRIVER") or DEFAULT_DRIVER),
            host=get("HOST") or DEFAULT_HOST,
            port=validate_port(port),
            db_name=get("DB_NAME"),
            unix_socket=get("UNIX_SOCKET"),
            charset=get("CHARSET") or DEFAULT_CHARSET,
            db_path=get("DB_PATH"),
            username=get("USERNAME"),
            password=get("PASSWORD"),
        )
        return config

    def validate(self) -> None:
        """Check that the config is complete for its driver."""
        validate_driver(self.driver)
        validate_port(self.port)
        if self.driver == "sqlite":
            if not self.db_path:
                raise ConfigurationError("SQLite connections require a database path.")
        elif not self.db_name:
            raise ConfigurationError(f"{self.driver} connections require a database name.")

    @property
    def dsn(self) -> str:
        """PDO-style data source name for this config."""
        if self.driver == "sqlite":
            return f"sqlite:{self.db_path}"

        parts: list[str] = []
        if self.driver == "mysql" and self.unix_socket:
            parts.append(f"unix_socket={self.unix_socket}")
        else:
            parts.append(f"host={self.host}")
            if self.port is not None:
                parts.append(f"port={self.port}")
        parts.append(f"dbname={self.db_name}")
        if self.driver == "mysql" and self.charset:
            parts.append(f"charset={self.charset}")
        return f"{self.driver}:" + ";".join(parts)
