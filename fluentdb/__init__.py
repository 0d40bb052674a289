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

"""fluentdb — chain SQL clauses, then run them on a DB-API connection.

Usage::

    from fluentdb import Database

    db = (
        Database()
        .driver("mysql")
        .host("db.internal")
        .db_name("inventory")
        .username("app")
        .password("secret")
        .connect()
    )
    row = db.select("id", "name").from_("items").where("sku = %s").bind("A-1").fetch()
"""

from fluentdb.config import SUPPORTED_DRIVERS, ConnectionConfig
from fluentdb.errors import (
    BackupError,
    ConfigurationError,
    EmptyStatementError,
    FluentDBError,
    NotConnectedError,
    ValidationError,
)
from fluentdb.fetch import FetchMode
from fluentdb.query import Database
from fluentdb.reference import render_sql_reference

__all__ = [
    "Database",
    "ConnectionConfig",
    "FetchMode",
    "SUPPORTED_DRIVERS",
    "render_sql_reference",
    "FluentDBError",
    "ConfigurationError",
    "ValidationError",
    "NotConnectedError",
    "EmptyStatementError",
    "BackupError",
]
