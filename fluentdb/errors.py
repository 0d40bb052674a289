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

"""Exception hierarchy.

Errors raised by the driver itself (``sqlite3.Error``, ``psycopg2.Error``,
``mysql.connector.Error``) are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class FluentDBError(RuntimeError):
    """Base class for all errors raised by fluentdb."""


class ConfigurationError(FluentDBError):
    """Invalid or incomplete connection settings."""


class ValidationError(FluentDBError, TypeError):
    """A clause argument has the wrong type."""


class NotConnectedError(FluentDBError):
    """A statement was run before ``connect()``."""


class EmptyStatementError(FluentDBError):
    """A statement was run with nothing in the buffer."""


class BackupError(FluentDBError):
    """An external dump tool is missing or exited with an error."""
