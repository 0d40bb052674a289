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

"""Fetch modes — shape driver rows into the form the caller asked for.

Drivers disagree on row types: ``sqlite3.Row`` is a sequence with
``keys()``, mysql.connector returns tuples, and psycopg2's
``RealDictCursor`` returns dicts.  :func:`shape_row` normalises all three
using the column names from ``cursor.description``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from fluentdb.errors import ValidationError


class FetchMode(str, Enum):
    """How each fetched row is returned."""

    ASSOC = "assoc"
    """``{"column": value, ...}`` (default)."""
    NUM = "num"
    """``(value, ...)``."""
    COLUMN = "column"
    """The value of the first column only."""
    BOTH = "both"
    """A dict keyed by column name *and* by column index."""


def coerce_mode(mode: FetchMode | str) -> FetchMode:
    """Accept a :class:`FetchMode` or its name, case-insensitively."""
    if isinstance(mode, FetchMode):
        return mode
    if isinstance(mode, str):
        try:
            return FetchMode(mode.lower())
        except ValueError:
            pass
    valid = ", ".join(m.value for m in FetchMode)
    raise ValidationError(f"Unknown fetch mode {mode!r}. Valid options: {valid}")


def column_names(description: Sequence[Sequence[Any]] | None) -> list[str]:
    """Extract column names from a DB-API ``cursor.description``."""
    if not description:
        return []
    return [col[0] for col in description]


def shape_row(row: Any, columns: Sequence[str], mode: FetchMode) -> Any:
    """Convert one driver row to *mode*."""
    if row is None:
        return None
    values = list(row.values()) if isinstance(row, Mapping) else list(row)

    if mode is FetchMode.NUM:
        return tuple(values)
    if mode is FetchMode.COLUMN:
        return values[0] if values else None

    names = list(columns) or (list(row.keys()) if isinstance(row, Mapping) else [])
    assoc = dict(zip(names, values))
    if mode is FetchMode.BOTH:
        assoc.update(enumerate(values))
    return assoc
