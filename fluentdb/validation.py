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

"""Argument type checks shared by the builder and the config layer."""

from __future__ import annotations

from typing import Any

from fluentdb.errors import ValidationError


def validate_string(value: Any, label: str, allow_none: bool = False) -> str | None:
    """Return *value* if it is a string.

    With *allow_none*, any non-string collapses to ``None`` instead of
    raising.

    Raises:
        ValidationError: ``"<label> must be a string."``
    """
    if isinstance(value, str):
        return value
    if allow_none:
        return None
    raise ValidationError(f"{label} must be a string.")


def validate_integer(value: Any, label: str, allow_none: bool = False) -> int | None:
    """Return *value* if it is an integer (``bool`` is not accepted)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if allow_none:
        return None
    raise ValidationError(f"{label} must be an integer.")
