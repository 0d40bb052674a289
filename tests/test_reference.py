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

"""Tests for fluentdb.reference."""

from __future__ import annotations

import pytest

from fluentdb import ConfigurationError, render_sql_reference


def test_mysql_reference():
    text = render_sql_reference("mysql")
    assert text.startswith("SELECT:\n")
    assert "SELECT `column1`, `column2` FROM `table`" in text
    assert "ON DUPLICATE KEY UPDATE `column1` = 'value'" in text
    assert "LEFT JOIN `table2`" in text


def test_pgsql_reference_omits_mysql_clauses():
    text = render_sql_reference("pgsql")
    assert 'UPDATE "table" SET "column1"' in text
    assert "ON DUPLICATE KEY" not in text
    assert "`" not in text


def test_pgsql_reference_shows_upsert_instead_of_replace():
    text = render_sql_reference("pgsql")
    assert "REPLACE INTO" not in text
    assert (
        'INSERT INTO "table" ("column1", "column2") VALUES (\'value1\', \'value2\')'
        ' ON CONFLICT ("column1") DO UPDATE SET "column2" = EXCLUDED."column2"'
    ) in text
    assert "\n\nDELETE:\n" in text


@pytest.mark.parametrize("driver", ["mysql", "sqlite"])
def test_replace_shown_where_supported(driver):
    text = render_sql_reference(driver)
    assert "REPLACE:\nREPLACE INTO " in text
    assert "ON CONFLICT" not in text
    assert "\n\nDELETE:\n" in text


def test_every_section_present():
    text = render_sql_reference()
    for section in ("SELECT:", "INSERT:", "REPLACE:", "DELETE:", "UPDATE:", "LEFT JOIN:"):
        assert section in text


def test_unknown_driver():
    with pytest.raises(ConfigurationError):
        render_sql_reference("oracle")
