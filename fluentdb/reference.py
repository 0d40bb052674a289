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

"""Example-query cheat sheet, rendered from a packaged Jinja2 template.

Identifiers are quoted for the target driver: backticks for MySQL,
double quotes for SQLite and PostgreSQL.  MySQL-only clauses are left
out for the other drivers.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from fluentdb.config import DEFAULT_DRIVER, validate_driver

TEMPLATE_DIR = Path(__file__).parent / "templates"
REFERENCE_TEMPLATE = "sql_reference.txt"

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    keep_trailing_newline=True,
    autoescape=False,  # SQL text, not HTML
)


def identifier_quote(driver: str) -> str:
    """Return the identifier quote character for *driver*."""
    return "`" if driver == "mysql" else '"'


def render_sql_reference(driver: str = DEFAULT_DRIVER) -> str:
    """Return example SELECT/INSERT/REPLACE (or upsert)/DELETE/UPDATE/JOIN queries."""
    driver = validate_driver(driver)
    tmpl = _env.get_template(REFERENCE_TEMPLATE)
    return tmpl.render(driver=driver, quote=identifier_quote(driver))
