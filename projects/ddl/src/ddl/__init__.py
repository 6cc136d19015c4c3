"""SQL DDL import and export for DDL Toolkit."""

from ddl.generator import generate_postgresql
from ddl.importer import parse_sql_to_schema
from ddl.reflection import read_only_sqlite, sqlite_to_schema

__all__ = [
    "generate_postgresql",
    "parse_sql_to_schema",
    "read_only_sqlite",
    "sqlite_to_schema",
]
