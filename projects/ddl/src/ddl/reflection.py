"""Schema import from a live SQLite database via SQLAlchemy reflection."""

from pathlib import Path
from typing import Any
from warnings import catch_warnings, filterwarnings

from sqlalchemy import Engine, MetaData, UniqueConstraint, create_engine
from sqlalchemy.exc import SAWarning
from sqlalchemy.schema import Column, ForeignKeyConstraint, Table

from ddl.relations import ForeignKeyRef, build_relations, foreign_key_ref
from schema.builders import build_column, build_table
from schema.layout import assign_grid_positions
from schema.type_conversion import sql_to_column_type
from schema.types import ColumnSchema, DatabaseSchema, TableSchema


def read_only_sqlite(sqlite_location: Path) -> Engine:
    """Create a read-only SQLAlchemy engine for SQLite database."""
    connection_string = f"sqlite:///{sqlite_location}?mode=ro"
    return create_engine(connection_string, connect_args={"uri": True})


def reflect_tables(sqlite_database: Engine) -> list[Table]:
    """Reflect tables, parents before children."""
    metadata = MetaData()
    metadata.reflect(bind=sqlite_database)
    with catch_warnings():
        filterwarnings("ignore", category=SAWarning)
        return metadata.sorted_tables


def _unique_column_names(table: Table) -> set[str]:
    """Columns covered by a unique constraint or unique index."""
    names: set[str] = set()
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            names.update(column.name for column in constraint.columns)
    for index in table.indexes:
        if index.unique:
            names.update(column.name for column in index.columns)
    return names


def _column_from_sqla(column: Column[Any], unique_columns: set[str]) -> ColumnSchema:
    """Derive ColumnSchema from SQLAlchemy Column object."""
    return build_column(
        column.name.lower(),
        sql_to_column_type(column.type),
        primary_key=column.primary_key,
        not_null=not column.nullable,
        unique=column.name in unique_columns,
    )


def _table_from_sqla(table: Table) -> TableSchema:
    """Derive TableSchema from SQLAlchemy Table object."""
    unique_columns = _unique_column_names(table)
    return build_table(
        table.name.lower(),
        [_column_from_sqla(column, unique_columns) for column in table.columns],
    )


def _foreign_key_from_sqla(constraint: ForeignKeyConstraint) -> ForeignKeyRef | None:
    """Derive a single-column reference from a foreign key constraint."""
    return foreign_key_ref(
        constraint.table.name.lower(),
        [name.lower() for name in constraint.column_keys],
        constraint.referred_table.name.lower(),
        [element.column.name.lower() for element in constraint.elements],
    )


def sqlite_to_schema(sqlite_database: Engine) -> DatabaseSchema:
    """Generate a schema from SQLite database using metadata reflection."""
    reflected = reflect_tables(sqlite_database)

    tables = assign_grid_positions([_table_from_sqla(table) for table in reflected])
    foreign_keys = [
        ref
        for table in reflected
        for constraint in table.foreign_key_constraints
        if (ref := _foreign_key_from_sqla(constraint))
    ]

    return {"tables": tables, "relations": build_relations(tables, foreign_keys)}
