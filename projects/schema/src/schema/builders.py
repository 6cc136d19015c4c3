"""Constructors for schema records."""

from uuid import uuid4

from schema.types import (
    ColumnSchema,
    ColumnType,
    DatabaseSchema,
    Position,
    RelationSchema,
    RelationType,
    TableSchema,
)


def new_id() -> str:
    """Generate an opaque unique identifier."""
    return str(uuid4())


def empty_schema() -> DatabaseSchema:
    """Build a schema without tables or relations."""
    return {"tables": [], "relations": []}


def build_column(
    name: str,
    column_type: ColumnType,
    *,
    primary_key: bool = False,
    not_null: bool = False,
    unique: bool = False,
) -> ColumnSchema:
    """Build a column, a primary key always being NOT NULL and UNIQUE."""
    return {
        "id": new_id(),
        "name": name,
        "type": column_type,
        "isPrimaryKey": primary_key,
        "isNotNull": not_null or primary_key,
        "isUnique": unique or primary_key,
    }


def build_table(
    name: str,
    columns: list[ColumnSchema],
    position: Position | None = None,
) -> TableSchema:
    """Build a table from its ordered columns."""
    return {
        "id": new_id(),
        "name": name,
        "columns": columns,
        "position": position or {"x": 0, "y": 0},
    }


def build_relation(
    from_table: TableSchema,
    from_column: ColumnSchema,
    to_table: TableSchema,
    to_column: ColumnSchema,
    relation_type: RelationType = "1:N",
) -> RelationSchema:
    """Build a relation between two existing columns."""
    return {
        "id": new_id(),
        "fromTableId": from_table["id"],
        "fromColumnId": from_column["id"],
        "toTableId": to_table["id"],
        "toColumnId": to_column["id"],
        "type": relation_type,
    }
