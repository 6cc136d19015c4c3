"""TypedDict schemas for the table/column/relation model."""

from __future__ import annotations

from typing import Literal, TypedDict, get_args

# Closed vocabulary shared by the importer and the generator
type ColumnType = Literal[
    "uuid",
    "integer",
    "serial",
    "text",
    "varchar",
    "boolean",
    "timestamp",
    "date",
    "json",
    "jsonb",
    "real",
    "double precision",
]

type RelationType = Literal["1:1", "1:N"]

COLUMN_TYPES: tuple[ColumnType, ...] = get_args(ColumnType.__value__)
RELATION_TYPES: tuple[RelationType, ...] = get_args(RelationType.__value__)


class Position(TypedDict):
    """Canvas coordinates of a table, layout only."""

    x: float
    y: float


class ColumnSchema(TypedDict):
    """Schema for a table column."""

    id: str
    name: str
    type: ColumnType
    isPrimaryKey: bool  # noqa: N815
    isNotNull: bool  # noqa: N815
    isUnique: bool  # noqa: N815


class TableSchema(TypedDict):
    """Schema for a table with its ordered columns."""

    id: str
    name: str
    columns: list[ColumnSchema]
    position: Position


class RelationSchema(TypedDict):
    """Directed edge from a referencing column to a referenced column."""

    id: str
    fromTableId: str  # noqa: N815
    fromColumnId: str  # noqa: N815
    toTableId: str  # noqa: N815
    toColumnId: str  # noqa: N815
    type: RelationType


class DatabaseSchema(TypedDict):
    """Root schema: the unit of import, export and persistence."""

    tables: list[TableSchema]
    relations: list[RelationSchema]
