"""Module for mapping raw SQL types onto the column type vocabulary."""

import re
from typing import Any

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Double,
    Float,
    Integer,
    NullType,
    Numeric,
    String,
    Text,
    TypeEngine,
    Uuid,
)

from schema.types import COLUMN_TYPES, ColumnType

# Checked in order; the first matching prefix wins, regardless of length
TYPE_PREFIXES: tuple[tuple[tuple[str, ...], ColumnType], ...] = (
    (("character varying", "varchar", "char"), "varchar"),
    (("uuid",), "uuid"),
    (("serial", "bigserial", "smallserial"), "serial"),
    (("int", "integer", "bigint", "smallint"), "integer"),
    (("text",), "text"),
    (("bool",), "boolean"),
    (("timestamp",), "timestamp"),
    (("date",), "date"),
    (("jsonb",), "jsonb"),
    (("json",), "json"),
    (("real", "float4"), "real"),
    (("double precision", "float8", "decimal", "numeric"), "double precision"),
)

DEFAULT_TYPE: ColumnType = "text"

WHITESPACE = re.compile(r"\s+")


def normalize_column_type(raw_type: str) -> ColumnType:
    """Map a raw SQL type string onto the closest vocabulary member.

    Examples:
        VARCHAR(255) -> varchar
        BIGINT -> integer
        NUMERIC(10,2) -> double precision
        MONEY -> text

    """
    normalized = WHITESPACE.sub(" ", raw_type.strip().lower())

    if normalized in COLUMN_TYPES:
        return normalized  # pyright: ignore[reportReturnType]

    for prefixes, column_type in TYPE_PREFIXES:
        if normalized.startswith(prefixes):
            return column_type

    return DEFAULT_TYPE


def sql_to_column_type(sql_type: TypeEngine[Any]) -> ColumnType:
    """Map a reflected SQLAlchemy type onto the vocabulary.

    Types without a structural match fall back to their compiled name,
    which is run through the textual normalizer.
    """
    column_type: ColumnType

    match sql_type:
        case NullType():
            column_type = DEFAULT_TYPE
        case Boolean():
            column_type = "boolean"
        case Integer():
            column_type = "integer"
        case Uuid():
            column_type = "uuid"
        case JSONB():
            column_type = "jsonb"
        case JSON():
            column_type = "json"
        case Text():
            column_type = "text"
        case String():
            column_type = "varchar"
        case DateTime():
            column_type = "timestamp"
        case Date():
            column_type = "date"
        case Double():
            column_type = "double precision"
        case Float():
            column_type = "real"
        case Numeric():
            column_type = "double precision"
        case _:
            column_type = normalize_column_type(str(sql_type))

    return column_type


def column_type_to_ddl(column_type: ColumnType) -> str:
    """Render a vocabulary member as a DDL type token."""
    return column_type.upper()
