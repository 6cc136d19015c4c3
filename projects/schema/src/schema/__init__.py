"""Schema model and editing operations for DDL Toolkit."""

from schema.builders import build_column, build_relation, build_table, empty_schema
from schema.editing import (
    add_relation,
    add_table,
    delete_relation,
    delete_table,
    import_schema,
    reorder_columns,
    swap_relation,
    update_relation_type,
    update_table,
)
from schema.serialization import schema_from_json, schema_to_json
from schema.types import (
    COLUMN_TYPES,
    ColumnSchema,
    ColumnType,
    DatabaseSchema,
    RelationSchema,
    RelationType,
    TableSchema,
)

__all__ = [
    "COLUMN_TYPES",
    "ColumnSchema",
    "ColumnType",
    "DatabaseSchema",
    "RelationSchema",
    "RelationType",
    "TableSchema",
    "add_relation",
    "add_table",
    "build_column",
    "build_relation",
    "build_table",
    "delete_relation",
    "delete_table",
    "empty_schema",
    "import_schema",
    "reorder_columns",
    "schema_from_json",
    "schema_to_json",
    "swap_relation",
    "update_relation_type",
    "update_table",
]
