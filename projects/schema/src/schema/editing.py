"""Pure editing operations over schema values.

Every function returns a new ``DatabaseSchema`` and leaves its argument
untouched. Operations addressing an unknown id return an equivalent schema.
"""

from logging import getLogger
from typing import Literal

from schema.builders import build_relation
from schema.layout import merge_offset, shift_tables
from schema.types import (
    ColumnSchema,
    DatabaseSchema,
    RelationSchema,
    RelationType,
    TableSchema,
)

type ImportMode = Literal["replace", "merge"]

logger = getLogger(__name__)


def find_table(schema: DatabaseSchema, table_id: str) -> TableSchema | None:
    """Look up a table by id."""
    return next((t for t in schema["tables"] if t["id"] == table_id), None)


def find_column(table: TableSchema, column_id: str) -> ColumnSchema | None:
    """Look up a column of a table by id."""
    return next((c for c in table["columns"] if c["id"] == column_id), None)


def add_table(schema: DatabaseSchema, table: TableSchema) -> DatabaseSchema:
    """Append a table."""
    return {**schema, "tables": [*schema["tables"], table]}


def update_table(schema: DatabaseSchema, table: TableSchema) -> DatabaseSchema:
    """Replace the table sharing the id of ``table``.

    Relations attached to columns the new table no longer has are removed.
    """
    column_ids = {column["id"] for column in table["columns"]}
    return {
        "tables": [table if t["id"] == table["id"] else t for t in schema["tables"]],
        "relations": [
            r
            for r in schema["relations"]
            if (r["fromTableId"] != table["id"] or r["fromColumnId"] in column_ids)
            and (r["toTableId"] != table["id"] or r["toColumnId"] in column_ids)
        ],
    }


def delete_table(schema: DatabaseSchema, table_id: str) -> DatabaseSchema:
    """Remove a table together with every relation touching it."""
    return {
        "tables": [t for t in schema["tables"] if t["id"] != table_id],
        "relations": [
            r
            for r in schema["relations"]
            if table_id not in (r["fromTableId"], r["toTableId"])
        ],
    }


def add_relation(  # noqa: PLR0913
    schema: DatabaseSchema,
    from_table_id: str,
    from_column_id: str,
    to_table_id: str,
    to_column_id: str,
    relation_type: RelationType = "1:N",
) -> DatabaseSchema:
    """Connect two columns, ignoring self-connections and missing endpoints."""
    if from_table_id == to_table_id and from_column_id == to_column_id:
        return schema

    from_table = find_table(schema, from_table_id)
    to_table = find_table(schema, to_table_id)
    if from_table is None or to_table is None:
        logger.debug("Relation references an unknown table, skipping")
        return schema

    from_column = find_column(from_table, from_column_id)
    to_column = find_column(to_table, to_column_id)
    if from_column is None or to_column is None:
        logger.debug("Relation references an unknown column, skipping")
        return schema

    relation = build_relation(
        from_table,
        from_column,
        to_table,
        to_column,
        relation_type,
    )
    return {**schema, "relations": [*schema["relations"], relation]}


def delete_relation(schema: DatabaseSchema, relation_id: str) -> DatabaseSchema:
    """Remove a relation."""
    return {
        **schema,
        "relations": [r for r in schema["relations"] if r["id"] != relation_id],
    }


def _swapped(relation: RelationSchema) -> RelationSchema:
    return {
        **relation,
        "fromTableId": relation["toTableId"],
        "fromColumnId": relation["toColumnId"],
        "toTableId": relation["fromTableId"],
        "toColumnId": relation["fromColumnId"],
    }


def swap_relation(schema: DatabaseSchema, relation_id: str) -> DatabaseSchema:
    """Reverse the direction of a relation."""
    return {
        **schema,
        "relations": [
            _swapped(r) if r["id"] == relation_id else r for r in schema["relations"]
        ],
    }


def update_relation_type(
    schema: DatabaseSchema,
    relation_id: str,
    relation_type: RelationType,
) -> DatabaseSchema:
    """Change the cardinality hint of a relation."""
    return {
        **schema,
        "relations": [
            {**r, "type": relation_type} if r["id"] == relation_id else r
            for r in schema["relations"]
        ],
    }


def reorder_columns(
    schema: DatabaseSchema,
    table_id: str,
    start_index: int,
    end_index: int,
) -> DatabaseSchema:
    """Move the column at ``start_index`` to ``end_index`` within a table."""
    table = find_table(schema, table_id)
    if table is None:
        return schema

    columns = list(table["columns"])
    if not (0 <= start_index < len(columns) and 0 <= end_index < len(columns)):
        return schema

    columns.insert(end_index, columns.pop(start_index))
    return update_table(schema, {**table, "columns": columns})


def import_schema(
    current: DatabaseSchema,
    imported: DatabaseSchema,
    mode: ImportMode = "replace",
) -> DatabaseSchema:
    """Combine an imported schema with the current one.

    ``replace`` discards the current schema. ``merge`` appends the imported
    tables to the right of the existing layout and unions the relations.
    """
    if mode == "replace":
        return imported

    dx = merge_offset(current["tables"], imported["tables"])
    return {
        "tables": [*current["tables"], *shift_tables(imported["tables"], dx)],
        "relations": [*current["relations"], *imported["relations"]],
    }
