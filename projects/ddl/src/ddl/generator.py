"""PostgreSQL DDL generation working directly from schema definitions."""

from collections import Counter
from hashlib import sha256
from logging import getLogger

from schema.type_conversion import column_type_to_ddl
from schema.types import ColumnSchema, DatabaseSchema, RelationSchema, TableSchema

logger = getLogger(__name__)

INDENT = "  "

# PostgreSQL truncates longer identifiers
MAX_IDENTIFIER_BYTES = 63
HASH_LENGTH = 8


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def constraint_name(
    from_table: str,
    from_column: str,
    to_table: str,
    to_column: str,
) -> str:
    """Deterministic foreign key constraint name."""
    return f"fk_{from_table}_{from_column}_{to_table}_{to_column}"


def fit_identifier(name: str) -> str:
    """Shorten an over-long identifier, keeping it unique by a hash suffix."""
    encoded = name.encode()
    if len(encoded) <= MAX_IDENTIFIER_BYTES:
        return name

    digest = sha256(encoded).hexdigest()[:HASH_LENGTH]
    keep = MAX_IDENTIFIER_BYTES - HASH_LENGTH - 1
    prefix = encoded[:keep].decode(errors="ignore")
    return f"{prefix}_{digest}"


def generate_column_definition(column: ColumnSchema) -> str:
    """Render a column line; primary keys go to the table-level clause."""
    parts = [quote_identifier(column["name"]), column_type_to_ddl(column["type"])]
    if column["isNotNull"]:
        parts.append("NOT NULL")
    if column["isUnique"] and not column["isPrimaryKey"]:
        parts.append("UNIQUE")
    return INDENT + " ".join(parts)


def generate_table_definition(table: TableSchema) -> str:
    """Render a CREATE TABLE statement."""
    lines = [generate_column_definition(column) for column in table["columns"]]

    if primary_keys := [c["name"] for c in table["columns"] if c["isPrimaryKey"]]:
        key_list = ", ".join(quote_identifier(name) for name in primary_keys)
        lines.append(f"{INDENT}PRIMARY KEY ({key_list})")

    name = quote_identifier(table["name"])
    if not lines:
        return f"CREATE TABLE {name} ();"

    body = ",\n".join(lines)
    return f"CREATE TABLE {name} (\n{body}\n);"


type Endpoints = tuple[TableSchema, ColumnSchema, TableSchema, ColumnSchema]


def resolve_relation(
    relation: RelationSchema,
    tables_by_id: dict[str, TableSchema],
) -> Endpoints | None:
    """Find the tables and columns a relation points at."""
    from_table = tables_by_id.get(relation["fromTableId"])
    to_table = tables_by_id.get(relation["toTableId"])
    if from_table is None or to_table is None:
        return None

    from_column = next(
        (c for c in from_table["columns"] if c["id"] == relation["fromColumnId"]),
        None,
    )
    to_column = next(
        (c for c in to_table["columns"] if c["id"] == relation["toColumnId"]),
        None,
    )
    if from_column is None or to_column is None:
        return None

    return from_table, from_column, to_table, to_column


def generate_foreign_key(endpoints: Endpoints, name: str) -> str:
    """Render an ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY statement."""
    from_table, from_column, to_table, to_column = endpoints
    return (
        f"ALTER TABLE {quote_identifier(from_table['name'])} "
        f"ADD CONSTRAINT {quote_identifier(name)} "
        f"FOREIGN KEY ({quote_identifier(from_column['name'])}) "
        f"REFERENCES {quote_identifier(to_table['name'])} "
        f"({quote_identifier(to_column['name'])});"
    )


def generate_foreign_keys(schema: DatabaseSchema) -> list[str]:
    """Render one statement per resolvable relation, in schema order."""
    tables_by_id = {table["id"]: table for table in schema["tables"]}
    used_names: Counter[str] = Counter()
    statements: list[str] = []

    for relation in schema["relations"]:
        endpoints = resolve_relation(relation, tables_by_id)
        if endpoints is None:
            logger.debug("Skipping relation %s with unknown endpoints", relation["id"])
            continue

        from_table, from_column, to_table, to_column = endpoints
        name = constraint_name(
            from_table["name"],
            from_column["name"],
            to_table["name"],
            to_column["name"],
        )
        used_names[name] += 1
        if used_names[name] > 1:
            name = f"{name}_{used_names[name]}"

        statements.append(generate_foreign_key(endpoints, fit_identifier(name)))

    return statements


def generate_postgresql(schema: DatabaseSchema) -> str:
    """Generate PostgreSQL DDL for a schema.

    Tables come first, in schema order, followed by one ALTER TABLE per
    relation. The relation type is not rendered; uniqueness comes solely
    from the column flags. An empty schema yields an empty string.
    """
    blocks = [generate_table_definition(table) for table in schema["tables"]]
    if foreign_keys := generate_foreign_keys(schema):
        blocks.append("\n".join(foreign_keys))

    return "\n\n".join(blocks) + "\n" if blocks else ""
