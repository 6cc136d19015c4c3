"""Best-effort import of CREATE TABLE / ALTER TABLE DDL into a schema.

Parsing is regex and scanner based rather than grammar based. Every stage
returns None for input it does not understand, and the caller skips it;
nothing in this module raises for malformed SQL.
"""

import re
from logging import getLogger
from typing import NamedTuple

from ddl.identifiers import (
    IDENTIFIER,
    QUALIFIED_NAME,
    normalize_identifier,
    normalize_table_name,
    parse_column_list,
)
from ddl.relations import ForeignKeyRef, build_relations, foreign_key_ref
from ddl.scanner import find_closing_paren, split_top_level
from schema.builders import build_column, build_table, empty_schema
from schema.layout import assign_grid_positions
from schema.type_conversion import normalize_column_type
from schema.types import ColumnSchema, DatabaseSchema, TableSchema

logger = getLogger(__name__)

BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
LINE_COMMENT = re.compile(r"--.*$", re.MULTILINE)

CONSTRAINT_PREFIX = rf"(?:CONSTRAINT\s+{IDENTIFIER}\s+)?"
REFERENCES = rf"REFERENCES\s+({QUALIFIED_NAME})\s*\(([^)]+)\)"

CREATE_TABLE = re.compile(
    r"CREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:TEMP(?:ORARY)?\s+|UNLOGGED\s+)?TABLE\s+"
    rf"(?:IF\s+NOT\s+EXISTS\s+)?({QUALIFIED_NAME})\s*\(",
    re.IGNORECASE,
)
ALTER_TABLE_FOREIGN_KEY = re.compile(
    rf"ALTER\s+TABLE\s+(?:IF\s+EXISTS\s+)?(?:ONLY\s+)?({QUALIFIED_NAME})\s+"
    rf"(?:ADD\s+{CONSTRAINT_PREFIX})?"
    rf"FOREIGN\s+KEY\s*\(([^)]+)\)\s*{REFERENCES}",
    re.IGNORECASE,
)

TABLE_PRIMARY_KEY = re.compile(
    rf"^{CONSTRAINT_PREFIX}PRIMARY\s+KEY\s*\(([^)]+)\)",
    re.IGNORECASE,
)
TABLE_UNIQUE = re.compile(
    rf"^{CONSTRAINT_PREFIX}UNIQUE(?:\s+(?:KEY|INDEX)(?:\s+{IDENTIFIER})?)?\s*\(([^)]+)\)",
    re.IGNORECASE,
)
TABLE_FOREIGN_KEY = re.compile(
    rf"^{CONSTRAINT_PREFIX}FOREIGN\s+KEY\s*\(([^)]+)\)\s*{REFERENCES}",
    re.IGNORECASE,
)
# Table-level clauses carrying no column information
TABLE_OTHER_CLAUSE = re.compile(
    rf"^(?:{CONSTRAINT_PREFIX}CHECK\s*\(|{CONSTRAINT_PREFIX}EXCLUDE\s+USING\b"
    r"|(?:FULLTEXT|SPATIAL)\s+(?:KEY|INDEX)\b"
    rf"|(?:KEY|INDEX)(?:\s+{IDENTIFIER})?\s*\((?!\s*\d))",
    re.IGNORECASE,
)

COLUMN_DEFINITION = re.compile(
    r'^("[^"]+"|`[^`]+`|\[[^\]]+\]|[a-zA-Z_][\w$]*)\s+(.+)$',
    re.DOTALL,
)
TYPE_TERMINATOR = re.compile(
    r"\s+(?:PRIMARY\s+KEY|NOT\s+NULL|UNIQUE|DEFAULT|REFERENCES|CONSTRAINT|CHECK"
    r"|GENERATED|COLLATE)\b",
    re.IGNORECASE,
)
PRIMARY_KEY = re.compile(r"\bPRIMARY\s+KEY\b", re.IGNORECASE)
NOT_NULL = re.compile(r"\bNOT\s+NULL\b", re.IGNORECASE)
UNIQUE = re.compile(r"\bUNIQUE\b", re.IGNORECASE)
INLINE_REFERENCES = re.compile(rf"\b{REFERENCES}", re.IGNORECASE)


class ParsedTable(NamedTuple):
    """A parsed CREATE TABLE statement and the foreign keys it declares."""

    table: TableSchema
    foreign_keys: list[ForeignKeyRef]


def strip_sql_comments(sql: str) -> str:
    """Remove block and line comments."""
    return LINE_COMMENT.sub("", BLOCK_COMMENT.sub("", sql))


def split_statements(sql: str) -> list[str]:
    """Split on semicolons, dropping empty statements."""
    return [statement.strip() for statement in sql.split(";") if statement.strip()]


def parse_column_definition(definition: str) -> ColumnSchema | None:
    """Parse ``name type [constraints...]`` into a column."""
    match = COLUMN_DEFINITION.match(definition.strip())
    if not match:
        return None

    raw_name, remainder = match[1], match[2]
    terminator = TYPE_TERMINATOR.search(remainder)
    raw_type = remainder[: terminator.start()] if terminator else remainder

    return build_column(
        normalize_identifier(raw_name),
        normalize_column_type(raw_type),
        primary_key=bool(PRIMARY_KEY.search(remainder)),
        not_null=bool(NOT_NULL.search(remainder)),
        unique=bool(UNIQUE.search(remainder)),
    )


def _fold_table_constraints(
    columns: list[ColumnSchema],
    primary_keys: set[str],
    unique_keys: set[str],
) -> list[ColumnSchema]:
    """Apply table-level key constraints; flags are only ever raised."""
    folded: list[ColumnSchema] = []
    for column in columns:
        is_pk = column["isPrimaryKey"] or column["name"] in primary_keys
        folded.append(
            {
                **column,
                "isPrimaryKey": is_pk,
                "isNotNull": column["isNotNull"] or is_pk,
                "isUnique": column["isUnique"] or is_pk or column["name"] in unique_keys,
            },
        )
    return folded


def parse_create_table(statement: str) -> ParsedTable | None:  # noqa: C901
    """Parse a CREATE TABLE statement."""
    match = CREATE_TABLE.search(statement)
    if not match:
        return None

    open_index = match.end() - 1
    close_index = find_closing_paren(statement, open_index)
    if close_index is None:
        logger.debug("Unbalanced parentheses in CREATE TABLE %s", match[1])
        return None

    table_name = normalize_table_name(match[1])
    body = statement[open_index + 1 : close_index]

    columns: list[ColumnSchema] = []
    primary_keys: set[str] = set()
    unique_keys: set[str] = set()
    foreign_keys: list[ForeignKeyRef] = []

    for definition in split_top_level(body):
        if pk_match := TABLE_PRIMARY_KEY.match(definition):
            primary_keys.update(parse_column_list(pk_match[1]))
            continue

        if unique_match := TABLE_UNIQUE.match(definition):
            unique_keys.update(parse_column_list(unique_match[1]))
            continue

        if fk_match := TABLE_FOREIGN_KEY.match(definition):
            if ref := foreign_key_ref(
                table_name,
                parse_column_list(fk_match[1]),
                normalize_table_name(fk_match[2]),
                parse_column_list(fk_match[3]),
            ):
                foreign_keys.append(ref)
            continue

        if TABLE_OTHER_CLAUSE.match(definition):
            continue

        column = parse_column_definition(definition)
        if column is None:
            logger.debug("Skipping definition in %s: %s", table_name, definition)
            continue
        columns.append(column)

        if ref_match := INLINE_REFERENCES.search(definition):
            if ref := foreign_key_ref(
                table_name,
                [column["name"]],
                normalize_table_name(ref_match[1]),
                parse_column_list(ref_match[2]),
            ):
                foreign_keys.append(ref)

    return ParsedTable(
        build_table(
            table_name,
            _fold_table_constraints(columns, primary_keys, unique_keys),
        ),
        foreign_keys,
    )


def parse_alter_table_foreign_key(statement: str) -> ForeignKeyRef | None:
    """Parse an ``ALTER TABLE ... FOREIGN KEY ... REFERENCES`` statement."""
    match = ALTER_TABLE_FOREIGN_KEY.search(statement)
    if not match:
        return None

    return foreign_key_ref(
        normalize_table_name(match[1]),
        parse_column_list(match[2]),
        normalize_table_name(match[3]),
        parse_column_list(match[4]),
    )


def parse_sql_to_schema(sql_text: str) -> DatabaseSchema:
    """Recover tables, columns and relations from SQL DDL text.

    Statements that are neither CREATE TABLE nor ALTER TABLE foreign keys are
    ignored. The result is always a new schema, empty when nothing parses.
    """
    cleaned = strip_sql_comments(sql_text).strip()
    if not cleaned:
        return empty_schema()

    tables: list[TableSchema] = []
    foreign_keys: list[ForeignKeyRef] = []

    for statement in split_statements(cleaned):
        if parsed := parse_create_table(statement):
            tables.append(parsed.table)
            foreign_keys.extend(parsed.foreign_keys)
        elif fk := parse_alter_table_foreign_key(statement):
            foreign_keys.append(fk)
        else:
            logger.debug("Ignoring statement: %.80s", statement)

    positioned = assign_grid_positions(tables)
    return {
        "tables": positioned,
        "relations": build_relations(positioned, foreign_keys),
    }
