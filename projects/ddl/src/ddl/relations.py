"""Resolution of name-based foreign keys into id-based relations."""

from logging import getLogger
from typing import NamedTuple

from schema.builders import build_relation
from schema.types import RelationSchema, TableSchema

logger = getLogger(__name__)


class ForeignKeyRef(NamedTuple):
    """Single-column foreign key addressed by normalized names."""

    from_table: str
    from_column: str
    to_table: str
    to_column: str


def foreign_key_ref(
    from_table: str,
    from_columns: list[str],
    to_table: str,
    to_columns: list[str],
) -> ForeignKeyRef | None:
    """Build a reference, or None for composite keys."""
    if len(from_columns) != 1 or len(to_columns) != 1:
        logger.debug(
            "Dropping composite foreign key %s(%s) -> %s(%s)",
            from_table,
            ", ".join(from_columns),
            to_table,
            ", ".join(to_columns),
        )
        return None
    return ForeignKeyRef(from_table, from_columns[0], to_table, to_columns[0])


def build_relations(
    tables: list[TableSchema],
    foreign_keys: list[ForeignKeyRef],
) -> list[RelationSchema]:
    """Resolve references against ``tables``.

    Unresolvable references are dropped, as are duplicates of an already
    resolved endpoint quadruple. A relation is one-to-one when its
    referencing column is unique.
    """
    tables_by_name = {table["name"].lower(): table for table in tables}
    relations: list[RelationSchema] = []
    seen: set[tuple[str, str, str, str]] = set()

    for fk in foreign_keys:
        from_table = tables_by_name.get(fk.from_table.lower())
        to_table = tables_by_name.get(fk.to_table.lower())
        if from_table is None or to_table is None:
            logger.debug("Dropping foreign key to unknown table: %s", fk)
            continue

        from_column = next(
            (c for c in from_table["columns"] if c["name"].lower() == fk.from_column.lower()),
            None,
        )
        to_column = next(
            (c for c in to_table["columns"] if c["name"].lower() == fk.to_column.lower()),
            None,
        )
        if from_column is None or to_column is None:
            logger.debug("Dropping foreign key to unknown column: %s", fk)
            continue

        key = (from_table["id"], from_column["id"], to_table["id"], to_column["id"])
        if key in seen:
            continue
        seen.add(key)

        relations.append(
            build_relation(
                from_table,
                from_column,
                to_table,
                to_column,
                "1:1" if from_column["isUnique"] else "1:N",
            ),
        )

    return relations
