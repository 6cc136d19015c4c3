"""JSON documents for schemas exchanged with the editing layer."""

import json
from logging import getLogger

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from schema.builders import new_id
from schema.type_conversion import normalize_column_type
from schema.types import (
    RELATION_TYPES,
    ColumnSchema,
    DatabaseSchema,
    RelationSchema,
    RelationType,
    TableSchema,
)

logger = getLogger(__name__)


class _Document(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


class PositionDocument(_Document):
    """Canvas position as stored in a document."""

    x: float = 0
    y: float = 0


class ColumnDocument(_Document):
    """Column as stored in a document; flags default to false."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    type: str = "text"
    isPrimaryKey: bool = False  # noqa: N815
    isNotNull: bool = False  # noqa: N815
    isUnique: bool = False  # noqa: N815


class TableDocument(_Document):
    """Table as stored in a document."""

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    columns: list[ColumnDocument] = Field(default_factory=list)
    position: PositionDocument = Field(default_factory=PositionDocument)


class RelationDocument(_Document):
    """Relation as stored in a document; any type string is accepted."""

    id: str = Field(default_factory=new_id)
    fromTableId: str = ""  # noqa: N815
    fromColumnId: str = ""  # noqa: N815
    toTableId: str = ""  # noqa: N815
    toColumnId: str = ""  # noqa: N815
    type: str = "1:N"


class SchemaDocument(_Document):
    """Root of a schema document."""

    tables: list[TableDocument]
    relations: list[RelationDocument] = Field(default_factory=list)


def schema_to_json(schema: DatabaseSchema, indent: int | None = 2) -> str:
    """Serialize a schema to a JSON document."""
    return json.dumps(schema, indent=indent)


def _column_from_document(column: ColumnDocument) -> ColumnSchema:
    primary_key = column.isPrimaryKey
    return {
        "id": column.id,
        "name": column.name,
        "type": normalize_column_type(column.type),
        "isPrimaryKey": primary_key,
        "isNotNull": column.isNotNull or primary_key,
        "isUnique": column.isUnique or primary_key,
    }


def _table_from_document(table: TableDocument) -> TableSchema:
    return {
        "id": table.id,
        "name": table.name,
        "columns": [_column_from_document(column) for column in table.columns],
        "position": {"x": table.position.x, "y": table.position.y},
    }


def _relation_from_document(relation: RelationDocument) -> RelationSchema:
    relation_type: RelationType = (
        relation.type if relation.type in RELATION_TYPES else "1:N"  # pyright: ignore[reportAssignmentType]
    )
    return {
        "id": relation.id,
        "fromTableId": relation.fromTableId,
        "fromColumnId": relation.fromColumnId,
        "toTableId": relation.toTableId,
        "toColumnId": relation.toColumnId,
        "type": relation_type,
    }


def _is_resolvable(relation: RelationSchema, column_ids: dict[str, set[str]]) -> bool:
    """Check both endpoints of a relation exist."""
    return relation["fromColumnId"] in column_ids.get(
        relation["fromTableId"],
        set(),
    ) and relation["toColumnId"] in column_ids.get(relation["toTableId"], set())


def schema_from_document(document: SchemaDocument) -> DatabaseSchema:
    """Apply the model invariants to a validated document."""
    tables = [_table_from_document(table) for table in document.tables]
    relations = [_relation_from_document(relation) for relation in document.relations]

    column_ids = {
        table["id"]: {column["id"] for column in table["columns"]} for table in tables
    }
    resolvable = [r for r in relations if _is_resolvable(r, column_ids)]
    if dropped := len(relations) - len(resolvable):
        logger.warning("Dropped %d relation(s) with unknown endpoints", dropped)

    return {"tables": tables, "relations": resolvable}


def schema_from_dict(data: object) -> DatabaseSchema:
    """Validate a decoded document and apply the model defaults."""
    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid schema document: {e}"
        raise ValueError(msg) from e
    return schema_from_document(document)


def schema_from_json(text: str) -> DatabaseSchema:
    """Parse and validate a JSON schema document."""
    try:
        document = SchemaDocument.model_validate_json(text)
    except ValidationError as e:
        msg = f"Invalid schema document: {e}"
        raise ValueError(msg) from e
    return schema_from_document(document)
