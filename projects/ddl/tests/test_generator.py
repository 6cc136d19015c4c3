"""Tests for PostgreSQL DDL generation."""

import pytest

from ddl.generator import (
    constraint_name,
    fit_identifier,
    generate_column_definition,
    generate_postgresql,
    generate_table_definition,
    quote_identifier,
)
from schema.builders import build_column, build_relation, build_table, empty_schema
from schema.types import DatabaseSchema


@pytest.fixture(name="blog_schema")
def create_blog_schema() -> DatabaseSchema:
    """Create a users/posts schema with one relation."""
    user_id = build_column("id", "uuid", primary_key=True)
    users = build_table(
        "users",
        [
            user_id,
            build_column("email", "varchar", not_null=True, unique=True),
            build_column("bio", "text"),
        ],
    )
    author_id = build_column("author_id", "uuid", not_null=True)
    posts = build_table(
        "posts",
        [
            build_column("id", "serial", primary_key=True),
            author_id,
            build_column("body", "double precision"),
        ],
    )
    relation = build_relation(posts, author_id, users, user_id, "1:1")
    return {"tables": [users, posts], "relations": [relation]}


def test_empty_schema_generates_empty_text() -> None:
    """Test the empty schema output."""
    assert generate_postgresql(empty_schema()) == ""


def test_quote_identifier() -> None:
    """Test identifier quoting and escaping."""
    assert quote_identifier("users") == '"users"'
    assert quote_identifier('odd"name') == '"odd""name"'


def test_column_definition_flags() -> None:
    """Test each flag renders independently."""
    assert generate_column_definition(build_column("a", "text")) == '  "a" TEXT'
    assert (
        generate_column_definition(build_column("b", "varchar", not_null=True))
        == '  "b" VARCHAR NOT NULL'
    )
    assert (
        generate_column_definition(build_column("c", "integer", unique=True))
        == '  "c" INTEGER UNIQUE'
    )
    assert (
        generate_column_definition(
            build_column("d", "double precision", not_null=True, unique=True),
        )
        == '  "d" DOUBLE PRECISION NOT NULL UNIQUE'
    )


def test_primary_key_is_table_level_without_unique() -> None:
    """Test that primary key columns omit UNIQUE and get a trailing clause."""
    table = build_table("t", [build_column("id", "uuid", primary_key=True)])
    assert generate_table_definition(table) == (
        'CREATE TABLE "t" (\n  "id" UUID NOT NULL,\n  PRIMARY KEY ("id")\n);'
    )


def test_composite_primary_key() -> None:
    """Test a primary key over several columns keeps column order."""
    table = build_table(
        "t",
        [
            build_column("b", "integer", primary_key=True),
            build_column("x", "text"),
            build_column("a", "integer", primary_key=True),
        ],
    )
    assert generate_table_definition(table) == (
        'CREATE TABLE "t" (\n'
        '  "b" INTEGER NOT NULL,\n'
        '  "x" TEXT,\n'
        '  "a" INTEGER NOT NULL,\n'
        '  PRIMARY KEY ("b", "a")\n'
        ");"
    )


def test_table_without_columns() -> None:
    """Test a table with no columns."""
    assert generate_table_definition(build_table("empty", [])) == 'CREATE TABLE "empty" ();'


def test_full_schema(blog_schema: DatabaseSchema) -> None:
    """Test the complete output for a small schema."""
    assert generate_postgresql(blog_schema) == (
        'CREATE TABLE "users" (\n'
        '  "id" UUID NOT NULL,\n'
        '  "email" VARCHAR NOT NULL UNIQUE,\n'
        '  "bio" TEXT,\n'
        '  PRIMARY KEY ("id")\n'
        ");\n"
        "\n"
        'CREATE TABLE "posts" (\n'
        '  "id" SERIAL NOT NULL,\n'
        '  "author_id" UUID NOT NULL,\n'
        '  "body" DOUBLE PRECISION,\n'
        '  PRIMARY KEY ("id")\n'
        ");\n"
        "\n"
        'ALTER TABLE "posts" ADD CONSTRAINT "fk_posts_author_id_users_id" '
        'FOREIGN KEY ("author_id") REFERENCES "users" ("id");\n'
    )


def test_relation_type_not_rendered(blog_schema: DatabaseSchema) -> None:
    """Test that a one-to-one relation does not force UNIQUE."""
    sql = generate_postgresql(blog_schema)
    assert '"author_id" UUID NOT NULL,' in sql
    assert "1:1" not in sql


def test_output_is_deterministic(blog_schema: DatabaseSchema) -> None:
    """Test that the same schema always renders the same text."""
    assert generate_postgresql(blog_schema) == generate_postgresql(blog_schema)


def test_duplicate_constraint_names_are_suffixed(blog_schema: DatabaseSchema) -> None:
    """Test that repeated edges get distinct constraint names."""
    relation = blog_schema["relations"][0]
    schema: DatabaseSchema = {
        **blog_schema,
        "relations": [relation, {**relation, "id": "copy"}],
    }
    sql = generate_postgresql(schema)
    assert '"fk_posts_author_id_users_id"' in sql
    assert '"fk_posts_author_id_users_id_2"' in sql


def test_dangling_relation_skipped(blog_schema: DatabaseSchema) -> None:
    """Test that relations with unknown endpoints are not rendered."""
    relation = {**blog_schema["relations"][0], "toColumnId": "missing"}
    schema: DatabaseSchema = {**blog_schema, "relations": [relation]}
    assert "ALTER TABLE" not in generate_postgresql(schema)


def test_constraint_name() -> None:
    """Test the constraint naming scheme."""
    assert constraint_name("orders", "user_id", "users", "id") == "fk_orders_user_id_users_id"


def test_fit_identifier_keeps_short_names() -> None:
    """Test that names within the identifier limit are unchanged."""
    name = "fk_" + "a" * 60
    assert fit_identifier(name) == name


def test_fit_identifier_shortens_long_names() -> None:
    """Test that long names are cut to 63 bytes and stay distinct."""
    shared = "fk_" + "very_long_table_name_" * 3
    first = fit_identifier(shared + "customer_id_customers_id")
    second = fit_identifier(shared + "supplier_id_suppliers_id")

    assert len(first.encode()) <= 63
    assert len(second.encode()) <= 63
    assert first != second
    assert first == fit_identifier(shared + "customer_id_customers_id")


def test_fit_identifier_multibyte() -> None:
    """Test that truncation never splits a multibyte character."""
    shortened = fit_identifier("fk_" + "é" * 40)
    assert len(shortened.encode()) <= 63
    assert shortened.startswith("fk_é")


def test_long_constraint_names_do_not_collide() -> None:
    """Test that relations with long names that share a prefix get distinct names."""
    prefix = "customer_account_history_entries_"
    target_id = build_column("id", "integer", primary_key=True)
    target = build_table("accounts", [target_id])
    first = build_column(prefix + "primary_account_id", "integer")
    second = build_column(prefix + "secondary_account_id", "integer")
    source = build_table(prefix + "archive", [first, second])
    schema: DatabaseSchema = {
        "tables": [target, source],
        "relations": [
            build_relation(source, first, target, target_id),
            build_relation(source, second, target, target_id),
        ],
    }

    names = [
        line.split('"')[3]
        for line in generate_postgresql(schema).splitlines()
        if line.startswith("ALTER TABLE")
    ]
    assert len(names) == 2
    assert len(set(names)) == 2
    assert all(len(name.encode()) <= 63 for name in names)
