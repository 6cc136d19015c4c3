"""Command line interface for DDL Toolkit."""

import sys
from collections.abc import Iterable
from pathlib import Path
from sys import stdout
from typing import Literal

from cyclopts import App
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ddl import generate_postgresql, parse_sql_to_schema, read_only_sqlite, sqlite_to_schema
from schema import DatabaseSchema, import_schema, schema_from_json, schema_to_json
from schema.editing import ImportMode

app = App(help="DDL Toolkit CLI tool")


type Format = Literal["json", "table"]


console = Console()
err_console = Console(stderr=True)

# Constants
SQL_EXTENSIONS = {".sql", ".ddl", ".txt"}
SCHEMA_EXTENSIONS = {".json"}
SQLITE_EXTENSIONS = {".sqlite", ".db", ".sqlite3"}


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def validate_location(location: Path) -> None:
    """Validate that an input file exists."""
    if not location.is_file():
        print_error(f"File does not exist: {location}")
        sys.exit(1)


def validate_extension(location: Path, file_extensions: Iterable[str]) -> None:
    """Validate input file extension."""
    if location.suffix.lower() not in file_extensions:
        print_error(
            f"File has invalid extension, expected one of: "
            f"{', '.join(sorted(file_extensions))}",
        )
        sys.exit(1)


def read_sql(sql_location: Path) -> str:
    """Read a SQL script after validating its location."""
    validate_location(sql_location)
    validate_extension(sql_location, SQL_EXTENSIONS)
    print_info(f"SQL script: {sql_location}")
    return sql_location.read_text()


def read_schema(schema_location: Path) -> DatabaseSchema:
    """Read and validate a JSON schema document."""
    validate_location(schema_location)
    validate_extension(schema_location, SCHEMA_EXTENSIONS)
    print_info(f"Schema document: {schema_location}")
    try:
        return schema_from_json(schema_location.read_text())
    except ValueError as e:
        print_error(str(e))
        sys.exit(1)


def require_tables(schema: DatabaseSchema) -> None:
    """Fail when an import produced no tables."""
    if not schema["tables"]:
        print_error("No CREATE TABLE statements were found")
        sys.exit(1)


def format_schema_table(schema: DatabaseSchema) -> None:
    """Format schema contents as a rich table."""
    if not schema["tables"]:
        console.print("Schema is empty.")
        return

    names = {table["id"]: table["name"] for table in schema["tables"]}
    references: dict[str, list[str]] = {}
    for relation in schema["relations"]:
        references.setdefault(relation["fromTableId"], []).append(
            f"{names[relation['toTableId']]} ({relation['type']})",
        )

    table = Table(title="Schema Summary")
    table.add_column("Table", style="bold cyan")
    table.add_column("Columns", style="bold yellow")
    table.add_column("Primary Key")
    table.add_column("References")

    for entry in schema["tables"]:
        primary_key = [c["name"] for c in entry["columns"] if c["isPrimaryKey"]]
        table.add_row(
            entry["name"],
            str(len(entry["columns"])),
            ", ".join(primary_key),
            ", ".join(references.get(entry["id"], [])),
        )

    console.print(table)


def write_schema(schema: DatabaseSchema, fmt: Format) -> None:
    """Write a schema to stdout in the requested format."""
    if fmt == "json":
        stdout.write(schema_to_json(schema))
    elif fmt == "table":
        format_schema_table(schema)


@app.command
def parse(sql_location: Path, fmt: Format = "json") -> None:
    """Import a SQL script into a schema document."""
    sql = read_sql(sql_location)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task("Parsing SQL...", total=None)
        schema = parse_sql_to_schema(sql)

    require_tables(schema)
    write_schema(schema, fmt)
    print_success(
        f"Imported {len(schema['tables'])} table(s) "
        f"and {len(schema['relations'])} relation(s)",
    )


@app.command
def merge(
    schema_location: Path,
    sql_location: Path,
    mode: ImportMode = "merge",
    fmt: Format = "json",
) -> None:
    """Import a SQL script into an existing schema document."""
    current = read_schema(schema_location)
    imported = parse_sql_to_schema(read_sql(sql_location))
    require_tables(imported)
    print_info(f"Import mode: {mode}")

    write_schema(import_schema(current, imported, mode), fmt)
    print_success(f"Imported {len(imported['tables'])} table(s) ({mode})")


@app.command
def generate(schema_location: Path) -> None:
    """Generate PostgreSQL DDL from a schema document."""
    schema = read_schema(schema_location)

    if sql := generate_postgresql(schema):
        stdout.write(sql)
    else:
        print_info("Schema is empty, nothing to generate")
        return

    print_success("DDL generation completed successfully")


@app.command
def reflect(sqlite_location: Path, fmt: Format = "json") -> None:
    """Import the schema of a SQLite database."""
    from sqlalchemy.exc import SQLAlchemyError

    validate_location(sqlite_location)
    validate_extension(sqlite_location, SQLITE_EXTENSIONS)
    print_info(f"Source database: {sqlite_location}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task("Reflecting schema...", total=None)
        try:
            schema = sqlite_to_schema(read_only_sqlite(sqlite_location))
        except SQLAlchemyError as e:
            print_error(f"Failed to read database: {e}")
            sys.exit(1)

    require_tables(schema)
    write_schema(schema, fmt)
    print_success("Schema reflection completed successfully")


@app.command
def summary(schema_location: Path) -> None:
    """Summarize the tables and relations of a schema document."""
    format_schema_table(read_schema(schema_location))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
