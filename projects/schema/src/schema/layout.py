"""Deterministic placement of tables on the canvas."""

from schema.types import Position, TableSchema

# Canvas units; a rendered table is TABLE_WIDTH wide
START_X = 100
START_Y = 100
COLUMNS_PER_ROW = 4
X_GAP = 360
Y_GAP = 280
TABLE_WIDTH = 288


def grid_position(index: int) -> Position:
    """Position of the table at ``index`` in a row-major grid."""
    return {
        "x": START_X + (index % COLUMNS_PER_ROW) * X_GAP,
        "y": START_Y + (index // COLUMNS_PER_ROW) * Y_GAP,
    }


def assign_grid_positions(tables: list[TableSchema]) -> list[TableSchema]:
    """Return copies of the tables laid out in statement order."""
    return [
        {**table, "position": grid_position(index)}
        for index, table in enumerate(tables)
    ]


def merge_offset(current: list[TableSchema], incoming: list[TableSchema]) -> float:
    """Horizontal shift placing ``incoming`` one X_GAP past the rightmost table."""
    if not current or not incoming:
        return 0
    rightmost = max(table["position"]["x"] for table in current)
    leftmost = min(table["position"]["x"] for table in incoming)
    return rightmost + X_GAP - leftmost


def shift_tables(tables: list[TableSchema], dx: float) -> list[TableSchema]:
    """Return copies of the tables moved right by ``dx``."""
    return [
        {
            **table,
            "position": {
                "x": table["position"]["x"] + dx,
                "y": table["position"]["y"],
            },
        }
        for table in tables
    ]
