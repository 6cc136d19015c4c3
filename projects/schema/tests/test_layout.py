"""Tests for table placement."""

from schema.builders import build_table
from schema.layout import (
    TABLE_WIDTH,
    X_GAP,
    assign_grid_positions,
    grid_position,
    merge_offset,
    shift_tables,
)


def test_grid_position_wraps_rows() -> None:
    """Test the row-major grid."""
    assert grid_position(0) == {"x": 100, "y": 100}
    assert grid_position(3) == {"x": 1180, "y": 100}
    assert grid_position(4) == {"x": 100, "y": 380}
    assert grid_position(9) == {"x": 460, "y": 660}


def test_assign_grid_positions_copies() -> None:
    """Test that positions are assigned without mutating the input."""
    tables = [build_table(name, []) for name in ("a", "b")]
    placed = assign_grid_positions(tables)

    assert [t["position"] for t in placed] == [{"x": 100, "y": 100}, {"x": 460, "y": 100}]
    assert all(t["position"] == {"x": 0, "y": 0} for t in tables)
    assert [t["id"] for t in placed] == [t["id"] for t in tables]


def test_merge_offset_places_right_of_existing() -> None:
    """Test the offset applied to merged tables."""
    current = [
        build_table("a", [], {"x": 100, "y": 100}),
        build_table("b", [], {"x": 700, "y": 380}),
    ]
    incoming = [build_table("c", [], {"x": 100, "y": 100})]

    assert merge_offset(current, incoming) == 700 + X_GAP - 100


def test_merge_offset_empty() -> None:
    """Test that nothing moves when either side is empty."""
    tables = [build_table("a", [], {"x": 100, "y": 100})]
    assert merge_offset([], tables) == 0
    assert merge_offset(tables, []) == 0


def test_shift_tables() -> None:
    """Test horizontal shifting."""
    tables = [build_table("a", [], {"x": 100, "y": 380})]
    assert shift_tables(tables, 50)[0]["position"] == {"x": 150, "y": 380}
    assert tables[0]["position"] == {"x": 100, "y": 380}


def test_grid_columns_do_not_overlap() -> None:
    """Test that neighbouring tables leave a gap between them."""
    assert X_GAP > TABLE_WIDTH
    assert grid_position(1)["x"] - grid_position(0)["x"] > TABLE_WIDTH
