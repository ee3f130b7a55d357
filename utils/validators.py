"""
utils/validators.py — Input validation helpers.

Validates:
- Raw cell values (numeric or empty)
- Contiguous fill: within a table, filled month cells form one unbroken run
  once the table is flattened (oldest year first, January → December)
- Parallel tables: every table has the same filled/empty pattern as table 1
"""

import math

from models import (
    INPUT_CELLS, MSG_INVALID, MSG_TABLES_DIFFERENT, TableError,
    ordered_row_ids, table_rows
)


class InvalidCellValue(ValueError):
    """A cell received something that is neither a number nor empty."""


def parse_cell_value(raw):
    """
    Convert a raw cell value to a float, or None when the cell is empty.

    Accepts finite numbers and numeric strings. Blank strings and None are
    empty; 0 and "0" are filled.

    Raises:
        InvalidCellValue: for booleans, non-numeric strings, NaN/infinity
            (including overflowing literals like "1e999") and other types.
    """
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise InvalidCellValue(f"Not a number: {raw!r}")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (ValueError, OverflowError):
        raise InvalidCellValue(f"Not a number: {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidCellValue(f"Not a finite number: {raw!r}")
    return value


def is_filled(value):
    """A cell is filled when it holds any number, zero included."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ''
    return True


def flatten_table(grid, table_id, row_count):
    """Month values of a table in row-major order, oldest year first."""
    rows = table_rows(grid, table_id)
    values = []
    for row_id in ordered_row_ids(row_count):
        row = rows.get(row_id, {})
        values.extend(row.get(cell) for cell in INPUT_CELLS)
    return values


def is_contiguous(values):
    """
    Check that filled values form a single run.

    Finds the first filled value (start point), then the first empty value
    after it (end point). Any filled value after the end point breaks the run.
    An all-empty or all-filled-after-start sequence is contiguous.
    """
    start_point = None
    for index, value in enumerate(values):
        if is_filled(value):
            start_point = index
            break
    if start_point is None:
        return True

    end_point = None
    for index in range(start_point, len(values)):
        if not is_filled(values[index]):
            end_point = index
            break
    if end_point is None:
        return True

    return not any(is_filled(v) for v in values[end_point:])


def fill_pattern(values):
    return [is_filled(v) for v in values]


def validate_tables(grid, state):
    """
    Run the contiguity and parallel-table checks on every table.

    All tables are checked; errors are collected rather than raised.
    Each table gets at most one error of each kind.

    Args:
        grid: Nested mapping table_id → row_id → cell → value.
        state: TableState giving the number of tables and rows.

    Returns:
        List of TableError, empty when the grid is valid.
    """
    errors = []
    flattened = {
        t: flatten_table(grid, t, state.row_count)
        for t in range(1, state.table_count + 1)
    }
    reference = fill_pattern(flattened[1])

    for table_id, values in flattened.items():
        if table_id > 1 and fill_pattern(values) != reference:
            errors.append(TableError(table_id, MSG_TABLES_DIFFERENT))
        if not is_contiguous(values):
            errors.append(TableError(table_id, MSG_INVALID))

    return errors
