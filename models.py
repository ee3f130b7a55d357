"""
models.py — Cell schema, session state and grid accessors for the tables form.

A grid is a nested mapping: table_id → row_id → cell_name → value.
Table and row ids are 1-based. Row 1 is the current year, row N the oldest.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Optional


# Header order of a row. Flattening for validation follows this order.
CELL_KEYS = (
    'Year',
    'January', 'February', 'March', 'Q1',
    'April', 'May', 'June', 'Q2',
    'July', 'August', 'September', 'Q3',
    'October', 'November', 'December', 'Q4',
    'YTD',
)

DERIVED_CELLS = frozenset({'Year', 'Q1', 'Q2', 'Q3', 'Q4', 'YTD'})

INPUT_CELLS = tuple(key for key in CELL_KEYS if key not in DERIVED_CELLS)

QUARTER_MONTHS = {
    'Q1': ('January', 'February', 'March'),
    'Q2': ('April', 'May', 'June'),
    'Q3': ('July', 'August', 'September'),
    'Q4': ('October', 'November', 'December'),
}

MSG_INVALID = 'Invalid'
MSG_TABLES_DIFFERENT = 'Tables are different!'
MSG_VALID = 'Valid'

Row = Dict[str, Optional[float]]
Grid = Dict[int, Dict[int, Row]]


@dataclass(frozen=True)
class TableState:
    """Number of tables and rows (years) shown in the form."""
    table_count: int = 1
    row_count: int = 1

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        return cls(
            table_count=max(1, int(data.get('table_count', 1))),
            row_count=max(1, int(data.get('row_count', 1))),
        )


@dataclass(frozen=True)
class TableError:
    """A validation error attached to one table."""
    table_id: int
    message: str

    @property
    def table_key(self) -> str:
        return table_key(self.table_id)


def table_key(table_id: int) -> str:
    """Form/display identifier of a table: table-{id}."""
    return f"table-{table_id}"


def default_year(row_id: int, today: Optional[date] = None) -> int:
    """Year shown in a row: current year for row 1, one less per row below."""
    today = today or date.today()
    return today.year + 1 - row_id


def ordered_row_ids(row_count: int):
    """Row ids in display order (oldest year first)."""
    return list(range(row_count, 0, -1))


def empty_row() -> Row:
    return {key: None for key in CELL_KEYS}


def table_rows(grid: Grid, table_id: int) -> Dict[int, Row]:
    """Rows of a table, or an empty mapping if the table holds no values."""
    return grid.get(table_id, {})


def get_cell(grid: Grid, table_id: int, row_id: int, cell: str) -> Optional[float]:
    if cell not in CELL_KEYS:
        raise KeyError(f"Unknown cell: {cell}")
    return table_rows(grid, table_id).get(row_id, {}).get(cell)


def set_cell(grid: Grid, table_id: int, row_id: int, cell: str, value: Optional[float]) -> None:
    if cell not in CELL_KEYS:
        raise KeyError(f"Unknown cell: {cell}")
    row = grid.setdefault(table_id, {}).setdefault(row_id, empty_row())
    row[cell] = value


def new_grid(state: TableState) -> Grid:
    """Build an all-empty grid shaped by the state."""
    return {
        t: {r: empty_row() for r in ordered_row_ids(state.row_count)}
        for t in range(1, state.table_count + 1)
    }


def fill_grid(grid: Grid, state: TableState) -> Grid:
    """Return a grid with every table/row/cell of the state, keeping known values."""
    full = new_grid(state)
    for t, rows in full.items():
        for r, row in rows.items():
            for cell in CELL_KEYS:
                row[cell] = get_cell(grid, t, r, cell)
    return full


def grid_to_session(grid: Grid) -> dict:
    """Serialize only filled cells; session JSON keys must be strings."""
    data = {}
    for t, rows in grid.items():
        for r, row in rows.items():
            filled = {cell: value for cell, value in row.items() if value is not None}
            if filled:
                data.setdefault(str(t), {})[str(r)] = filled
    return data


def grid_from_session(data) -> Grid:
    grid = {}
    for t, rows in (data or {}).items():
        for r, row in rows.items():
            for cell, value in row.items():
                if cell in CELL_KEYS:
                    set_cell(grid, int(t), int(r), cell, value)
    return grid
