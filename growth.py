"""
growth.py — Table/row growth state machine for the tables form.

State is a TableState (table_count, row_count), both starting at 1.
Each handler takes the current state and returns a Transition; nothing is
mutated in place and counters never decrease.

Events:
- add_table: one more table, same rows
- add_year:  one more row (previous year) in every table
- submit:    counters unchanged; runs validation, then aggregation when valid
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from models import MSG_VALID, TableError, TableState
from aggregation import aggregate_grid
from utils.validators import validate_tables


@dataclass(frozen=True)
class Transition:
    """Result of an event: next state, rebuild signal, status and errors."""
    state: TableState
    rebuild: bool = True
    status: Optional[str] = None
    errors: List[TableError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def initial_state() -> TableState:
    return TableState()


def add_table(state: TableState) -> Transition:
    return Transition(state=replace(state, table_count=state.table_count + 1))


def add_year(state: TableState) -> Transition:
    return Transition(state=replace(state, row_count=state.row_count + 1))


def submit(state: TableState, grid, today=None) -> Transition:
    """
    Validate the grid and, when there are no errors, write derived cells.

    On failure the grid is left untouched and the errors are returned
    without a status message.
    """
    errors = validate_tables(grid, state)
    if errors:
        return Transition(state=state, errors=errors)

    aggregate_grid(grid, state, today)
    return Transition(state=state, status=MSG_VALID)


EVENTS = {
    'add_table': add_table,
    'add_year': add_year,
}
