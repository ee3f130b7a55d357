"""
tests/test_growth.py — Tests for the table/row growth state machine.
"""

from datetime import date
import random

from growth import EVENTS, add_table, add_year, initial_state, submit
from models import INPUT_CELLS, MSG_INVALID, MSG_VALID, TableState, get_cell


def test_initial_state():
    state = initial_state()
    assert (state.table_count, state.row_count) == (1, 1)


def test_add_table_then_add_year():
    t1 = add_table(initial_state())
    assert (t1.state.table_count, t1.state.row_count) == (2, 1)
    assert t1.rebuild

    t2 = add_year(t1.state)
    assert (t2.state.table_count, t2.state.row_count) == (2, 2)
    assert t2.rebuild


def test_handlers_do_not_mutate_state():
    state = TableState(table_count=3, row_count=2)
    add_table(state)
    add_year(state)
    assert state == TableState(table_count=3, row_count=2)


def test_counters_never_decrease():
    rng = random.Random(7)
    state = initial_state()
    for _ in range(50):
        action = rng.choice(['add_table', 'add_year', 'submit'])
        if action == 'submit':
            next_state = submit(state, {}).state
        else:
            next_state = EVENTS[action](state).state
        assert next_state.table_count >= state.table_count
        assert next_state.row_count >= state.row_count
        state = next_state


def test_submit_valid_sets_status_and_derived_cells():
    state = TableState()
    grid = {1: {1: dict(zip(INPUT_CELLS, range(1, 13)))}}

    transition = submit(state, grid, today=date(2025, 3, 1))

    assert transition.ok
    assert transition.rebuild
    assert transition.status == MSG_VALID
    assert transition.state == state
    assert get_cell(grid, 1, 1, 'Year') == 2025
    assert get_cell(grid, 1, 1, 'Q1') == (1 + 2 + 3 + 1) / 3


def test_submit_invalid_keeps_grid_untouched():
    state = TableState()
    grid = {1: {1: {'January': 1.0, 'February': None, 'March': 2.0}}}

    transition = submit(state, grid)

    assert not transition.ok
    assert transition.status is None
    assert [e.message for e in transition.errors] == [MSG_INVALID]
    assert 'Q1' not in grid[1][1]
