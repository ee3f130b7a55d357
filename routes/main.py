"""
routes/main.py — Tables page and form actions.

Provides:
- GET  /       — Render the tables for the current session
- POST /       — Add Table, Add Year or Submit (validate + aggregate)
- POST /reset  — Clear the session's tables and start over

The session cookie holds only a random id; table counters and entered
values are stored server-side under that id (see database.py).
"""

import secrets
from datetime import date

from flask import (
    Blueprint, render_template, redirect, url_for, flash, session, current_app
)

from database import delete_tables, load_tables, save_tables
from forms import build_tables_form
from growth import EVENTS, submit
from models import (
    CELL_KEYS, DERIVED_CELLS, INPUT_CELLS, TableState, default_year, fill_grid,
    grid_from_session, grid_to_session, ordered_row_ids
)

main_bp = Blueprint('main', __name__)

SESSION_ID_KEY = 'tables_id'


# ========================================
# Session helpers
# ========================================

def load_session_tables():
    """Return (TableState, grid) stored for the current session."""
    session_id = session.get(SESSION_ID_KEY)
    if not session_id:
        return TableState(), {}
    state, values = load_tables(session_id)
    return TableState.from_dict(state), grid_from_session(values)


def save_session_tables(state, grid):
    session_id = session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = secrets.token_urlsafe(24)
        session[SESSION_ID_KEY] = session_id
    save_tables(session_id, state.to_dict(), grid_to_session(grid))


def clear_session_tables():
    session_id = session.pop(SESSION_ID_KEY, None)
    if session_id:
        delete_tables(session_id)


def display_values(grid, state, today=None):
    """Grid prepared for rendering: default years, derived cells rounded to 2 decimals."""
    today = today or date.today()
    display = fill_grid(grid, state)
    for rows in display.values():
        for row_id, row in rows.items():
            row['Year'] = default_year(row_id, today)
            for cell in DERIVED_CELLS - {'Year'}:
                if row[cell] is not None:
                    row[cell] = round(row[cell], 2)
    return display


def _carry_derived(grid, previous):
    """Keep derived cells of an earlier submit for rows whose months are unchanged."""
    for t, rows in previous.items():
        for r, row in rows.items():
            if t not in grid or r not in grid[t]:
                continue
            new_row = grid[t][r]
            if any(new_row.get(m) != row.get(m) for m in INPUT_CELLS):
                continue
            for cell in DERIVED_CELLS:
                if row.get(cell) is not None:
                    new_row[cell] = row[cell]


def _render(form, state):
    return render_template(
        'index.html',
        form=form,
        state=state,
        row_ids=ordered_row_ids(state.row_count),
        cell_keys=CELL_KEYS,
        input_cells=INPUT_CELLS,
    )


# ========================================
# Routes
# ========================================

@main_bp.route('/')
def index():
    """Tables page — one table per table_count, one row per year."""
    state, grid = load_session_tables()
    form = build_tables_form(state, display_values(grid, state))
    return _render(form, state)


@main_bp.route('/', methods=['POST'])
def tables_action():
    """Handle the Add Table / Add Year / Submit buttons."""
    state, stored = load_session_tables()
    form = build_tables_form(state, display_values(stored, state))
    logger = current_app.logger

    for action in ('add_table', 'add_year'):
        if form[action].data:
            transition = EVENTS[action](state)
            grid = form.grid()
            _carry_derived(grid, stored)
            save_session_tables(transition.state, grid)
            logger.info(
                "%s: tables=%d rows=%d", action,
                transition.state.table_count, transition.state.row_count
            )
            return redirect(url_for('main.index'))

    if not form.validate():
        logger.warning("Rejected non-numeric input in tables form")
        flash(current_app.config['I18N']['messages']['bad_input'], 'error')
        return _render(form, state)

    grid = form.grid()
    transition = submit(state, grid)
    save_session_tables(transition.state, grid)

    messages = current_app.config['I18N']['messages']
    if transition.errors:
        for error in transition.errors:
            flash(f"{error.table_key}: {messages.get(error.message, error.message)}", 'error')
        logger.warning(
            "Tables rejected: %s",
            ', '.join(f"{e.table_key}={e.message}" for e in transition.errors)
        )
    else:
        flash(messages.get(transition.status, transition.status), 'success')
        logger.info("Tables submitted: tables=%d rows=%d", state.table_count, state.row_count)

    return redirect(url_for('main.index'))


@main_bp.route('/reset', methods=['POST'])
def reset():
    """Drop all tables and values from the session."""
    clear_session_tables()
    flash(current_app.config['I18N']['messages']['reset'], 'success')
    return redirect(url_for('main.index'))
