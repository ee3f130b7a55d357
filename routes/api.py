"""
routes/api.py — JSON interface to the tables of the current session.

Provides:
- GET  /api/tables            — Counters and stored values
- POST /api/tables/add-table  — Add a table
- POST /api/tables/add-year   — Add a row (year) to every table
- POST /api/tables/submit     — Validate and aggregate posted values

Submit body: {"tables": {"1": {"1": {"January": 3, ...}}}}
Ids may be strings or integers. Cells not sent are treated as empty.
"""

from flask import Blueprint, request, jsonify, current_app

from growth import EVENTS, submit
from models import (
    CELL_KEYS, DERIVED_CELLS, fill_grid, set_cell
)
from routes.main import load_session_tables, save_session_tables
from utils.validators import InvalidCellValue, parse_cell_value

api_bp = Blueprint('api', __name__, url_prefix='/api/tables')


def _grid_to_json(grid):
    return {
        str(t): {str(r): dict(row) for r, row in rows.items()}
        for t, rows in grid.items()
    }


def _parse_id(raw, limit, kind):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidCellValue(f"Invalid {kind} id: {raw!r}") from None
    if value < 1 or value > limit:
        raise InvalidCellValue(f"Unknown {kind}: {raw!r}")
    return value


def parse_tables_payload(payload, state):
    """
    Turn a JSON tables mapping into a grid shaped by the state.

    Derived cells in the payload are ignored; they are always recomputed.

    Raises:
        InvalidCellValue: unknown table/row/cell or a non-numeric value.
    """
    if not isinstance(payload, dict):
        raise InvalidCellValue("'tables' must be an object")

    grid = {}
    for raw_table, rows in payload.items():
        table_id = _parse_id(raw_table, state.table_count, 'table')
        if not isinstance(rows, dict):
            raise InvalidCellValue(f"Rows of table {raw_table!r} must be an object")
        for raw_row, cells in rows.items():
            row_id = _parse_id(raw_row, state.row_count, 'row')
            if not isinstance(cells, dict):
                raise InvalidCellValue(f"Cells of row {raw_row!r} must be an object")
            for cell, raw in cells.items():
                if cell not in CELL_KEYS:
                    raise InvalidCellValue(f"Unknown cell: {cell!r}")
                if cell in DERIVED_CELLS:
                    continue
                set_cell(grid, table_id, row_id, cell, parse_cell_value(raw))
    return fill_grid(grid, state)


def _state_json(state, **extra):
    body = {
        'success': True,
        'table_count': state.table_count,
        'row_count': state.row_count,
    }
    body.update(extra)
    return jsonify(body)


@api_bp.route('')
def get_tables():
    """Current counters and values (JSON API)."""
    state, grid = load_session_tables()
    return _state_json(state, tables=_grid_to_json(fill_grid(grid, state)))


@api_bp.route('/add-table', methods=['POST'])
def add_table():
    """Add a table (JSON API)."""
    return _grow('add_table')


@api_bp.route('/add-year', methods=['POST'])
def add_year():
    """Add a year row to every table (JSON API)."""
    return _grow('add_year')


def _grow(action):
    state, grid = load_session_tables()
    transition = EVENTS[action](state)
    save_session_tables(transition.state, grid)
    current_app.logger.info(
        "api %s: tables=%d rows=%d", action,
        transition.state.table_count, transition.state.row_count
    )
    return _state_json(transition.state, rebuild=transition.rebuild)


@api_bp.route('/submit', methods=['POST'])
def submit_tables():
    """Validate posted values and return derived cells or table errors."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'tables' not in data:
        return jsonify({'success': False, 'error': "Body must be an object with a 'tables' key"}), 400

    state, _ = load_session_tables()
    try:
        grid = parse_tables_payload(data['tables'], state)
    except InvalidCellValue as e:
        current_app.logger.warning("api submit rejected: %s", e)
        return jsonify({'success': False, 'error': str(e)}), 400

    transition = submit(state, grid)
    save_session_tables(transition.state, grid)

    if transition.errors:
        return jsonify({
            'success': False,
            'errors': [
                {'table': e.table_key, 'message': e.message}
                for e in transition.errors
            ],
        }), 422

    return jsonify({
        'success': True,
        'status': transition.status,
        'rebuild': transition.rebuild,
        'tables': _grid_to_json(grid),
    })
