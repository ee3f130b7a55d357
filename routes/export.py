"""
routes/export.py — Excel export route.

Provides:
- GET /export/excel — Download the session's tables as an .xlsx workbook
"""

from flask import Blueprint, send_file, current_app

from routes.main import load_session_tables
from utils.export import generate_excel

export_bp = Blueprint('export', __name__, url_prefix='/export')


@export_bp.route('/excel')
def export_excel():
    """Export every table of the session, one sheet per table."""
    state, grid = load_session_tables()
    labels = current_app.config['I18N']['header']

    buffer, filename = generate_excel(grid, state, labels)
    current_app.logger.info("Exported %d table(s) to %s", state.table_count, filename)

    return send_file(
        buffer,
        as_attachment=True,
        download_name=filename,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
