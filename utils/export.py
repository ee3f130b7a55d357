"""
utils/export.py — Excel export of the session tables using openpyxl.

One sheet per table (table-1, table-2, ...), styled header row with the
18 column labels, one row per year (oldest first). Derived cells are shaded.
"""

from io import BytesIO
from datetime import date

from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from models import (
    CELL_KEYS, DERIVED_CELLS, default_year, get_cell, ordered_row_ids, table_key
)


HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center')
HEADER_BORDER = Border(
    bottom=Side(style='thin', color='0D47A1'),
    right=Side(style='thin', color='E2E8F0'),
)
DERIVED_FILL = PatternFill(start_color='EEF2F7', end_color='EEF2F7', fill_type='solid')
CELL_BORDER = Border(
    bottom=Side(style='thin', color='E2E8F0'),
    right=Side(style='thin', color='E2E8F0'),
)
NUMBER_FORMAT = '0.00'


def _build_sheet(ws, grid, table_id, state, labels, today):
    """Populate a worksheet with one table's rows and a styled header."""
    for col_idx, key in enumerate(CELL_KEYS, 1):
        cell = ws.cell(row=1, column=col_idx, value=labels.get(key, key))
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = HEADER_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = 10

    for row_idx, row_id in enumerate(ordered_row_ids(state.row_count), 2):
        for col_idx, key in enumerate(CELL_KEYS, 1):
            if key == 'Year':
                value = default_year(row_id, today)
            else:
                value = get_cell(grid, table_id, row_id, key)
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = CELL_BORDER
            if key in DERIVED_CELLS:
                cell.fill = DERIVED_FILL
            if key != 'Year' and value is not None:
                cell.number_format = NUMBER_FORMAT

    # Freeze header row and year column
    ws.freeze_panes = 'B2'


def generate_excel(grid, state, labels=None, today=None):
    """Generate an Excel workbook with one sheet per table.

    Args:
        grid: Session grid (table_id → row_id → cell → value).
        state: TableState giving the number of tables and rows.
        labels: Optional mapping cell key → column header text.
        today: Date used for the Year column (defaults to today).

    Returns:
        (BytesIO buffer, filename)
    """
    import openpyxl

    labels = labels or {}
    today = today or date.today()

    wb = openpyxl.Workbook()
    # Remove default sheet
    wb.remove(wb.active)

    for table_id in range(1, state.table_count + 1):
        ws = wb.create_sheet(title=table_key(table_id))
        _build_sheet(ws, grid, table_id, state, labels, today)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    filename = f"tables_{today.strftime('%Y%m%d')}.xlsx"
    return buffer, filename
