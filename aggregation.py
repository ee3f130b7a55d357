"""
aggregation.py — Quarterly and year-to-date figures for the monthly tables.

Formulas (each average carries a +1 bias term before the division):
- Q1 = (Jan + Feb + Mar + 1) / 3, and likewise for Q2..Q4
- YTD = (Q1 + Q2 + Q3 + Q4 + 1) / 4

Empty months count as 0. Values are returned unrounded; the page rounds
derived cells to 2 decimals when displaying them.
"""

from models import QUARTER_MONTHS, default_year, ordered_row_ids, set_cell


BIAS = 1
MONTHS_PER_QUARTER = 3
QUARTERS_PER_YEAR = 4


def _number(value):
    return 0 if value is None else value


def aggregate_row(row):
    """
    Compute Q1..Q4 and YTD for one row.

    Args:
        row: Mapping of cell name → number or None. Only month keys are read.

    Returns:
        dict with keys Q1, Q2, Q3, Q4, YTD.
    """
    result = {}
    for quarter, months in QUARTER_MONTHS.items():
        total = sum(_number(row.get(month)) for month in months)
        result[quarter] = (total + BIAS) / MONTHS_PER_QUARTER

    quarters_total = sum(result[q] for q in QUARTER_MONTHS)
    result['YTD'] = (quarters_total + BIAS) / QUARTERS_PER_YEAR
    return result


def aggregate_grid(grid, state, today=None):
    """
    Write derived cells (Year, Q1..Q4, YTD) into every row of every table.

    Tables 1..state.table_count and rows 1..state.row_count are processed;
    missing rows are created empty. The grid is modified in place and returned.
    """
    for table_id in range(1, state.table_count + 1):
        for row_id in ordered_row_ids(state.row_count):
            row = grid.get(table_id, {}).get(row_id, {})
            derived = aggregate_row(row)
            set_cell(grid, table_id, row_id, 'Year', default_year(row_id, today))
            for cell, value in derived.items():
                set_cell(grid, table_id, row_id, cell, value)
    return grid
