"""
forms.py — Flask-WTF form for the monthly tables.

The form class is built per request from the current TableState: one
FloatField per table/row/cell, named table-{t}-{r}-{Cell}. Derived cells
(Year, Q1..Q4, YTD) are rendered disabled and never read back from the form.
"""

import math

from flask_wtf import FlaskForm
from wtforms import FloatField, SubmitField
from wtforms.validators import Optional, ValidationError

from models import (
    CELL_KEYS, DERIVED_CELLS, INPUT_CELLS, ordered_row_ids, set_cell, table_key
)


def field_name(table_id, row_id, cell):
    return f"{table_key(table_id)}-{row_id}-{cell}"


def finite_number(form, field):
    """Reject NaN and infinity ("nan", "inf", "1e999")."""
    if field.data is not None and not math.isfinite(field.data):
        raise ValidationError('Not a finite number.')


class TablesFormBase(FlaskForm):
    """Action buttons shared by every tables form."""
    add_table = SubmitField('Add Table')
    add_year = SubmitField('Add Year')
    submit = SubmitField('Submit')

    table_count = 1
    row_count = 1

    def cell(self, table_id, row_id, cell):
        return self[field_name(table_id, row_id, cell)]

    def grid(self):
        """Month values currently held by the form, as a grid.

        A value that failed to parse as a finite number reads back as None.
        """
        grid = {}
        for t in range(1, self.table_count + 1):
            for r in ordered_row_ids(self.row_count):
                for cell in INPUT_CELLS:
                    value = self.cell(t, r, cell).data
                    if value is not None and not math.isfinite(value):
                        value = None
                    set_cell(grid, t, r, cell, value)
        return grid


def build_tables_form(state, values=None):
    """
    Create a tables form shaped by the state.

    Args:
        state: TableState (number of tables and rows).
        values: Grid used for fields absent from the posted form data
            (all fields on GET, derived cells on POST).

    Returns:
        A bound TablesFormBase subclass instance.
    """
    class TablesForm(TablesFormBase):
        pass

    TablesForm.table_count = state.table_count
    TablesForm.row_count = state.row_count

    for t in range(1, state.table_count + 1):
        for r in ordered_row_ids(state.row_count):
            for cell in CELL_KEYS:
                if cell in DERIVED_CELLS:
                    field = FloatField(cell, render_kw={'disabled': True, 'step': '0.01'})
                else:
                    field = FloatField(cell, validators=[Optional(), finite_number], render_kw={'step': '0.01'})
                setattr(TablesForm, field_name(t, r, cell), field)

    data = {}
    for t, rows in (values or {}).items():
        for r, row in rows.items():
            for cell, value in row.items():
                data[field_name(t, r, cell)] = value

    return TablesForm(data=data)
