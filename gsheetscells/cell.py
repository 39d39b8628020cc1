"""
cell
~~~~

This module contains Cell class, the cached state of a single cell of a worksheet.

A Cell keeps the CellData json last received from the server (committed state)
and, separately, a value set locally but not saved yet (pending state).
"""

import decimal
import math
import numbers
from collections import namedtuple

from .a1 import column_to_letter
from .exceptions import FormulaError, InvalidFormulaError, InvalidValueTypeError, UnsavedChangesError

PendingValue = namedtuple('PendingValue', ['value', 'kind'])

# ExtendedValue keys a cell can be written with
VALUE_KINDS = ('boolValue', 'stringValue', 'numberValue', 'formulaValue')


def value_kind(value):
    """Returns (value, kind) a python value is written with.

    bool -> 'boolValue', str starting with '=' -> 'formulaValue', other str -> 'stringValue',
    finite number (Decimal included) -> 'numberValue', None -> ('', 'stringValue') which clears the cell.

    :returns: tuple (value, kind)
    """
    if value is None:
        return '', 'stringValue'
    if isinstance(value, bool):
        return value, 'boolValue'
    if isinstance(value, str):
        if value.startswith('='):
            return value, 'formulaValue'
        return value, 'stringValue'
    if isinstance(value, decimal.Decimal) and value.is_finite():
        return float(value), 'numberValue'
    if isinstance(value, numbers.Real) and math.isfinite(value):
        if not isinstance(value, int):
            value = float(value)
        return value, 'numberValue'
    raise InvalidValueTypeError("Set value to boolean, string, or finite number, but {!r}.".format(value))


class Cell:
    """The class that represents a single cell in a worksheet.

    :param sheet: Worksheet object including this cell
    :param row_index: int (zero-based)
    :param column_index: int (zero-based)
    :param cell_data: CellData json
    """

    def __init__(self, sheet, row_index, column_index, cell_data):
        self._sheet = sheet
        self._row = row_index
        self._column = column_index
        self._pending = None
        self._update_raw_data(cell_data)

    def __repr__(self):
        return '<Cell {} dirty={}>'.format(self.a1_address, self.dirty)

    def _update_raw_data(self, cell_data):
        """Replaces committed state by cell_data. A pending value is kept."""
        self._raw_data = cell_data or {}
        error_value = self._raw_data.get('effectiveValue', {}).get('errorValue')
        self._error = FormulaError(error_value) if error_value else None

    def _commit(self):
        """Promotes the pending value to committed state. Called once the save succeeded."""
        if self._pending is None:
            return
        value, kind = self._pending
        raw_data = dict(self._raw_data)
        for key in ('userEnteredValue', 'effectiveValue', 'formattedValue'):
            raw_data.pop(key, None)
        if kind == 'formulaValue':
            # effective value is known only after the server evaluated the formula
            raw_data['userEnteredValue'] = {kind: value}
        elif value != '':
            raw_data['userEnteredValue'] = {kind: value}
            raw_data['effectiveValue'] = {kind: value}
            if kind == 'stringValue':
                raw_data['formattedValue'] = value
        self._update_raw_data(raw_data)
        self._pending = None

    @property
    def sheet(self):
        return self._sheet

    @property
    def row_index(self):
        """Zero-based row index (int)."""
        return self._row

    @property
    def column_index(self):
        """Zero-based column index (int)."""
        return self._column

    @property
    def a1_row(self):
        return self._row + 1

    @property
    def a1_column(self):
        return column_to_letter(self._column + 1)

    @property
    def a1_address(self):
        return '{}{}'.format(self.a1_column, self.a1_row)

    @property
    def dirty(self):
        """True if a value was set and has not been saved yet."""
        return self._pending is not None

    @property
    def pending(self):
        """PendingValue (value, kind) to be saved, or None."""
        return self._pending

    @property
    def value(self):
        """Effective value of the cell.

        For cells with formulas this is the calculated value, and a FormulaError
        if the calculation failed. None for empty cells.
        Raises UnsavedChangesError while the cell is dirty.
        """
        if self.dirty:
            raise UnsavedChangesError(self.a1_address)
        if self._error is not None:
            return self._error
        effective_value = self._raw_data.get('effectiveValue')
        if not effective_value:
            return None
        return next(iter(effective_value.values()))

    @value.setter
    def value(self, new_value):
        self._pending = PendingValue(*value_kind(new_value))

    @property
    def formula(self):
        """Formula of the cell (str), or None."""
        return self._raw_data.get('userEnteredValue', {}).get('formulaValue')

    @formula.setter
    def formula(self, new_formula):
        if not isinstance(new_formula, str) or not new_formula.startswith('='):
            raise InvalidFormulaError('formula must begin with "=", but {!r}.'.format(new_formula))
        self._pending = PendingValue(new_formula, 'formulaValue')

    @property
    def formula_error(self):
        """FormulaError if the server failed to evaluate the formula, else None."""
        return self._error

    @property
    def formatted_value(self):
        """Display value of the cell (str), or None."""
        return self._raw_data.get('formattedValue') or None

    @property
    def format(self):
        """User entered text format json, or None."""
        return self._raw_data.get('userEnteredFormat', {}).get('textFormat')

    @property
    def raw_data(self):
        return self._raw_data

    def discard_changes(self):
        """Drops the pending value, making the committed value readable again."""
        self._pending = None

    def save(self):
        """Saves this cell if it has a pending value."""
        if not self.dirty:
            return
        self._sheet.save_cells([self])

    def clear(self):
        """Clears the value of this cell and saves it."""
        self.value = None
        self.save()
