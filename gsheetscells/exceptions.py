"""
exceptions
~~~~~~~~~~

This module contains the exceptions raised by gsheetscells.

Errors coming back from Google Sheets API itself are not wrapped here.
They are raised as googleapiclient.errors.HttpError.
"""


class GSheetsCellsError(Exception):
    """Base exception for all gsheetscells errors."""


class MalformedReferenceError(GSheetsCellsError, ValueError):
    """Raised when a string is not a valid A1 reference or column letter."""

    def __init__(self, reference, reason=None):
        self.reference = reference
        message = "Malformed A1 reference: {!r}".format(reference)
        if reason:
            message += " ({})".format(reason)
        super().__init__(message)


class OutOfBoundsError(GSheetsCellsError, IndexError):
    """Raised when a coordinate lies outside of the sheet."""

    def __init__(self, row, column, row_count, column_count):
        self.row = row
        self.column = column
        super().__init__("Cell ({}, {}) is out of bounds, sheet is {} by {}".format(
            row, column, row_count, column_count))


class NotLoadedError(GSheetsCellsError, LookupError):
    """Raised when a cell has not been fetched yet. Call load_cells() first."""

    def __init__(self, row, column):
        self.row = row
        self.column = column
        super().__init__("Cell ({}, {}) has not been loaded yet".format(row, column))


class InvalidValueTypeError(GSheetsCellsError, TypeError):
    """Raised when a cell value is not a boolean, string, finite number or None."""


class InvalidFormulaError(GSheetsCellsError, ValueError):
    """Raised when a formula does not begin with '='."""


class UnsavedChangesError(GSheetsCellsError):
    """Raised when reading the value of a cell that has unsaved changes."""

    def __init__(self, a1_address):
        self.a1_address = a1_address
        super().__init__("Value of cell {} has been changed. "
                         "Save or discard the change before reading it".format(a1_address))


class InfoNotLoadedError(GSheetsCellsError):
    """Raised when reading properties before they were fetched."""

    def __init__(self, message="You must call get_info() before accessing this property"):
        super().__init__(message)


class SheetNotFoundError(GSheetsCellsError, KeyError):
    """Raised when no cached sheet matches a lookup."""

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class FormulaError:
    """Formula evaluation error reported by the server for a cell.

    This is a value, not an exception: it is what Cell.value returns for a
    cell whose formula failed to evaluate.

    :param error_value: ErrorValue json ({'type': ..., 'message': ...})
    """

    def __init__(self, error_value):
        self.type = error_value.get('type')
        self.message = error_value.get('message')

    def __eq__(self, other):
        if not isinstance(other, FormulaError):
            return NotImplemented
        return self.type == other.type and self.message == other.message

    def __repr__(self):
        return "FormulaError(type={!r}, message={!r})".format(self.type, self.message)
