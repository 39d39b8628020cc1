"""
gsheetscells
~~~~~~~~~~~~

A wrapper for Google Sheets API v4 keeping fetched cells in a local cache
and saving changed cells in as few requests as possible.
"""

from .a1 import CellCoordinate, column_to_letter, format_a1, format_a1_range, letter_to_column, parse_a1
from .cell import Cell
from .client import Client
from .exceptions import (FormulaError, GSheetsCellsError, InfoNotLoadedError, InvalidFormulaError,
                         InvalidValueTypeError, MalformedReferenceError, NotLoadedError, OutOfBoundsError,
                         SheetNotFoundError, UnsavedChangesError)
from .models import Row, Spreadsheet, Worksheet

__version__ = '0.1.0'
