"""
a1
~~

This module contains functions translating between A1 notation and
zero-based (row, column) coordinates used by Google Sheets API v4,
and helpers building the small JSON pieces requests are made of.

Column letters are a bijective base-26 numbering: A=1, ..., Z=26, AA=27.
There is no zero digit, so each step decrements before dividing.
"""

import re
from collections import namedtuple

from .exceptions import MalformedReferenceError

CellCoordinate = namedtuple('CellCoordinate', ['row', 'column'])
CellCoordinate.__doc__ = "Zero-based (row, column) position of a cell."

_A1_PATTERN = re.compile(r'^([A-Za-z]+)([0-9]+)$')
_SHEET_PREFIX_PATTERN = re.compile(r"^(?:'((?:[^']|'')*)'|([^'!]+))!(.*)$")


def column_to_letter(column):
    """Returns column letters of 1-based column number.

    column_to_letter(1) == 'A', column_to_letter(27) == 'AA'

    :param column: int (>= 1)
    :returns: str
    """
    if isinstance(column, bool) or not isinstance(column, int) or column < 1:
        raise ValueError("column must be an int >= 1, but {!r}.".format(column))
    letters = ''
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def letter_to_column(letters):
    """Returns 1-based column number of column letters. Case-insensitive.

    :param letters: str
    :returns: int
    """
    if not isinstance(letters, str) or not letters:
        raise MalformedReferenceError(letters, "column letters must be a non-empty str")
    column = 0
    for char in letters.upper():
        if not 'A' <= char <= 'Z':
            raise MalformedReferenceError(letters, "column letters must be A-Z")
        column = column * 26 + (ord(char) - ord('A') + 1)
    return column


def parse_a1(reference):
    """Returns CellCoordinate of an A1 reference like 'B7'.

    The reference must be exactly one run of letters followed by one run of digits.

    :param reference: str
    :returns: CellCoordinate (zero-based)
    """
    if not isinstance(reference, str):
        raise MalformedReferenceError(reference, "reference must be a str")
    match = _A1_PATTERN.match(reference)
    if match is None:
        raise MalformedReferenceError(reference)
    row_number = int(match.group(2))
    if row_number == 0:
        raise MalformedReferenceError(reference, "row numbers start at 1")
    return CellCoordinate(row_number - 1, letter_to_column(match.group(1)) - 1)


def format_a1(row, column=None):
    """Returns A1 reference of a zero-based coordinate.

    Accepts either a CellCoordinate (or any (row, column) pair) or two ints.

    :returns: str
    """
    if column is None:
        try:
            row, column = row
        except (TypeError, ValueError):
            raise TypeError("Expected a (row, column) pair or two ints, but {!r}.".format(row)) from None
    if row < 0 or column < 0:
        raise ValueError("Min coordinate is (0, 0), but ({}, {}).".format(row, column))
    return '{}{}'.format(column_to_letter(column + 1), row + 1)


def format_a1_range(start, end=None):
    """Returns A1 range between two zero-based coordinates.

    A single reference is returned if end is None or equals start.

    :param start: CellCoordinate
    :param end: CellCoordinate or None
    :returns: str ('B2' or 'B2:D5')
    """
    if end is None or tuple(end) == tuple(start):
        return format_a1(start)
    return '{}:{}'.format(format_a1(start), format_a1(end))


def quote_sheet_name(title):
    """Returns sheet title quoted for use in an A1 range ('My Sheet' -> "'My Sheet'")."""
    return "'{}'".format(title.replace("'", "''"))


def split_sheet_name(a1_range):
    """Splits the sheet name off an A1 range.

    "'Sheet 1'!B2:D5" -> ('Sheet 1', 'B2:D5'), "B2" -> (None, 'B2')

    :param a1_range: str
    :returns: tuple (sheet name or None, rest of the range)
    """
    if not isinstance(a1_range, str):
        raise MalformedReferenceError(a1_range, "range must be a str")
    match = _SHEET_PREFIX_PATTERN.match(a1_range)
    if match is None:
        return None, a1_range
    quoted, bare, cells = match.groups()
    return (quoted.replace("''", "'") if quoted is not None else bare), cells


def parse_a1_range(a1_range):
    """Splits an A1 range into its parts.

    "'Sheet 1'!B2:D5" -> ('Sheet 1', CellCoordinate(1, 1), CellCoordinate(4, 3))
    "B2"              -> (None, CellCoordinate(1, 1), None)

    :param a1_range: str
    :returns: tuple (sheet name or None, start CellCoordinate, end CellCoordinate or None)
    """
    sheet_name, cells = split_sheet_name(a1_range)
    parts = cells.split(':')
    if len(parts) > 2:
        raise MalformedReferenceError(a1_range, "a range has at most one ':'")
    start = parse_a1(parts[0])
    end = parse_a1(parts[1]) if len(parts) == 2 else None
    return sheet_name, start, end


def grid_range(sheet_id, start_row=None, start_column=None, end_row=None, end_column=None):
    """Returns GridRange json.

    Indexes are zero-based, start inclusive and end exclusive, as the API uses them.
    Unbound sides (None) are left out.

    :returns: GridRange json
    """
    grid_range_json = {'sheetId': sheet_id}
    bounds = (
        ('startRowIndex', start_row),
        ('endRowIndex', end_row),
        ('startColumnIndex', start_column),
        ('endColumnIndex', end_column),
    )
    for key, index in bounds:
        if index is not None:
            grid_range_json[key] = index
    return grid_range_json


def get_field_mask(properties, prefix=''):
    """Returns field mask naming every leaf of properties.

    {'title': 'x', 'gridProperties': {'rowCount': 5}} -> 'title,gridProperties.rowCount'

    :param properties: dict
    :returns: str
    """
    fields = []
    for key, value in properties.items():
        path = prefix + key
        if isinstance(value, dict) and value:
            fields.append(get_field_mask(value, path + '.'))
        else:
            fields.append(path)
    return ','.join(fields)
