"""
grid
~~~~

This module contains CellGrid class, the sparse store of cells fetched for a worksheet.

Only cells actually fetched are kept: {row index: {column index: Cell}}.
A missing entry means the cell was never loaded.
"""

import logging

from .cell import Cell
from .exceptions import NotLoadedError, OutOfBoundsError

logger = logging.getLogger(__name__)


class CellGrid:
    """Sparse grid of Cell objects of one worksheet.

    Bounds are not kept here. They are read from the worksheet
    (row_count, column_count) every time a cell is looked up.

    :param sheet: Worksheet object owning this grid
    """

    def __init__(self, sheet):
        self._sheet = sheet
        self._rows = {}
        self.row_metadata = {}
        self.column_metadata = {}

    def __len__(self):
        return self.count_loaded()

    def __iter__(self):
        for columns in self._rows.values():
            yield from columns.values()

    def fill(self, data_ranges, partial=False):
        """Fills the grid with GridData json blocks.

        A block without 'rowData' is a fetch of an empty sheet, so all cells are dropped.
        With partial (blocks returned for a few saved ranges), such a block only empties
        the cells it covers, as given by its rowMetadata and columnMetadata.
        Existing cells are updated in place, so references held elsewhere see the new data.

        :param data_ranges: list of GridData json (None is ignored)
        :param partial: bool
        :returns: None
        """
        for data_range in data_ranges or []:
            start_row = data_range.get('startRow', 0)
            start_column = data_range.get('startColumn', 0)
            row_metadata = data_range.get('rowMetadata', [])
            column_metadata = data_range.get('columnMetadata', [])

            row_data = data_range.get('rowData')
            if row_data is None and partial:
                self._empty_block(start_row, start_column, len(row_metadata), len(column_metadata))
            elif row_data is None:
                logger.debug("No rowData from (%s, %s), clearing %s cached cells",
                             start_row, start_column, self.count_loaded())
                self._rows = {}
            else:
                for i, row in enumerate(row_data):
                    for j, cell_data in enumerate(row.get('values', [])):
                        self._put(start_row + i, start_column + j, cell_data)

            for i, metadata in enumerate(row_metadata):
                self.row_metadata[start_row + i] = metadata
            for i, metadata in enumerate(column_metadata):
                self.column_metadata[start_column + i] = metadata

    def _empty_block(self, start_row, start_column, row_span, column_span):
        # pending values of the emptied cells are kept
        for row in range(start_row, start_row + row_span):
            columns = self._rows.get(row, {})
            for column in range(start_column, start_column + column_span):
                if column in columns:
                    columns[column]._update_raw_data({})

    def _put(self, row, column, cell_data):
        columns = self._rows.setdefault(row, {})
        cell = columns.get(column)
        if cell is None:
            columns[column] = Cell(self._sheet, row, column, cell_data)
        else:
            cell._update_raw_data(cell_data)

    def get(self, row, column):
        """Returns the Cell at zero-based (row, column).

        :raises OutOfBoundsError: coordinate is outside of the sheet
        :raises NotLoadedError: cell has not been fetched
        """
        row_count = self._sheet.row_count
        column_count = self._sheet.column_count
        if row < 0 or column < 0 or row >= row_count or column >= column_count:
            raise OutOfBoundsError(row, column, row_count, column_count)
        try:
            return self._rows[row][column]
        except KeyError:
            raise NotLoadedError(row, column) from None

    def count_loaded(self):
        """Number of cells loaded (int)."""
        return sum(len(columns) for columns in self._rows.values())

    def dirty_cells(self):
        """Returns list of cells having unsaved values, in grid order."""
        return [cell for cell in self if cell.dirty]

    def reset(self):
        """Drops every cached cell."""
        self._rows = {}
