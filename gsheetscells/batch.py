"""
batch
~~~~~

This module contains functions grouping changed cells into updateCells requests.

Dirty cells of the same row whose columns are consecutive are sent as one
updateCells request, and the range they cover is asked back in the
batchUpdate response, so one batchUpdate saves any number of cells.

Grouping is order-sensitive: cells of a row are scanned in the order given,
so callers pass them sorted by column. Rows come out in the order their
first cell came in.
"""

from .a1 import format_a1_range


class UpdateGroup:
    """Run of cells of one row with consecutive column indexes.

    :param cells: list of Cell objects (non-empty)
    """

    def __init__(self, cells):
        self.cells = list(cells)

    def __len__(self):
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __repr__(self):
        return '<UpdateGroup {}>'.format(self.a1_range)

    @property
    def row_index(self):
        return self.cells[0].row_index

    @property
    def start_column_index(self):
        return self.cells[0].column_index

    @property
    def a1_range(self):
        """'B2' for a single cell, 'B2:D2' otherwise."""
        first, last = self.cells[0], self.cells[-1]
        return format_a1_range((first.row_index, first.column_index),
                               (last.row_index, last.column_index))

    def accepts(self, cell):
        return cell.row_index == self.row_index and cell.column_index == self.cells[-1].column_index + 1

    def response_range(self, a1_sheet_name=None):
        """A1 range of this group, prefixed by a1_sheet_name if given."""
        if a1_sheet_name is None:
            return self.a1_range
        return '{}!{}'.format(a1_sheet_name, self.a1_range)

    def to_request(self, sheet_id):
        """Returns updateCells request writing the pending values of the group.

        :param sheet_id: int
        :returns: Request json
        """
        values = []
        for cell in self.cells:
            value, kind = cell.pending
            values.append({'userEnteredValue': {kind: value}})

        return {
            'updateCells': {
                'rows': [{'values': values}],
                'fields': 'userEnteredValue',
                'start': {
                    'sheetId': sheet_id,
                    'rowIndex': self.row_index,
                    'columnIndex': self.start_column_index
                }
            }
        }


def group_cells(cells):
    """Splits cells into UpdateGroup objects.

    Cells are bucketed by row in order of first appearance. Within a row each
    cell joins the current group if its column is right after the group's last
    column, otherwise it starts a new group.

    :param cells: iterable of Cell objects, same-row cells sorted by column
    :returns: list of UpdateGroup objects
    """
    cells_by_row = {}
    for cell in cells:
        cells_by_row.setdefault(cell.row_index, []).append(cell)

    groups = []
    for row_cells in cells_by_row.values():
        group = UpdateGroup(row_cells[:1])
        for cell in row_cells[1:]:
            if group.accepts(cell):
                group.cells.append(cell)
            else:
                groups.append(group)
                group = UpdateGroup([cell])
        groups.append(group)
    return groups


def build_update_requests(cells, sheet_id, a1_sheet_name=None):
    """Groups cells and builds what a batchUpdate saving them needs.

    An empty cells gives three empty lists; nothing has to be sent then.

    :param cells: iterable of dirty Cell objects, same-row cells sorted by column
    :param sheet_id: int
    :param a1_sheet_name: str (quoted sheet title) or None
    :returns: tuple (list of UpdateGroup, list of request json, list of response ranges)
    """
    groups = group_cells(cells)
    requests = [group.to_request(sheet_id) for group in groups]
    response_ranges = [group.response_range(a1_sheet_name) for group in groups]
    return groups, requests, response_ranges
