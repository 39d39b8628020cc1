"""
models
~~~~~~

This module contains Spreadsheet, Worksheet and Row class.

Properties are read from the JSON last received from the server and have
no setters. Use update_properties(), resize() and the like to change them.
"""

import logging

from .a1 import (column_to_letter, get_field_mask, grid_range, parse_a1, parse_a1_range, quote_sheet_name,
                 split_sheet_name)
from .batch import build_update_requests
from .exceptions import InfoNotLoadedError, SheetNotFoundError
from .grid import CellGrid

logger = logging.getLogger(__name__)


class Spreadsheet:
    """The class that represents a spreadsheet.

    :param client: Client object
    :param spreadsheet_id: str
    :param json: JSON representation of the spreadsheet (optional)
    """

    def __init__(self, client, spreadsheet_id, json=None):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self._raw_properties = None
        self._sheets = {}
        if json is not None:
            self._apply_spreadsheet_json(json)

    def __repr__(self):
        return '<Spreadsheet {}>'.format(self.spreadsheet_id)

    # cache

    def _ensure_info_loaded(self):
        if self._raw_properties is None:
            raise InfoNotLoadedError()

    def _apply_spreadsheet_json(self, json, partial_data=False):
        if 'properties' in json:
            self._raw_properties = json['properties']
        for sheet_json in json.get('sheets', []):
            self._update_or_create_sheet(sheet_json, partial_data)

    def _update_or_create_sheet(self, sheet_json, partial_data=False):
        properties = sheet_json['properties']
        data = sheet_json.get('data')
        sheet = self._sheets.get(properties['sheetId'])
        if sheet is None:
            self._sheets[properties['sheetId']] = Worksheet(self, properties, data)
        else:
            sheet._raw_properties = properties
            sheet._grid.fill(data, partial=partial_data)

    def reset_local_cache(self):
        self._raw_properties = None
        self._sheets = {}

    # properties

    @property
    def title(self):
        """Spreadsheet title (str)"""
        self._ensure_info_loaded()
        return self._raw_properties['title']

    @property
    def locale(self):
        self._ensure_info_loaded()
        return self._raw_properties.get('locale')

    @property
    def time_zone(self):
        self._ensure_info_loaded()
        return self._raw_properties.get('timeZone')

    @property
    def auto_recalc(self):
        """One of 'ON_CHANGE', 'MINUTE', 'HOUR'."""
        self._ensure_info_loaded()
        return self._raw_properties.get('autoRecalc')

    @property
    def default_format(self):
        self._ensure_info_loaded()
        return self._raw_properties.get('defaultFormat')

    @property
    def spreadsheet_theme(self):
        self._ensure_info_loaded()
        return self._raw_properties.get('spreadsheetTheme')

    @property
    def iterative_calculation_settings(self):
        self._ensure_info_loaded()
        return self._raw_properties.get('iterativeCalculationSettings')

    @property
    def sheet_count(self):
        self._ensure_info_loaded()
        return len(self._sheets)

    @property
    def sheets_by_id(self):
        """dict of sheet id -> Worksheet object"""
        self._ensure_info_loaded()
        return dict(self._sheets)

    @property
    def sheets_by_index(self):
        """list of Worksheet objects ordered by their index in the spreadsheet"""
        self._ensure_info_loaded()
        return sorted(self._sheets.values(), key=lambda sheet: sheet.index)

    def get_sheet_by_id(self, sheet_id):
        """Returns a Worksheet object whose sheet id is sheet_id.

        :param sheet_id: int
        :returns: Worksheet object
        """
        self._ensure_info_loaded()
        try:
            return self._sheets[sheet_id]
        except KeyError:
            raise SheetNotFoundError("Couldn't find cached sheet whose sheetId is {}. "
                                     "Please consider to do get_info before".format(sheet_id)) from None

    def get_sheet_by_index(self, index):
        """Returns a Worksheet object whose index is index.

        :param index: int
        :returns: Worksheet object
        """
        return self.sheets_by_index[index]

    def get_sheet_by_title(self, title):
        """Returns a Worksheet object whose title is title.

        :param title: str
        :returns: Worksheet object
        """
        for sheet in self.sheets_by_index:
            if sheet.title == title:
                return sheet
        raise SheetNotFoundError("Couldn't find cached sheet whose title is {!r}. "
                                 "Please consider to do get_info before".format(title))

    # requests

    def _make_single_update_request(self, request_type, request_params):
        """Executes a batchUpdate made of one request and returns the reply to it.

        :param request_type: str (ex: 'addSheet')
        :param request_params: request json
        :returns: reply json of request_type (None if the request has no reply)
        """
        response = self._make_batch_update_request([{request_type: request_params}])
        self._apply_updated_spreadsheet(response)
        return response['replies'][0].get(request_type)

    def _make_batch_update_request(self, requests, response_ranges=None):
        """Executes a batchUpdate and returns the response. The cache is not touched here.

        :param requests: list of request json
        :param response_ranges: list of A1 ranges whose grid data should come back,
                                '*' for all of them, None for none
        :returns: BatchUpdateSpreadsheetResponse json
        """
        body = {
            'requests': requests,
            'includeSpreadsheetInResponse': True
        }
        if response_ranges:
            body['responseIncludeGridData'] = True
            if response_ranges != '*':
                body['responseRanges'] = response_ranges
        return self.client.batch_update(self.spreadsheet_id, body)

    def _apply_updated_spreadsheet(self, response, partial_data=False):
        """Applies updatedSpreadsheet of a batchUpdate response to the cache.

        partial_data is set when the grid data covers only the ranges just saved,
        so an empty range does not drop the rest of the cached cells.
        """
        updated_spreadsheet = response.get('updatedSpreadsheet')
        if updated_spreadsheet:
            self._apply_spreadsheet_json(updated_spreadsheet, partial_data)

    def get_info(self, include_cells=False):
        """Fetches properties and sheets of the spreadsheet (and every cell if include_cells)."""
        spreadsheet_json = self.client.get_spreadsheet(self.spreadsheet_id, include_grid_data=include_cells)
        self._apply_spreadsheet_json(spreadsheet_json)

    def update_properties(self, **properties):
        """Updates SpreadsheetProperties.

        properties: title (str), locale (str), autoRecalc (str), timeZone (str),
                    iterativeCalculationSettings (dict)
        """
        self._make_single_update_request('updateSpreadsheetProperties', {
            'properties': properties,
            'fields': get_field_mask(properties)
        })

    def add_sheet(self, headers=None, **properties):
        """Adds a sheet and returns it.

        :param headers: list of str to write in the first row (optional)
        :param properties: SheetProperties (title, index, gridProperties, ...)
        :returns: Worksheet object
        """
        reply = self._make_single_update_request('addSheet', {'properties': properties})
        new_sheet = self._sheets[reply['properties']['sheetId']]
        if headers:
            new_sheet.set_header_row(headers)
        return new_sheet

    def delete_sheet(self, sheet_id):
        self._make_single_update_request('deleteSheet', {'sheetId': sheet_id})
        self._sheets.pop(sheet_id, None)

    def add_named_range(self, name, range, named_range_id=None):
        """Adds a named range.

        :param name: str
        :param range: GridRange json
        :param named_range_id: str (optional, chosen by the server if not given)
        :returns: NamedRange json
        """
        named_range = {'name': name, 'range': range}
        if named_range_id is not None:
            named_range['namedRangeId'] = named_range_id
        reply = self._make_single_update_request('addNamedRange', {'namedRange': named_range})
        return reply['namedRange']

    def delete_named_range(self, named_range_id):
        self._make_single_update_request('deleteNamedRange', {'namedRangeId': named_range_id})

    def load_cells(self, filters=None):
        """Fetches cells and fills them into the sheets they belong to.

        :param filters: A1 range str, DataFilter json, or list of those.
                        None loads every cell of the spreadsheet.
        :returns: None
        """
        if filters is None:
            filters = []
        elif isinstance(filters, (str, dict)):
            filters = [filters]

        data_filters = []
        for data_filter in filters:
            if isinstance(data_filter, str):
                data_filters.append({'a1Range': data_filter})
            else:
                data_filters.append(data_filter)

        spreadsheet_json = self.client.get_by_data_filter(self.spreadsheet_id, {
            'dataFilters': data_filters,
            'includeGridData': True
        })
        self._apply_spreadsheet_json(spreadsheet_json)


class Worksheet:
    """The class that represents a single sheet in a spreadsheet.

    :param spreadsheet: Spreadsheet object including this sheet.
    :param properties: SheetProperties json
    :param data: list of GridData json (optional)
    """

    def __init__(self, spreadsheet, properties, data=None):
        self.client = spreadsheet.client
        self.parent_spreadsheet = spreadsheet
        self._raw_properties = properties
        self._grid = CellGrid(self)
        self.header_values = None
        if data:
            self._grid.fill(data)

    def __repr__(self):
        if self._raw_properties is None:
            return '<Worksheet (not loaded)>'
        return '<Worksheet {!r} id={}>'.format(self._raw_properties.get('title'),
                                               self._raw_properties.get('sheetId'))

    def _ensure_info_loaded(self):
        if self._raw_properties is None:
            raise InfoNotLoadedError("You must call spreadsheet.get_info() before accessing this property")

    def _property(self, key, default=None):
        self._ensure_info_loaded()
        return self._raw_properties.get(key, default)

    def reset_local_cache(self):
        self._raw_properties = None
        self.header_values = None
        self._grid.reset()

    def reset_local_cells(self):
        """Clears the local cache of cell data."""
        self._grid.reset()

    # properties

    @property
    def sheet_id(self):
        return self._property('sheetId')

    @property
    def title(self):
        """Title of this sheet (str)."""
        return self._property('title')

    @property
    def index(self):
        """Zero-based index of this sheet (int)."""
        return self._property('index', 0)

    @property
    def sheet_type(self):
        return self._property('sheetType')

    @property
    def grid_properties(self):
        return self._property('gridProperties', {})

    @property
    def hidden(self):
        """Is hidden sheet? (boolean)"""
        return self._property('hidden', False)

    @property
    def tab_color(self):
        return self._property('tabColor')

    @property
    def right_to_left(self):
        return self._property('rightToLeft', False)

    @property
    def row_count(self):
        """Number of rows (int)."""
        return self.grid_properties.get('rowCount', 0)

    @property
    def column_count(self):
        """Number of columns (int)."""
        return self.grid_properties.get('columnCount', 0)

    @property
    def a1_sheet_name(self):
        """Title quoted for A1 ranges (ex: "'Sheet1'")."""
        return quote_sheet_name(self.title)

    @property
    def last_column_letter(self):
        return column_to_letter(self.column_count)

    @property
    def row_metadata(self):
        """dict of row index -> DimensionProperties json of loaded rows"""
        return self._grid.row_metadata

    @property
    def column_metadata(self):
        return self._grid.column_metadata

    # cells

    @property
    def cells_loaded(self):
        """Number of cells loaded (int)."""
        return self._grid.count_loaded()

    def load_cells(self, a1_range=None):
        """Fetches cells of this sheet.

        :param a1_range: str (ex: 'B2:D5'), or None for the whole sheet
        :returns: None
        :raises ValueError: a1_range names another sheet
        """
        if a1_range is None:
            data_filter = {'gridRange': grid_range(self.sheet_id)}
        else:
            sheet_name, cells = split_sheet_name(a1_range)
            if sheet_name is not None and sheet_name != self.title:
                raise ValueError("Range {!r} is not in sheet {!r}.".format(a1_range, self.title))
            data_filter = '{}!{}'.format(self.a1_sheet_name, cells)
        self.parent_spreadsheet.load_cells(data_filter)

    def get_cell(self, row, column):
        """Returns loaded Cell at zero-based (row, column).

        :raises OutOfBoundsError: (row, column) is outside of this sheet
        :raises NotLoadedError: the cell has not been loaded yet
        """
        return self._grid.get(row, column)

    def get_cell_by_a1(self, a1_address):
        """Returns loaded Cell at a1_address (ex: 'B7')."""
        row, column = parse_a1(a1_address)
        return self.get_cell(row, column)

    def save_updated_cells(self):
        """Saves every loaded cell having an unsaved value."""
        self.save_cells(self._grid.dirty_cells())

    def save_cells(self, cells):
        """Saves values of cells in a single batchUpdate.

        Cells of a row with consecutive columns are written by one updateCells request.
        Either all cells are saved or, if the request fails, none is and all stay dirty.

        :param cells: list of Cell objects of this sheet
        :returns: None
        """
        cells = sorted(cells, key=lambda cell: (cell.row_index, cell.column_index))
        for cell in cells:
            if cell.sheet is not self:
                raise ValueError("Cell {} does not belong to sheet {!r}.".format(cell.a1_address, self.title))
        cells = [cell for cell in cells if cell.dirty]

        groups, requests, response_ranges = build_update_requests(cells, self.sheet_id, self.a1_sheet_name)
        if not requests:
            return
        logger.debug("Saving %d cells of %r in %d groups", len(cells), self.title, len(groups))

        spreadsheet = self.parent_spreadsheet
        response = spreadsheet._make_batch_update_request(requests, response_ranges)
        for cell in cells:
            cell._commit()
        spreadsheet._apply_updated_spreadsheet(response, partial_data=True)

    # rows

    def get_cells_in_range(self, a1_range, **params):
        """Returns values in a1_range of this sheet as a list of lists.

        :param a1_range: str (ex: 'A1:C3')
        :param params: values.get query parameters (majorDimension, valueRenderOption, ...)
        :returns: list of lists (None if the range is empty)
        """
        response = self.client.values_get(self.parent_spreadsheet.spreadsheet_id,
                                          '{}!{}'.format(self.a1_sheet_name, a1_range), **params)
        return response.get('values')

    def load_header_row(self):
        rows = self.get_cells_in_range('A1:{}1'.format(self.last_column_letter))
        self.header_values = rows[0] if rows else []

    def set_header_row(self, header_values):
        """Writes header_values in the first row.

        :param header_values: list of str
        :returns: None
        """
        if not header_values:
            return
        if len(header_values) > self.column_count:
            raise ValueError("Sheet is not large enough to fit {} columns. "
                             "Resize the sheet first.".format(len(header_values)))

        a1_range = '{}!A1'.format(self.a1_sheet_name)
        response = self.client.values_update(
            self.parent_spreadsheet.spreadsheet_id, a1_range,
            body={
                'range': a1_range,
                'majorDimension': 'ROWS',
                'values': [list(header_values)]
            },
            valueInputOption='USER_ENTERED',
            includeValuesInResponse=True)
        self.header_values = response['updatedData']['values'][0]

    def add_row(self, values):
        """Appends a row after the last row having data and returns it.

        values: list (cells from column A), or dict keyed by header values

        :returns: Row object
        """
        if self.header_values is None:
            self.load_header_row()

        if isinstance(values, (list, tuple)):
            values_list = list(values)
        elif isinstance(values, dict):
            values_list = [values.get(header, '') for header in self.header_values]
        else:
            raise TypeError("values must be a list or a dict, but {!r}.".format(values))

        response = self.client.values_append(
            self.parent_spreadsheet.spreadsheet_id, self.a1_sheet_name,
            body={'values': [values_list]},
            valueInputOption='USER_ENTERED',
            insertDataOption='OVERWRITE',
            includeValuesInResponse=True)

        # ex: "'Sheet1'!A2:C2" -> row 2
        updates = response['updates']
        _, start, _ = parse_a1_range(updates['updatedRange'])
        row_values = updates.get('updatedData', {}).get('values', [[]])[0]
        return Row(self, start.row + 1, row_values)

    def get_rows(self, offset=0, limit=None):
        """Returns rows below the header row.

        :param offset: int (number of rows to skip)
        :param limit: int (max number of rows, all rows if None)
        :returns: list of Row objects
        """
        if limit is None:
            limit = self.row_count - 1
        if self.header_values is None:
            self.load_header_row()
        if not self.header_values or limit < 1:
            return []

        first_row = 2 + offset  # skip header row, and row numbers are one-based
        last_row = min(first_row + limit - 1, self.row_count)
        if first_row > last_row:
            return []
        last_column = column_to_letter(len(self.header_values))
        raw_rows = self.get_cells_in_range('A{}:{}{}'.format(first_row, last_column, last_row))
        if not raw_rows:
            return []
        return [Row(self, first_row + i, raw_row) for i, raw_row in enumerate(raw_rows)]

    # structure

    def update_properties(self, **properties):
        """Updates SheetProperties of this sheet.

        properties: title (str), index (int), gridProperties (dict), hidden (bool),
                    tabColor (Color json), rightToLeft (bool)
        """
        self.parent_spreadsheet._make_single_update_request('updateSheetProperties', {
            'properties': dict(properties, sheetId=self.sheet_id),
            'fields': get_field_mask(properties)
        })

    def update_grid_properties(self, **grid_properties):
        """grid_properties: rowCount, columnCount, frozenRowCount, frozenColumnCount, hideGridlines"""
        self.update_properties(gridProperties=grid_properties)

    def resize(self, **grid_properties):
        """Changes rowCount and/or columnCount. Cached cells are dropped."""
        self.update_grid_properties(**grid_properties)
        self.reset_local_cells()

    def set_title(self, title):
        self.update_properties(title=title)

    def update_dimension_properties(self, dimension, properties, start_index=None, end_index=None):
        """Updates DimensionProperties (pixelSize, hiddenByUser, ...) of rows or columns.

        dimension: str ('COLUMNS' or 'ROWS')
        properties: dict
        start_index, end_index: int (zero-based, end exclusive, None if unbound)

        :returns: None
        """
        if dimension not in ('COLUMNS', 'ROWS'):
            raise ValueError("dimension must be 'COLUMNS' or 'ROWS'.")
        dimension_range = {
            'sheetId': self.sheet_id,
            'dimension': dimension
        }
        if start_index is not None:
            dimension_range['startIndex'] = start_index
        if end_index is not None:
            dimension_range['endIndex'] = end_index

        self.parent_spreadsheet._make_single_update_request('updateDimensionProperties', {
            'range': dimension_range,
            'properties': properties,
            'fields': get_field_mask(properties)
        })

    def clear(self):
        """Clears all values of this sheet."""
        self.client.values_clear(self.parent_spreadsheet.spreadsheet_id, self.a1_sheet_name)
        self.header_values = None
        self.reset_local_cells()

    def delete(self):
        self.parent_spreadsheet.delete_sheet(self.sheet_id)

    def copy_to_spreadsheet(self, destination_spreadsheet_id):
        """Copies this sheet into another spreadsheet.

        :returns: SheetProperties json of the copy
        """
        return self.client.copy_sheet_to(self.parent_spreadsheet.spreadsheet_id, self.sheet_id,
                                         destination_spreadsheet_id)


class Row:
    """The class that represents a row below the header row.

    Values are accessed by header: row['name'], row['name'] = 'value'.

    :param sheet: Worksheet object
    :param row_number: int (one-based)
    :param data: list of values
    """

    def __init__(self, sheet, row_number, data):
        self._sheet = sheet
        self._row_number = row_number
        self._raw_data = list(data)

    def __repr__(self):
        return '<Row {}>'.format(self._row_number)

    @property
    def row_number(self):
        return self._row_number

    @property
    def a1_range(self):
        width = max(len(self._sheet.header_values or []), len(self._raw_data), 1)
        return '{}!A{row}:{}{row}'.format(self._sheet.a1_sheet_name, column_to_letter(width),
                                          row=self._row_number)

    def _column_of(self, header):
        try:
            return self._sheet.header_values.index(header)
        except (AttributeError, ValueError):
            raise KeyError(header) from None

    def __getitem__(self, header):
        index = self._column_of(header)
        return self._raw_data[index] if index < len(self._raw_data) else ''

    def __setitem__(self, header, value):
        index = self._column_of(header)
        if index >= len(self._raw_data):
            self._raw_data.extend([''] * (index + 1 - len(self._raw_data)))
        self._raw_data[index] = value

    def to_dict(self):
        return {header: self[header] for header in self._sheet.header_values or []}

    def save(self):
        """Writes values of this row."""
        a1_range = self.a1_range
        response = self._sheet.client.values_update(
            self._sheet.parent_spreadsheet.spreadsheet_id, a1_range,
            body={
                'range': a1_range,
                'majorDimension': 'ROWS',
                'values': [self._raw_data]
            },
            valueInputOption='USER_ENTERED',
            includeValuesInResponse=True)
        self._raw_data = response.get('updatedData', {}).get('values', [[]])[0]

    def delete(self):
        """Deletes this row from the sheet. Rows below it move up."""
        self._sheet.parent_spreadsheet._make_single_update_request('deleteDimension', {
            'range': {
                'sheetId': self._sheet.sheet_id,
                'dimension': 'ROWS',
                'startIndex': self._row_number - 1,
                'endIndex': self._row_number
            }
        })
