"""Fake Sheets API service and JSON builders shared by the tests."""

import copy


class FakeRequest:
    def __init__(self, service, method, kwargs):
        self.service = service
        self.method = method
        self.kwargs = kwargs

    def execute(self):
        self.service.calls.append((self.method, self.kwargs))
        response = self.service.responses.get(self.method)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(**self.kwargs)
        return copy.deepcopy(response) if response is not None else {}


class FakeResource:
    def __init__(self, service, prefix=''):
        self.service = service
        self.prefix = prefix

    def values(self):
        return FakeResource(self.service, 'values.')

    def sheets(self):
        return FakeResource(self.service, 'sheets.')

    def __getattr__(self, name):
        def method(**kwargs):
            return FakeRequest(self.service, self.prefix + name, kwargs)
        return method


class FakeService:
    """Mimics service.spreadsheets().<method>(...).execute().

    responses maps a method name ('get', 'batchUpdate', 'values.append', ...) to
    the json it returns, an exception it raises, or a callable building the json
    from the request keyword arguments.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def spreadsheets(self):
        return FakeResource(self)

    def calls_of(self, method):
        return [kwargs for name, kwargs in self.calls if name == method]


def cell_data(value):
    if isinstance(value, bool):
        kind = 'boolValue'
    elif isinstance(value, (int, float)):
        kind = 'numberValue'
    else:
        kind = 'stringValue'
    return {
        'userEnteredValue': {kind: value},
        'effectiveValue': {kind: value},
        'formattedValue': str(value),
    }


def grid_data(rows, start_row=0, start_column=0):
    """GridData json of rows (list of lists of python values, None for an empty cell)."""
    return {
        'startRow': start_row,
        'startColumn': start_column,
        'rowData': [{'values': [cell_data(v) if v is not None else {} for v in row]} for row in rows],
        'rowMetadata': [{'pixelSize': 21} for _ in rows],
        'columnMetadata': [{'pixelSize': 100} for _ in (rows[0] if rows else [])],
    }


def sheet_json(sheet_id=0, title='Sheet1', index=0, row_count=10, column_count=5, data=None):
    sheet = {
        'properties': {
            'sheetId': sheet_id,
            'title': title,
            'index': index,
            'sheetType': 'GRID',
            'gridProperties': {'rowCount': row_count, 'columnCount': column_count},
        }
    }
    if data is not None:
        sheet['data'] = data
    return sheet


def spreadsheet_json(sheets=None, title='Test spreadsheet', spreadsheet_id='ss-id'):
    return {
        'spreadsheetId': spreadsheet_id,
        'properties': {'title': title, 'locale': 'en_US', 'timeZone': 'Etc/GMT', 'autoRecalc': 'ON_CHANGE'},
        'sheets': sheets if sheets is not None else [sheet_json()],
    }


def batch_update_response(spreadsheet=None, replies=None):
    return {
        'spreadsheetId': 'ss-id',
        'replies': replies if replies is not None else [{}],
        'updatedSpreadsheet': spreadsheet if spreadsheet is not None else spreadsheet_json(),
    }
