"""
sample_code.py
~~~~~~~~~~

sample code.

"client_secret.json" file of your OAuth2 credentials from Google Developers Console
should be in the same directory with this code.

If you don't know how to get your own "client_secret.json" file,
Please visit the following page.

https://developers.google.com/sheets/api/quickstart/python

"""

import logging

from gsheetscells import Client


def sample_read():
    """URL of sample spreadsheet for this sample function is

    https://docs.google.com/spreadsheets/d/1Q5jSop27MzBdhirmFEw_FsNw7stNsRbiZPmjL6cwlc0/

    """
    client = Client()
    ss = client.open_by_id(spreadsheet_id='1Q5jSop27MzBdhirmFEw_FsNw7stNsRbiZPmjL6cwlc0')
    sheet = ss.get_sheet_by_title('Sheet1')
    print('number of rows of Sheet1:', sheet.row_count)
    print('number of columns of Sheet1:', sheet.column_count)
    print()

    sheet.load_cells('A1:D10')
    print('cells loaded:', sheet.cells_loaded)

    b5 = sheet.get_cell_by_a1('B5')
    print('Value of Cell B5:', b5.value, type(b5.value))
    print('Display Value of Cell B5:', b5.formatted_value)
    print('Formula of Cell B5:', b5.formula)
    print()

    for row in sheet.get_rows(limit=5):
        print(row.row_number, row.to_dict())


def sample_write(client=None):
    client = client or Client()
    ss = client.create_spreadsheet(title='This_is_title_of_new_spreadsheet')
    sheet = ss.get_sheet_by_index(0)    # get first sheet

    # A new sheet is empty, and empty cells come back from the API as nothing to load.
    # Put starting values in B2:E4 first, so that load_cells has cells to return.
    a1_range = '{}!B2:E4'.format(sheet.a1_sheet_name)
    client.values_update(ss.spreadsheet_id, a1_range,
                         body={'range': a1_range, 'majorDimension': 'ROWS', 'values': [[0] * 4] * 3},
                         valueInputOption='RAW')

    sheet.load_cells('B2:E4')
    for row in range(1, 4):
        for col in range(1, 4):
            sheet.get_cell(row, col).value = (row - 1) * 3 + col
    sheet.get_cell_by_a1('E2').formula = '=SUM(B2:D2)'
    # B2:E2, B3:D3 and B4:D4 are runs of consecutive cells: one batchUpdate with three updateCells requests
    sheet.save_updated_cells()

    print('Value of Cell D4:', sheet.get_cell_by_a1('D4').value)
    return sheet


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    sample_read()
#   sample_write()
