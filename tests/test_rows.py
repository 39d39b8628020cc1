import pytest

from gsheetscells.client import Client

from fakes import FakeService, batch_update_response, spreadsheet_json

VALUES = {
    "'Sheet1'!A1:E1": {'values': [['name', 'age']]},
    "'Sheet1'!A2:B10": {'values': [['alice', '31'], ['bob']]},
    "'Sheet1'!A3:B4": {'values': [['bob']]},
}


def values_get(spreadsheetId, range, **params):
    return VALUES.get(range, {})


@pytest.fixture
def service():
    return FakeService({
        'get': spreadsheet_json(),
        'values.get': values_get,
        'batchUpdate': batch_update_response(),
    })


@pytest.fixture
def sheet(service):
    return Client(service=service).open_by_id('ss-id').get_sheet_by_index(0)


def test_load_header_row(sheet, service):
    sheet.load_header_row()
    assert sheet.header_values == ['name', 'age']
    assert service.calls_of('values.get')[0]['range'] == "'Sheet1'!A1:E1"


def test_get_cells_in_range(sheet, service):
    assert sheet.get_cells_in_range('A1:E1', valueRenderOption='FORMULA') == [['name', 'age']]
    assert service.calls_of('values.get')[0]['valueRenderOption'] == 'FORMULA'
    assert sheet.get_cells_in_range('C1:C2') is None


def test_get_rows(sheet):
    rows = sheet.get_rows()

    assert [row.row_number for row in rows] == [2, 3]
    assert rows[0]['name'] == 'alice'
    assert rows[0].to_dict() == {'name': 'alice', 'age': '31'}
    assert rows[1]['age'] == ''
    with pytest.raises(KeyError):
        rows[0]['email']


def test_get_rows_with_offset_and_limit(sheet):
    rows = sheet.get_rows(offset=1, limit=2)
    assert [row.row_number for row in rows] == [3]


def test_get_rows_stops_at_last_row_of_sheet(sheet, service):
    assert sheet.get_rows(offset=8) == []
    assert service.calls_of('values.get')[-1]['range'] == "'Sheet1'!A10:B10"

    assert sheet.get_rows(offset=9) == []
    assert len(service.calls_of('values.get')) == 2


def test_get_rows_of_sheet_without_headers(sheet):
    sheet.header_values = []
    assert sheet.get_rows() == []


def test_add_row_from_dict(sheet, service):
    service.responses['values.append'] = {'updates': {
        'updatedRange': "'Sheet1'!A4:B4",
        'updatedData': {'values': [['carol', '40']]},
    }}

    row = sheet.add_row({'age': 40, 'name': 'carol'})

    call = service.calls_of('values.append')[0]
    assert call['range'] == "'Sheet1'"
    assert call['body'] == {'values': [['carol', 40]]}
    assert call['valueInputOption'] == 'USER_ENTERED'
    assert row.row_number == 4
    assert row['age'] == '40'


def test_add_row_from_list(sheet, service):
    service.responses['values.append'] = {'updates': {'updatedRange': "'Sheet1'!A5:C5"}}
    row = sheet.add_row(['dave', 22, 'extra'])
    assert service.calls_of('values.append')[0]['body'] == {'values': [['dave', 22, 'extra']]}
    assert row.row_number == 5


def test_add_row_rejects_other_types(sheet):
    sheet.header_values = ['name']
    with pytest.raises(TypeError):
        sheet.add_row('dave')


def test_set_header_row_too_wide(sheet, service):
    with pytest.raises(ValueError):
        sheet.set_header_row(['a', 'b', 'c', 'd', 'e', 'f'])
    assert service.calls_of('values.update') == []


def test_row_save(sheet, service):
    service.responses['values.update'] = {'updatedData': {'values': [['alice', '32']]}}
    row = sheet.get_rows()[0]

    row['age'] = 32
    row.save()

    call = service.calls_of('values.update')[0]
    assert call['range'] == "'Sheet1'!A2:B2"
    assert call['body']['values'] == [['alice', 32]]
    assert row['age'] == '32'


def test_row_set_extends_short_row(sheet):
    row = sheet.get_rows()[1]
    row['age'] = 19
    assert row.to_dict() == {'name': 'bob', 'age': 19}


def test_row_delete(sheet, service):
    row = sheet.get_rows()[1]
    row.delete()
    assert service.calls_of('batchUpdate')[0]['body']['requests'] == [{'deleteDimension': {
        'range': {'sheetId': 0, 'dimension': 'ROWS', 'startIndex': 2, 'endIndex': 3},
    }}]
