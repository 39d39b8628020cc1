import sample_code
from gsheetscells.client import Client

from fakes import FakeService, batch_update_response, grid_data, sheet_json, spreadsheet_json


def test_sample_write_runs_on_a_new_spreadsheet():
    service = FakeService({
        'create': spreadsheet_json(spreadsheet_id='new-id'),
        'values.update': {},
        'getByDataFilter': spreadsheet_json([sheet_json(data=[
            grid_data([[0, 0, 0, 0]] * 3, start_row=1, start_column=1),
        ])], spreadsheet_id='new-id'),
        'batchUpdate': batch_update_response(spreadsheet_json([sheet_json()], spreadsheet_id='new-id'),
                                             replies=[{}, {}, {}]),
    })

    sheet = sample_code.sample_write(Client(service=service))

    assert service.calls_of('values.update')[0]['range'] == "'Sheet1'!B2:E4"
    body = service.calls_of('batchUpdate')[0]['body']
    assert body['responseRanges'] == ["'Sheet1'!B2:E2", "'Sheet1'!B3:D3", "'Sheet1'!B4:D4"]
    assert sheet.get_cell_by_a1('D4').value == 9
    assert sheet.get_cell_by_a1('E2').formula == '=SUM(B2:D2)'
    assert sheet.get_cell_by_a1('E3').value == 0
