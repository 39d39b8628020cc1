import pytest

from gsheetscells import client as client_module
from gsheetscells.client import Client, TimeRequestTable, WriteQuota

from fakes import FakeService, spreadsheet_json


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def make_quota(clock, limit=2, window=10):
    return WriteQuota(limit=limit, window=window, clock=clock, sleep=clock.sleep)


def execute(quota):
    slept = quota.wait()
    quota.register()
    return slept


def test_time_request_table():
    table = TimeRequestTable()
    assert table.get_requests_num_at(3) == 0

    table.register(0.5, 1)
    table.register(0.7, 2)
    table.register(3.2, 3)

    assert table.time_table == [0, 2, 2, 2, 3]
    assert table.get_requests_num_at(0.9) == 0
    assert table.get_requests_num_at(1.5) == 2
    assert table.get_requests_num_at(4) == 3
    assert table.get_requests_num_at(100) == 3
    assert table.get_requests_num_at(-5) == 0


def test_quota_lets_requests_through_under_the_limit(clock):
    quota = make_quota(clock)
    clock.now = 1
    assert execute(quota) == 0
    assert execute(quota) == 0
    assert clock.sleeps == []


def test_quota_sleeps_until_first_window_ends(clock):
    quota = make_quota(clock)
    clock.now = 1
    execute(quota)
    execute(quota)

    execute(quota)

    assert clock.sleeps == [9]
    assert quota.num_of_executed_requests == 3


def test_quota_sleeps_until_old_requests_leave_the_window(clock):
    quota = make_quota(clock)
    clock.now = 11
    execute(quota)
    execute(quota)
    clock.now = 12

    execute(quota)

    assert clock.sleeps == [9]
    clock.now = 25
    assert execute(quota) == 0


def test_service_is_created_lazily(monkeypatch):
    created = []

    def fake_create_service(credentials=None, api_key=None):
        created.append((credentials, api_key))
        return FakeService({'get': spreadsheet_json()})

    monkeypatch.setattr(client_module, 'create_service', fake_create_service)

    client = Client.from_api_key('my-key')
    assert created == []

    spreadsheet = client.open_by_id('ss-id')

    assert created == [(None, 'my-key')]
    assert spreadsheet.title == 'Test spreadsheet'
    client.open_by_id('ss-id')
    assert len(created) == 1


def test_from_service_account(monkeypatch):
    monkeypatch.setattr(client_module, 'get_service_account_credentials', lambda info: ('credentials', info))
    client = Client.from_service_account({'client_email': 'robot@example.com'})
    assert client._credentials == ('credentials', {'client_email': 'robot@example.com'})


def test_create_spreadsheet(clock):
    service = FakeService({'create': spreadsheet_json(spreadsheet_id='new-id', title='Budget')})
    client = Client(service=service, write_quota=make_quota(clock, limit=10))

    spreadsheet = client.create_spreadsheet('Budget', locale='en_GB')

    assert service.calls_of('create') == [{'body': {'properties': {'locale': 'en_GB', 'title': 'Budget'}}}]
    assert spreadsheet.spreadsheet_id == 'new-id'
    assert spreadsheet.title == 'Budget'
    assert spreadsheet.get_sheet_by_index(0).title == 'Sheet1'


def test_only_writes_count_against_quota(clock):
    service = FakeService({'get': spreadsheet_json(), 'batchUpdate': {'replies': []}})
    quota = make_quota(clock, limit=10)
    client = Client(service=service, write_quota=quota)

    client.get_spreadsheet('ss-id')
    client.values_get('ss-id', 'A1')
    client.batch_update('ss-id', {'requests': []})
    client.values_clear('ss-id', "'Sheet1'")

    assert quota.num_of_executed_requests == 2


def test_failed_write_is_not_registered(clock):
    service = FakeService({'batchUpdate': RuntimeError('transport down')})
    quota = make_quota(clock)
    client = Client(service=service, write_quota=quota)

    with pytest.raises(RuntimeError):
        client.batch_update('ss-id', {'requests': []})
    assert quota.num_of_executed_requests == 0
