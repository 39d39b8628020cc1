"""
client
~~~~~~

This module contains Client class responsible for communicating with
Google Sheets API v4.

And it also contains classes for checking write quota.
Client automatically adjusts the speed of executing write requests
(create, batchUpdate, values.update/append/clear, sheets.copyTo).
Write quota is now 60 write requests per minute per user per project.
Reads are not paced.

For more info about quota, visit the following page.

https://developers.google.com/sheets/api/limits

"""

import logging
import math
import time
from functools import wraps
from pprint import pformat

from .api_service import create_service, get_service_account_credentials
from .models import Spreadsheet

logger = logging.getLogger(__name__)

WRITE_QUOTA_LIMIT = 60
WRITE_QUOTA_WINDOW = 60  # seconds


class TimeRequestTable:
    """Cumulative number of executed requests, one entry per second since start."""

    def __init__(self):
        self.time_table = []

    @property
    def end_time(self):
        return len(self.time_table) - 1

    def register(self, elapsed_time, num_of_executed_requests):
        # rounding up registers a request later than it happened, which keeps us under the quota
        second = int(math.ceil(elapsed_time))
        last_num_of_executed_requests = self.time_table[-1] if self.time_table else 0
        while len(self.time_table) <= second:
            self.time_table.append(last_num_of_executed_requests)
        self.time_table[second] = num_of_executed_requests

    def get_requests_num_at(self, elapsed_time):
        # rounding down overestimates requests in the window, which keeps us under the quota
        second = int(math.floor(elapsed_time))
        if second < 0 or not self.time_table:
            return 0
        if second > self.end_time:
            return self.time_table[-1]
        return self.time_table[second]


class WriteQuota:
    """Paces write requests to stay under limit requests per window seconds.

    :param limit: int
    :param window: int (seconds)
    :param clock: callable returning current time in seconds
    :param sleep: callable sleeping for the given seconds
    """

    def __init__(self, limit=WRITE_QUOTA_LIMIT, window=WRITE_QUOTA_WINDOW, clock=time.time, sleep=time.sleep):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self.time_start = clock()
        self.num_of_executed_requests = 0
        self.time_requests_table = TimeRequestTable()

    def elapsed_time(self):
        return self._clock() - self.time_start

    def wait(self):
        """Sleeps for proper time if executing one more request now would exceed the quota.

        :returns: float (seconds slept)
        """
        elapsed_time = self.elapsed_time()
        future_executed_requests_num = self.num_of_executed_requests + 1
        sleep_time = 0
        if elapsed_time < self.window:
            if future_executed_requests_num > self.limit:
                sleep_time = self.window - elapsed_time
        else:
            requests_num_last_window = future_executed_requests_num \
                - self.time_requests_table.get_requests_num_at(elapsed_time - self.window)
            if requests_num_last_window > self.limit:
                for i in range(1, int(math.ceil(self.window)) + 1):
                    in_window = future_executed_requests_num \
                        - self.time_requests_table.get_requests_num_at(elapsed_time - self.window + i)
                    if in_window <= self.limit:
                        break
                sleep_time = i

        if sleep_time > 0:
            logger.info("Write quota of %s requests per %s seconds reached, sleeping for %.1f seconds",
                        self.limit, self.window, sleep_time)
            self._sleep(sleep_time)
        return sleep_time

    def register(self):
        self.num_of_executed_requests += 1
        self.time_requests_table.register(self.elapsed_time(), self.num_of_executed_requests)


def under_write_quota(execute_function):
    """Quota limit test decorator for Client methods.
    """

    @wraps(execute_function)
    def wrapper(self, *args, **kwargs):
        self.write_quota.wait()
        result = execute_function(self, *args, **kwargs)
        self.write_quota.register()
        return result

    return wrapper


class Client:
    """An instance of this class communicates with Google Sheets API.

    The service is created on first use unless one is given.

    :param service: Sheets API service object (optional)
    :param credentials: google.auth credentials (optional)
    :param api_key: str (optional, read-only access to public spreadsheets)
    :param write_quota: WriteQuota object (optional)
    """

    def __init__(self, service=None, credentials=None, api_key=None, write_quota=None):
        self._service = service
        self._credentials = credentials
        self._api_key = api_key
        self.write_quota = write_quota or WriteQuota()

    @classmethod
    def from_service_account(cls, keyfile_or_info, **kwargs):
        """Returns Client authenticated with a service account key (path or dict)."""
        return cls(credentials=get_service_account_credentials(keyfile_or_info), **kwargs)

    @classmethod
    def from_api_key(cls, api_key, **kwargs):
        return cls(api_key=api_key, **kwargs)

    @property
    def service(self):
        if self._service is None:
            self._service = create_service(credentials=self._credentials, api_key=self._api_key)
        return self._service

    @staticmethod
    def _log_response(method_name, response):
        logger.debug("%s response:\n%s", method_name, pformat(response))
        return response

    @under_write_quota
    def create_spreadsheet(self, title, **properties):
        """Create a spreadsheet file whose title is title and returns it

        :param title: str
        :param properties: other SpreadsheetProperties (locale, timeZone, ...)
        :returns: Spreadsheet object
        """
        spreadsheet_body = {
            'properties': dict(properties, title=title)
        }
        request = self.service.spreadsheets().create(body=spreadsheet_body)
        response = self._log_response('create', request.execute())
        return Spreadsheet(self, response['spreadsheetId'], response)

    def open_by_id(self, spreadsheet_id, include_cells=False):
        """Returns Spreadsheet object corresponding to spreadsheet_id

        :param spreadsheet_id: str
        :param include_cells: bool (load every cell of every sheet too)
        :returns: Spreadsheet object
        """
        spreadsheet = Spreadsheet(self, spreadsheet_id)
        spreadsheet.get_info(include_cells=include_cells)
        return spreadsheet

    def get_spreadsheet(self, spreadsheet_id, include_grid_data=False):
        request = self.service.spreadsheets().get(spreadsheetId=spreadsheet_id,
                                                  includeGridData=include_grid_data)
        return self._log_response('get', request.execute())

    def get_by_data_filter(self, spreadsheet_id, body):
        request = self.service.spreadsheets().getByDataFilter(spreadsheetId=spreadsheet_id, body=body)
        return self._log_response('getByDataFilter', request.execute())

    @under_write_quota
    def batch_update(self, spreadsheet_id, body):
        """Executes a batchUpdate of the spreadsheet whose spreadsheet id is spreadsheet_id.

        :param spreadsheet_id: str
        :param body: BatchUpdateSpreadsheetRequest json
        :returns: BatchUpdateSpreadsheetResponse json
        """
        logger.debug("batchUpdate of %s with %d requests", spreadsheet_id, len(body.get('requests', [])))
        request = self.service.spreadsheets().batchUpdate(spreadsheetId=spreadsheet_id, body=body)
        return self._log_response('batchUpdate', request.execute())

    def values_get(self, spreadsheet_id, a1_range, **params):
        request = self.service.spreadsheets().values().get(spreadsheetId=spreadsheet_id, range=a1_range,
                                                           **params)
        return self._log_response('values.get', request.execute())

    @under_write_quota
    def values_update(self, spreadsheet_id, a1_range, body, **params):
        request = self.service.spreadsheets().values().update(spreadsheetId=spreadsheet_id, range=a1_range,
                                                              body=body, **params)
        return self._log_response('values.update', request.execute())

    @under_write_quota
    def values_append(self, spreadsheet_id, a1_range, body, **params):
        request = self.service.spreadsheets().values().append(spreadsheetId=spreadsheet_id, range=a1_range,
                                                              body=body, **params)
        return self._log_response('values.append', request.execute())

    @under_write_quota
    def values_clear(self, spreadsheet_id, a1_range):
        request = self.service.spreadsheets().values().clear(spreadsheetId=spreadsheet_id, range=a1_range,
                                                             body={})
        return self._log_response('values.clear', request.execute())

    @under_write_quota
    def copy_sheet_to(self, spreadsheet_id, sheet_id, destination_spreadsheet_id):
        request = self.service.spreadsheets().sheets().copyTo(
            spreadsheetId=spreadsheet_id, sheetId=sheet_id,
            body={'destinationSpreadsheetId': destination_spreadsheet_id})
        return self._log_response('sheets.copyTo', request.execute())
