"""
api_service
~~~~~~~~~~~

This module contains functions to get credentials and a service of Google Sheets API v4.

Three ways to authenticate are supported:

* OAuth2 installed app flow with a client secret file (the user's own account),
* a service account key,
* an API key (read-only access to public spreadsheets).
"""

import logging
import os

import google_auth_httplib2
import httplib2
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient import discovery

logger = logging.getLogger(__name__)

# If modifying these scopes, delete your previously saved credentials
# at ~/.credentials/sheets.googleapis.com-gsheetscells.json
SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
CLIENT_SECRET_FILE = 'client_secret.json'
CREDENTIALS_DIR = os.path.join('~', '.credentials')
TOKEN_FILE_NAME = 'sheets.googleapis.com-gsheetscells.json'


def _client_secret_file():
    return os.environ.get('GSHEETSCELLS_CLIENT_SECRET', CLIENT_SECRET_FILE)


def _token_file():
    credential_dir = os.path.expanduser(os.environ.get('GSHEETSCELLS_CREDENTIALS_DIR', CREDENTIALS_DIR))
    if not os.path.exists(credential_dir):
        os.makedirs(credential_dir)
    return os.path.join(credential_dir, TOKEN_FILE_NAME)


def get_credentials(client_secret_file=None, token_file=None):
    """Gets valid user credentials from storage.

    If nothing has been stored, or if the stored credentials are invalid,
    the OAuth2 flow is completed to obtain the new credentials.

    Returns:
        Credentials, the obtained credential.
    """
    client_secret_file = client_secret_file or _client_secret_file()
    token_file = token_file or _token_file()

    credentials = None
    if os.path.exists(token_file):
        credentials = Credentials.from_authorized_user_file(token_file, SCOPES)

    if credentials and credentials.valid:
        return credentials

    if credentials and credentials.expired and credentials.refresh_token:
        credentials.refresh(Request())
    else:
        flow = InstalledAppFlow.from_client_secrets_file(client_secret_file, SCOPES)
        credentials = flow.run_local_server(port=0)

    with open(token_file, 'w') as token:
        token.write(credentials.to_json())
    logger.info("Storing credentials to %s", token_file)
    return credentials


def get_service_account_credentials(keyfile_or_info):
    """Returns service account credentials.

    :param keyfile_or_info: str (path of the JSON key file) or dict (its parsed content)
    :returns: google.oauth2.service_account.Credentials
    """
    if isinstance(keyfile_or_info, dict):
        return service_account.Credentials.from_service_account_info(keyfile_or_info, scopes=SCOPES)
    return service_account.Credentials.from_service_account_file(keyfile_or_info, scopes=SCOPES)


def create_service(credentials=None, api_key=None):
    """Creates a Sheets API service object and returns it.

    With api_key, no credentials are used. Without both, credentials of
    the installed app flow are used (see get_credentials).

    returns: Sheets API service object
    """
    if api_key is not None:
        return discovery.build('sheets', 'v4', developerKey=api_key, cache_discovery=False)

    if credentials is None:
        credentials = get_credentials()
    http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
    service = discovery.build('sheets', 'v4', http=http, cache_discovery=False)
    return service
