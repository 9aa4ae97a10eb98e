import logging

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

DOCUMENT_URL = "https://docs.google.com/document/d/{}/edit"
SPREADSHEET_URL = "https://docs.google.com/spreadsheets/d/{}/edit"
PRESENTATION_URL = "https://docs.google.com/presentation/d/{}/edit"


def credentials_from_token(access_token: str) -> Credentials:
    """Wraps a caller-supplied OAuth access token. No refresh, no validation."""
    return Credentials(token=access_token)


def build_service(name: str, version: str, access_token: str):
    """Builds a Google API client for one request, authorized with the caller's token."""
    return build(name, version, credentials=credentials_from_token(access_token), cache_discovery=False)


def document_url(document_id: str) -> str:
    return DOCUMENT_URL.format(document_id)


def spreadsheet_url(spreadsheet_id: str) -> str:
    return SPREADSHEET_URL.format(spreadsheet_id)


def presentation_url(presentation_id: str) -> str:
    return PRESENTATION_URL.format(presentation_id)


def discard_file(drive, file_id: str) -> bool:
    """
    Best-effort delete of a file created earlier in a failed request.
    Returns True when Drive accepted the delete.
    """
    try:
        drive.files().delete(fileId=file_id).execute()
    except Exception as e:
        logging.warning(f"Could not delete orphaned file {file_id}: {e}")
        return False
    logging.info(f"Deleted orphaned file {file_id}")
    return True
