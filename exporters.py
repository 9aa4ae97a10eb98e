"""
The three export flows: HTML -> Google Doc, HTML table -> Google Sheet and
HTML -> Google Slides deck.

Each flow is a fixed sequence of Google API calls made with the caller's
access token. Nothing is retried. If a step fails after a remote file was
created, that file stays in the caller's Drive unless `cleanup_on_failure`
is set, in which case it is deleted best-effort before the error propagates.
"""
import io
import logging
from typing import List

from googleapiclient.http import MediaIoBaseUpload

import google_services
from document_converter import (
    DOCX_MIME_TYPE,
    GOOGLE_DOC_MIME_TYPE,
    build_direction_request,
    document_end_index,
    html_to_docx,
    paragraph_direction,
)
from models import SlideRecord
from sheet_builder import VALUES_ORIGIN, build_sheet_format_requests, extract_table_values
from slides_layout import DEFAULT_THEME, DESCRIPTION_TOP, SlideTheme, build_slide_requests

DEFAULT_SHEET_TITLE = "Styled Sheet"
DEFAULT_PRESENTATION_TITLE = "My Presentation"


def _cleanup(access_token: str, file_id: str, enabled: bool):
    if not enabled:
        logging.warning(f"Leaving partially built file {file_id} in Drive")
        return
    try:
        drive = google_services.build_service("drive", "v3", access_token)
    except Exception as e:
        logging.warning(f"Could not build Drive client to delete {file_id}: {e}")
        return
    google_services.discard_file(drive, file_id)


def export_document(html: str, access_token: str, file_name: str, cleanup_on_failure: bool = False) -> str:
    """Uploads the HTML as a Google Doc and sets the paragraph direction of the whole body."""
    direction = paragraph_direction(html)

    logging.info("Converting HTML to DOCX...")
    docx_bytes = html_to_docx(html)

    # One in-memory buffer per request; nothing touches the filesystem
    media = MediaIoBaseUpload(io.BytesIO(docx_bytes), mimetype=DOCX_MIME_TYPE, resumable=False)

    drive = google_services.build_service("drive", "v3", access_token)
    logging.info(f"Uploading '{file_name}' to Google Drive as a Google Doc")
    created = drive.files().create(
        body={"name": file_name, "mimeType": GOOGLE_DOC_MIME_TYPE},
        media_body=media,
        fields="id",
    ).execute()
    document_id = created["id"]

    try:
        docs = google_services.build_service("docs", "v1", access_token)
        document = docs.documents().get(documentId=document_id).execute()
        end_index = document_end_index(document)

        logging.info(f"Applying {direction} to document {document_id} (end index {end_index})")
        docs.documents().batchUpdate(
            documentId=document_id,
            body={"requests": [build_direction_request(end_index, direction)]},
        ).execute()
    except Exception:
        _cleanup(access_token, document_id, cleanup_on_failure)
        raise

    return google_services.document_url(document_id)


def export_sheet(html: str, access_token: str, title: str = DEFAULT_SHEET_TITLE,
                 cleanup_on_failure: bool = False) -> str:
    """Copies the first HTML table into a new spreadsheet with a styled header and banded rows."""
    values = extract_table_values(html)
    logging.info(f"Extracted {len(values)} table rows")

    sheets = google_services.build_service("sheets", "v4", access_token)
    created = sheets.spreadsheets().create(body={"properties": {"title": title}}).execute()
    spreadsheet_id = created["spreadsheetId"]

    try:
        sheets.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=VALUES_ORIGIN,
            valueInputOption="RAW",
            body={"values": values},
        ).execute()

        sheets.spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={"requests": build_sheet_format_requests(values)},
        ).execute()
    except Exception:
        _cleanup(access_token, spreadsheet_id, cleanup_on_failure)
        raise

    return google_services.spreadsheet_url(spreadsheet_id)


def presentation_title(file_name) -> str:
    if file_name and file_name.strip():
        return file_name
    return DEFAULT_PRESENTATION_TITLE


def export_presentation(slides: List[SlideRecord], access_token: str, title: str,
                        description_top: float = DESCRIPTION_TOP,
                        theme: SlideTheme = DEFAULT_THEME,
                        cleanup_on_failure: bool = False) -> str:
    """Creates a presentation, drops its default slide and fills it in one batchUpdate."""
    slides_api = google_services.build_service("slides", "v1", access_token)

    # Step 1: Create presentation
    created = slides_api.presentations().create(body={"title": title}).execute()
    presentation_id = created["presentationId"]
    logging.info(f"Created presentation {presentation_id} ('{title}')")

    try:
        # Step 2: Delete default slide
        presentation = slides_api.presentations().get(presentationId=presentation_id).execute()
        default_slides = presentation.get("slides") or []
        if default_slides:
            slides_api.presentations().batchUpdate(
                presentationId=presentation_id,
                body={"requests": [{"deleteObject": {"objectId": default_slides[0]["objectId"]}}]},
            ).execute()

        # Step 3: Build every slide in a single batch
        requests = build_slide_requests(slides, description_top, theme)
        logging.info(f"Submitting {len(requests)} requests for {len(slides)} slides")
        slides_api.presentations().batchUpdate(
            presentationId=presentation_id,
            body={"requests": requests},
        ).execute()
    except Exception:
        _cleanup(access_token, presentation_id, cleanup_on_failure)
        raise

    return google_services.presentation_url(presentation_id)
