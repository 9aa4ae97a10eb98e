import base64
import logging
import os
from typing import Any, Dict, Optional

import requests

# Base URL of a running export service
SERVICE_URL = os.getenv("DRIVE_EXPORT_SERVICE_URL", "http://localhost:3000")


class ServiceError(Exception):
    """Raised when the export service answers with a non-2xx status."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def encode_html(html: str) -> str:
    return base64.b64encode(html.encode("utf-8")).decode("ascii")


class DriveExportClient:
    """
    Thin HTTP client for the export service.

    Every call takes plain HTML, encodes it, and returns the parsed JSON
    response (``{"url": ...}`` on success).
    """

    def __init__(self, base_url: str = SERVICE_URL, session: Optional[requests.Session] = None,
                 timeout: float = 120.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logging.info(f"Forwarding HTML to export service: {url}")
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()  # Raise an exception for HTTP errors (4xx or 5xx)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            try:
                detail = e.response.json().get("error", e.response.text)
            except ValueError:
                detail = e.response.text
            logging.error(f"Export service returned an error. Status: {status}. Detail: {detail}")
            raise ServiceError(status, detail) from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Could not reach export service: {e}")
            raise ServiceError(None, str(e)) from e

        return response.json()

    def upload_doc(self, html: str, access_token: str, file_name: str) -> Dict[str, Any]:
        return self._post("/upload-doc", {
            "html_base64": encode_html(html),
            "access_token": access_token,
            "file_name": file_name,
        })

    def create_styled_sheet(self, html: str, access_token: str, title: Optional[str] = None) -> Dict[str, Any]:
        payload = {"html_base64": encode_html(html), "access_token": access_token}
        if title is not None:
            payload["title"] = title
        return self._post("/create-styled-sheet", payload)

    def create_slides(self, html: str, access_token: str, file_name: Optional[str] = None) -> Dict[str, Any]:
        return self._post("/create-slides", {
            "html_base64": encode_html(html),
            "access_token": access_token,
            "file_name": file_name,
        })

    def create_slides_show(self, html: str, access_token: str, file_name: Optional[str] = None) -> Dict[str, Any]:
        return self._post("/create-slides-show", {
            "html_base64": encode_html(html),
            "access_token": access_token,
            "file_name": file_name,
        })
