import pytest
from fastapi.testclient import TestClient

import google_services
from config import Settings
from main import create_app


class FakeCall:
    def __init__(self, google, key, kwargs):
        self.google = google
        self.key = key
        self.kwargs = kwargs

    def execute(self):
        self.google.calls.append((self.key, self.kwargs))
        response = self.google.responses.get(self.key, {})
        if isinstance(response, Exception):
            raise response
        return response


class FakeResource:
    """Mimics googleapiclient resources: `svc.files().create(**kw).execute()`."""

    def __init__(self, google, path):
        self._google = google
        self._path = path

    def __getattr__(self, name):
        def method(**kwargs):
            key = f"{self._path}.{name}"
            if kwargs:
                return FakeCall(self._google, key, kwargs)
            return FakeResource(self._google, key)
        return method


class FakeGoogle:
    def __init__(self):
        self.calls = []
        self.built = []
        self.responses = {
            "drive.files.create": {"id": "doc-123"},
            "docs.documents.get": {"body": {"content": [{"endIndex": 1}, {"endIndex": 42}]}},
            "sheets.spreadsheets.create": {"spreadsheetId": "sheet-123"},
            "slides.presentations.create": {"presentationId": "pres-123"},
            "slides.presentations.get": {"slides": [{"objectId": "p"}]},
        }

    def build_service(self, name, version, access_token):
        self.built.append((name, version, access_token))
        return FakeResource(self, name)

    def called(self, key):
        return [kwargs for k, kwargs in self.calls if k == key]


@pytest.fixture
def google(monkeypatch):
    fake = FakeGoogle()
    monkeypatch.setattr(google_services, "build_service", fake.build_service)
    return fake


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
