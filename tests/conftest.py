"""
Test fixtures for the image uploader.
"""
import re
import threading
import time

import pytest
import requests
from requests.adapters import HTTPAdapter

ENDPOINT = "http://uploads.test/images"


class RecordingAdapter(HTTPAdapter):
    """Transport adapter that records prepared requests instead of sending them.

    Args:
        status: Status code to answer with, or a callable taking the
            prepared request and returning one
        error: Exception to raise instead of answering
        delay: Seconds to hold each request before answering
    """

    def __init__(self, status=201, error=None, delay=0.0):
        super().__init__()
        self.status = status
        self.error = error
        self.delay = delay
        self.requests = []
        self._lock = threading.Lock()

    def send(self, request, **kwargs):
        with self._lock:
            self.requests.append(request)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error

        response = requests.Response()
        response.status_code = self.status(request) if callable(self.status) else self.status
        response.request = request
        response.url = request.url
        response.headers["Content-Type"] = "application/json"
        response._content = b"{}"
        return response


def parse_multipart(request):
    """Split a prepared multipart request into {field: (filename, payload)}."""
    content_type = request.headers["Content-Type"]
    boundary = content_type.split("boundary=", 1)[1].encode()
    parts = {}
    for chunk in request.body.split(b"--" + boundary)[1:-1]:
        head, _, payload = chunk.partition(b"\r\n\r\n")
        name = re.search(rb'; name="([^"]*)"', head).group(1).decode()
        filename = re.search(rb'filename="([^"]*)"', head)
        parts[name] = (filename.group(1).decode() if filename else None, payload[:-2])
    return parts


@pytest.fixture
def tmp_upload_dir(tmp_path):
    """Create a temporary directory for test files."""
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    return upload_dir


@pytest.fixture
def adapter():
    return RecordingAdapter()


@pytest.fixture
def session(adapter):
    """Session whose HTTP traffic goes to the recording adapter."""
    s = requests.Session()
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    yield s
    s.close()


@pytest.fixture
def sleeps():
    """Collects retry delays instead of sleeping."""
    return []


@pytest.fixture
def image_file(tmp_upload_dir):
    path = tmp_upload_dir / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg body")
    return path


@pytest.fixture
def endpoint():
    return ENDPOINT


@pytest.fixture
def multipart():
    """Parser for the multipart bodies captured by the adapter."""
    return parse_multipart
