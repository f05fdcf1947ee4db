import tempfile

import httpx
import pytest

from gemini_context.backends.gemini import GeminiClient
from gemini_context.config import Settings

UPLOAD_SESSION_URL = "https://upload.example.com/session/1"
FILE_URI = "https://generativelanguage.googleapis.com/v1beta/files/abc123"


class FakeGemini:
    """Routes requests the way the Gemini endpoints would, and records them."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.remote_files: dict[str, bytes] = {}
        self.upload_url = UPLOAD_SESSION_URL
        self.file_uri = FILE_URI
        self.upload_status = 200
        self.generate_status = 200
        self.generate_body = b'{"candidates": []}'
        self.embed_status = 200
        # route name ("upload_start", "upload_finalize", "generate", "embed") -> transport error class
        self.transport_errors: dict[str, type[httpx.TransportError]] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if request.method == "GET":
            key = url.split("?")[0]
            if key in self.remote_files:
                return httpx.Response(200, content=self.remote_files[key])
            return httpx.Response(404, content=b"not found")

        route = self._route(request)
        if route in self.transport_errors:
            raise self.transport_errors[route](f"{route} failed", request=request)

        if route == "upload_start":
            headers = {"x-goog-upload-url": self.upload_url} if self.upload_url else {}
            return httpx.Response(200, headers=headers, content=b'{"note": "session"}')

        if route == "upload_finalize":
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, content=b"upload rejected")
            return httpx.Response(200, json={"file": {"uri": self.file_uri}})

        if route == "embed":
            if self.embed_status != 200:
                return httpx.Response(self.embed_status, content=b"embed quota exhausted")
            return httpx.Response(200, json={"embedding": {"values": [0.1, 0.2]}})

        return httpx.Response(self.generate_status, content=self.generate_body)

    @staticmethod
    def _route(request: httpx.Request) -> str:
        if request.method == "POST" and "/upload/" in request.url.path:
            return "upload_start"
        if request.method == "PUT":
            return "upload_finalize"
        if request.url.path.endswith(":embedContent"):
            return "embed"
        return "generate"

    def by_method(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def transport(fake_gemini):
    return httpx.MockTransport(fake_gemini.handler)


@pytest.fixture
def http_client(transport):
    with httpx.Client(transport=transport) as client:
        yield client


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def gemini_client(test_settings, transport):
    with GeminiClient("test-key", settings=test_settings, transport=transport) as client:
        yield client


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    """Isolated directory for temporary downloads."""
    path = tmp_path / "downloads"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


@pytest.fixture
def sized_file(tmp_path):
    """Factory creating a file of exactly ``size`` bytes without writing them all."""

    def make(name: str, size: int, head: bytes = b""):
        path = tmp_path / name
        with open(path, "wb") as fh:
            fh.write(head)
            fh.truncate(size)
        return path

    return make
