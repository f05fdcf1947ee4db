import httpx
import pytest

from gemini_context.errors import InvalidSourceError, NetworkError
from gemini_context.ingest.resolver import SourceResolver, remote_name
from gemini_context.models.source import SourceKind


def test_remote_name_ignores_query():
    assert remote_name("https://example.com/media/a%20b.png?x=1") == "a b.png"
    assert remote_name("https://example.com/") == ""


def test_local_file_is_used_in_place(http_client, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"hello")

    with SourceResolver(http_client).resolve(str(path)) as handle:
        assert handle.path == path
        assert handle.kind is SourceKind.LOCAL
        assert handle.name == "notes.txt"
        assert not handle.temporary
        assert handle.size == 5

    assert path.exists()


def test_unknown_source_names_the_source(http_client):
    with pytest.raises(InvalidSourceError) as excinfo:
        with SourceResolver(http_client).resolve("not-a-url-or-path"):
            pass
    assert "not-a-url-or-path" in str(excinfo.value)
    assert excinfo.value.source == "not-a-url-or-path"


def test_directory_is_not_a_source(http_client, tmp_path):
    with pytest.raises(InvalidSourceError):
        with SourceResolver(http_client).resolve(str(tmp_path)):
            pass


def test_remote_fetch_writes_temp_file_and_removes_it(http_client, fake_gemini, temp_dir):
    fake_gemini.remote_files["https://example.com/a.png"] = b"\x89PNG data"

    with SourceResolver(http_client).resolve("https://example.com/a.png") as handle:
        assert handle.kind is SourceKind.REMOTE
        assert handle.temporary
        assert handle.name == "a.png"
        assert handle.path.suffix == ".png"
        assert handle.path.read_bytes() == b"\x89PNG data"
        temp_path = handle.path

    assert not temp_path.exists()
    assert list(temp_dir.iterdir()) == []


def test_temp_file_removed_when_block_raises(http_client, fake_gemini, temp_dir):
    fake_gemini.remote_files["https://example.com/a.png"] = b"data"

    with pytest.raises(RuntimeError):
        with SourceResolver(http_client).resolve("https://example.com/a.png"):
            raise RuntimeError("downstream failure")

    assert list(temp_dir.iterdir()) == []


def test_http_error_status_raises_network_error(http_client, temp_dir):
    with pytest.raises(NetworkError) as excinfo:
        with SourceResolver(http_client).resolve("https://example.com/missing.pdf"):
            pass
    assert "404" in str(excinfo.value)
    assert "https://example.com/missing.pdf" in str(excinfo.value)
    assert list(temp_dir.iterdir()) == []


def test_transport_failure_raises_network_error(temp_dir):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            with SourceResolver(client).resolve("http://unreachable.example/x.jpg"):
                pass
    assert list(temp_dir.iterdir()) == []
