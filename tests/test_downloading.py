import pytest

from surrealvm import downloading
from surrealvm.errors import DownloadError


@pytest.fixture
def resource(release_server):
    url = "https://download.example.com/resource.txt"
    release_server.resources[url] = b"v1.0.0\n"
    return url


def test_fetch_text(resource):
    assert downloading.fetch_text(resource) == "v1.0.0\n"


def test_download_with_progress(tmp_path, resource):
    dest = tmp_path / "resource.txt"
    downloading.download_with_progress(resource, str(dest))
    assert dest.read_bytes() == b"v1.0.0\n"


def test_download_does_not_overwrite(tmp_path, release_server, resource):
    dest = tmp_path / "resource.txt"
    dest.write_text("existing")
    with pytest.raises(FileExistsError):
        downloading.download_with_progress(resource, str(dest))
    assert dest.read_text() == "existing"
    # the existing file is detected before any request is made
    assert not release_server.requests


def test_download_missing(tmp_path):
    with pytest.raises(DownloadError, match="404"):
        downloading.fetch_text("https://download.example.com/missing.txt")
