import io
import logging
import os
import sys
import tarfile
from contextlib import contextmanager

import pytest

from surrealvm import downloading
from surrealvm import utils
from surrealvm.config import Config
from surrealvm.errors import DownloadError
from surrealvm.version import Version

PLATFORM_MARKS = set("darwin linux win32".split())

DOWNLOAD_URL = "https://download.example.com"


def pytest_configure(config: pytest.Config):
    for plat in PLATFORM_MARKS:
        config.addinivalue_line(
            "markers", f"{plat}: mark this test as platform-specific"
        )
    config.addinivalue_line(
        "markers", "mock_store: pass arguments to the mock_store fixture"
    )
    config.addinivalue_line(
        "markers", "releases: pass arguments to the release_server fixture"
    )


def pytest_runtest_setup(item):
    # platform-specific test checks
    supported_platforms = PLATFORM_MARKS.intersection(
        mark.name for mark in item.iter_markers()
    )
    plat = sys.platform
    if supported_platforms and plat not in supported_platforms:
        pytest.skip("cannot run on platform {}".format(plat))


def pytest_make_parametrize_id(config, val, argname):
    if isinstance(val, Version):
        return str(val)


@pytest.fixture
def test_name(request):
    yield request.node.name


@pytest.fixture(autouse=True)
def assertion_msg():
    @contextmanager
    def assertion_msg(msg: str):
        try:
            yield
        except AssertionError as e:
            e.args = (e.args[0] + "\n" + msg,)
            raise

    return assertion_msg


@pytest.fixture(autouse=True)
def restore_logging():
    """Commands detach the package logger from the root logger, which hides records from `caplog`."""
    yield
    logger = logging.getLogger("surrealvm")
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return Config(
        user_home=str(home),
        store_dir=str(home / ".surrealvm"),
        os_name="linux",
        cpu="amd64",
        download_url=DOWNLOAD_URL,
    )


@pytest.fixture
def mock_store(request, config: Config):
    """Create a store directory with the given entries.

    Configured with the `mock_store` marker::

        @pytest.mark.mock_store(
            files=["surreal-v1.0.0"],
            links={"surreal-latest": "surreal-v1.0.0", "surreal": "surreal-latest"},
        )

    Link targets are relative to the store directory, and created in order.
    """
    marker = request.node.get_closest_marker("mock_store")
    files = marker.kwargs.get("files", []) if marker else []
    links = marker.kwargs.get("links", {}) if marker else {}
    placeholder = marker.kwargs.get("placeholder", True) if marker else True

    root = config.store_dir
    os.mkdir(root)
    if placeholder:
        utils.write_placeholder(os.path.join(root, "surreal-none"))
        os.symlink(os.path.join(root, "surreal-none"), os.path.join(root, "surreal"))

    for name in files:
        path = os.path.join(root, name)
        if name.endswith("/"):
            os.mkdir(path)
            continue
        with open(path, "x") as file:
            file.write(f"#!/bin/sh\necho {name}\n")

    for name, target in links.items():
        path = os.path.join(root, name)
        if os.path.islink(path):
            os.remove(path)
        os.symlink(os.path.join(root, target), path)

    yield root


def make_release(binaries=("surreal",), content=b"#!/bin/sh\necho surreal\n"):
    """Build a gzip-compressed tarball, like the ones published on the download host."""
    data = io.BytesIO()
    with tarfile.open(fileobj=data, mode="w:gz") as tar:
        for name in binaries:
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return data.getvalue()


class FakeResponse(io.BytesIO):
    status = 200

    def __init__(self, data: bytes):
        super().__init__(data)
        self.headers = {"Content-Length": str(len(data))}


class ReleaseServer:
    def __init__(self):
        self.resources = {}
        self.requests = []

    def add_alias(self, tag: str, version: str):
        self.resources[f"{DOWNLOAD_URL}/{tag}.txt"] = f"{version}\n".encode()

    def add_release(
        self,
        version: str,
        data: bytes = None,
        binaries=("surreal",),
        os_name="linux",
        cpu="amd64",
    ):
        url = f"{DOWNLOAD_URL}/v{version}/surreal-v{version}.{os_name}-{cpu}.tgz"
        self.resources[url] = make_release(binaries) if data is None else data
        return url

    def open_url(self, url, *args, **kwargs):
        self.requests.append(url)
        if url not in self.resources:
            raise DownloadError(url, "HTTP status 404")
        return FakeResponse(self.resources[url])


@pytest.fixture(autouse=True)
def release_server(request, monkeypatch):
    """Replace network access with an in-memory download host.

    Configured with the `releases` marker::

        @pytest.mark.releases(aliases={"latest": "v1.1.0"}, versions=["1.1.0"])
    """
    server = ReleaseServer()
    marker = request.node.get_closest_marker("releases")
    if marker:
        for tag, version in marker.kwargs.get("aliases", {}).items():
            server.add_alias(tag, version)
        for version in marker.kwargs.get("versions", []):
            server.add_release(version)

    monkeypatch.setattr(downloading, "open_url", server.open_url)
    yield server
