import importlib.metadata
import logging
import typing as t

import urllib3
from urllib3.exceptions import HTTPError

from surrealvm.baseUtils import read_with_progress
from surrealvm.errors import DownloadError


logger = logging.getLogger(__name__)


try:
    _version = importlib.metadata.version("surrealvm")
except importlib.metadata.PackageNotFoundError:
    _version = "dev"

_accepted_encodings = ["gzip", "deflate"]
_global_headers = {
    "User-Agent": f"surrealvm/{_version}",
    "Accept-Encoding": ", ".join(_accepted_encodings),
}


class URLResponse(t.Protocol):
    status: int
    headers: t.MutableMapping[str, str]

    def read(self, amt=...) -> bytes:
        ...


def open_url(
    url: str,
    *,
    method="GET",
    headers: t.Optional[t.MutableMapping[str, str]] = None,
    pool_manager: t.Optional[urllib3.PoolManager] = None,
) -> URLResponse:
    """Send a request to a URL and return a streaming response.

    Raises :class:`DownloadError` if the request fails or the server does not
    respond with `200 OK`.
    """
    headers = {**_global_headers, **(headers or {})}
    logger.debug(f"{method} {url}")
    try:
        http = pool_manager or urllib3.PoolManager()
        response = http.request(
            method,
            url,
            headers=headers,
            preload_content=False,
            timeout=urllib3.Timeout(connect=3, read=10),
        )
    except HTTPError as e:
        raise DownloadError(url, str(e)) from e

    if response.status != 200:
        response.release_conn()
        raise DownloadError(url, f"HTTP status {response.status}")
    return t.cast(URLResponse, response)


def fetch_text(url: str) -> str:
    """Read the whole body of a small text resource."""
    response = open_url(url)
    try:
        return response.read().decode()
    except (HTTPError, UnicodeDecodeError) as e:
        raise DownloadError(url, str(e)) from e


def download_with_progress(url: str, dest: str, label: t.Optional[str] = None):
    """Stream the resource at `url` into the new file `dest`.

    `dest` is created exclusively: :class:`FileExistsError` is raised rather
    than overwriting an existing file.
    """
    blocksize = 8192

    with open(dest, "xb") as file:
        response = open_url(url)
        size = int(response.headers.get("Content-Length", None) or 0)
        try:
            read_with_progress(response, file, size, blocksize, label or url)
        except HTTPError as e:
            raise DownloadError(url, str(e)) from e
