import logging
import os
import stat
import tarfile

from surrealvm import fs

logger = logging.getLogger(__name__)


def unpack_tgz(archive: fs.File, dest: str):
    """Extract a gzip-compressed tarball into `dest`, creating it if needed."""
    os.makedirs(dest, exist_ok=True)
    with tarfile.open(archive, mode="r:gz") as tar:
        # extraction filters were backported to security releases only
        if hasattr(tarfile, "data_filter"):
            tar.extractall(dest, filter="data")
        else:
            tar.extractall(dest)
    logger.debug(f"Unpacked '{archive}' to '{dest}'.")


def make_executable(path: fs.File):
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


PLACEHOLDER_SCRIPT = """\
#!/bin/sh
echo "surreal version has not been configured, try: surrealvm list" >&2
exit 1
"""


def write_placeholder(path: str):
    """Write an executable that reports that no version is selected."""
    with open(path, "w") as file:
        file.write(PLACEHOLDER_SCRIPT)
    make_executable(fs.File(path))

