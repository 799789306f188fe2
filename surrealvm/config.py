import logging
import os
import typing as t
from dataclasses import dataclass

from click import make_pass_decorator

from surrealvm import platforms
from surrealvm.errors import PreconditionError

logger = logging.getLogger(__name__)

# Defaults
DOWNLOAD_URL = "https://download.surrealdb.com"
STORE_DIRNAME = ".surrealvm"


@dataclass
class Env:
    skip_confirmation = False


def get_user_home() -> str:
    home = os.path.expanduser("~")
    if home == "~" or not os.path.isdir(home):
        raise PreconditionError("Error finding home directory.")
    return home


@dataclass(frozen=True)
class Config:
    """Process-wide settings, built once at startup and passed to every operation."""

    user_home: str
    """Home directory of the current user, where shell profiles are found."""

    store_dir: str
    """Directory holding installed binaries and the links selecting between them.

    Defaults to `~/.surrealvm`, can be overridden with `SURREALVM_DIR`.
    """

    os_name: str
    """Operating system name used in release archive names (`linux` or `darwin`)."""

    cpu: str
    """CPU architecture used in release archive names (`amd64` or `arm64`)."""

    download_url: str = DOWNLOAD_URL
    """Base URL for version lookups and release archives.

    Can be overridden with `SURREALVM_DOWNLOAD_URL`.
    """

    @classmethod
    def from_environment(cls, environ: t.Optional[t.Mapping[str, str]] = None):
        environ = os.environ if environ is None else environ
        user_home = get_user_home()
        store_dir = environ.get("SURREALVM_DIR") or os.path.join(
            user_home, STORE_DIRNAME
        )
        download_url = environ.get("SURREALVM_DOWNLOAD_URL") or DOWNLOAD_URL
        config = cls(
            user_home,
            os.path.abspath(store_dir),
            platforms.os_name(),
            platforms.cpu_name(),
            download_url.rstrip("/"),
        )
        logger.debug(f"Using store directory '{config.store_dir}'.")
        return config

    def store_path(self, name: str) -> str:
        return os.path.join(self.store_dir, name)


pass_config = make_pass_decorator(Config)
