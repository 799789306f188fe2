import logging
import os
import tarfile
import typing as t
from dataclasses import dataclass
from enum import Enum

from surrealvm import downloading
from surrealvm import fs
from surrealvm import utils
from surrealvm.config import Config
from surrealvm.errors import DownloadError
from surrealvm.errors import InstallError
from surrealvm.errors import PreconditionError
from surrealvm.errors import silent_exec
from surrealvm.logging import timed_progress
from surrealvm.specifier import SpecialTag
from surrealvm.version import Version

logger = logging.getLogger(__name__)

BINARY_NAME = "surreal"
"""Name of the active link, and prefix of every other store entry."""

TEMP_PREFIX = "tmp_"


def artifact_name(version: Version) -> str:
    return f"{BINARY_NAME}-v{version}"


def unqualified_name(version: Version) -> str:
    return f"{BINARY_NAME}-{version}"


def alias_name(tag: SpecialTag) -> str:
    return f"{BINARY_NAME}-{tag.value}"


def archive_name(version: Version) -> str:
    return f"{artifact_name(version)}.tgz"


def staging_name(version: Version) -> str:
    return f"{TEMP_PREFIX}{artifact_name(version)}"


PLACEHOLDER_NAME = alias_name(SpecialTag.NONE)


def artifact_url(config: Config, version: Version) -> str:
    return "{base}/v{ver}/{name}.{os}-{cpu}.tgz".format(
        base=config.download_url,
        ver=version,
        name=artifact_name(version),
        os=config.os_name,
        cpu=config.cpu,
    )


@dataclass(frozen=True)
class InstalledArtifact:
    version: Version
    path: str

    @property
    def name(self):
        return os.path.basename(self.path)


class InstallStatus(Enum):
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already installed"


def require_store(config: Config):
    if not fs.isdir(config.store_dir):
        raise PreconditionError(
            f"Directory '{config.store_dir}' doesn't exist, try: surrealvm setup"
        )
    return fs.Directory(config.store_dir)


def find_artifact(config: Config, version: Version) -> t.Optional[InstalledArtifact]:
    path = config.store_path(artifact_name(version))
    if fs.isfile(path):
        return InstalledArtifact(version, path)
    return None


def ensure_installed(
    config: Config, version: Version
) -> t.Tuple[InstalledArtifact, InstallStatus]:
    """Make sure `version` is present in the store, downloading it if needed.

    Returns the artifact, and whether it had to be installed. The artifact
    name is only ever occupied by a complete binary: downloads and extraction
    happen under temporary names that are removed on failure.
    """
    store = require_store(config)
    existing = find_artifact(config, version)
    if existing:
        logger.debug(f"Found existing artifact '{existing.path}'.")
        return existing, InstallStatus.ALREADY_INSTALLED

    dest = config.store_path(artifact_name(version))
    archive = config.store_path(archive_name(version))
    staging = config.store_path(staging_name(version))
    url = artifact_url(config, version)

    with timed_progress(f"Installed v{version} in {{time:.2f}} seconds."):
        try:
            logger.info(f"Downloading '{url}'...")
            downloading.download_with_progress(url, archive, artifact_name(version))
        except FileExistsError:
            raise InstallError(
                f"Temporary archive '{archive}' already exists, another install may be in progress."
            )
        except (DownloadError, OSError) as e:
            silent_exec(os.remove, archive)
            raise InstallError(f"Failed to download v{version}: {e}") from e

        try:
            extract_binary(fs.File(archive), staging, dest)
        finally:
            silent_exec(os.remove, archive)

        unqualified = config.store_path(unqualified_name(version))
        try:
            fs.replace_symlink(dest, unqualified)
        except OSError as e:
            raise InstallError(f"Could not create link '{unqualified}': {e}") from e

    logger.debug(f"Installed '{dest}' in '{store}'.")
    return InstalledArtifact(version, dest), InstallStatus.INSTALLED


def extract_binary(archive: fs.File, staging: str, dest: str):
    """Unpack `archive` into `staging` and move the single binary it contains to `dest`."""
    try:
        os.mkdir(staging)
    except FileExistsError:
        raise InstallError(
            f"Staging directory '{staging}' already exists, another install may be in progress."
        )

    try:
        try:
            utils.unpack_tgz(archive, staging)
        except (tarfile.TarError, EOFError, OSError) as e:
            raise InstallError(f"Failed to extract '{archive}': {e}") from e

        try:
            binary = fs.find_single_file(fs.Directory(staging))
        except (FileNotFoundError, ValueError) as e:
            raise InstallError(f"Unexpected archive contents: {e}") from e

        utils.make_executable(binary)
        try:
            fs.move_new(binary, dest)
        except FileExistsError:
            raise InstallError(f"'{dest}' was created by another process.")
        except OSError as e:
            raise InstallError(f"Could not move binary into place: {e}") from e
    finally:
        silent_exec(fs.remove_tree, staging)


def setup(config: Config):
    """Create the store, with the active link pointing at the placeholder."""
    if fs.lexists(config.store_dir):
        raise PreconditionError(
            f"Directory '{config.store_dir}' already exists, try `surrealvm clean` then `surrealvm setup` again."
        )
    os.makedirs(config.store_dir)
    utils.write_placeholder(config.store_path(PLACEHOLDER_NAME))
    fs.replace_symlink(
        config.store_path(PLACEHOLDER_NAME), config.store_path(BINARY_NAME)
    )
    logger.debug(f"Created store directory '{config.store_dir}'.")


def require_cleanable(config: Config):
    if not fs.lexists(config.store_dir):
        raise PreconditionError(
            f"Directory '{config.store_dir}' doesn't exist, can't clean what isn't there!"
        )


def clean(config: Config):
    """Remove the store and everything in it."""
    require_cleanable(config)
    fs.remove_tree(config.store_dir)
    logger.debug(f"Removed store directory '{config.store_dir}'.")
