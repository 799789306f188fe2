"""Symlinks selecting between installed versions.

The store holds a chain of at most two links in front of each binary::

    surreal -> surreal-latest -> surreal-v1.1.0
    surreal -> surreal-1.0.0  -> surreal-v1.0.0

The active link (`surreal`) points at an alias link or an unqualified
version link, which in turn point at an installed artifact.
"""
import logging
import os

from surrealvm import fs
from surrealvm import store
from surrealvm import utils
from surrealvm.config import Config
from surrealvm.errors import InvalidVersion
from surrealvm.errors import LinkError
from surrealvm.specifier import parse_specifier
from surrealvm.specifier import SpecialTag
from surrealvm.specifier import VersionSpecifier
from surrealvm.store import InstalledArtifact

logger = logging.getLogger(__name__)

_PREFIX = store.BINARY_NAME + "-"


def active_path(config: Config):
    return config.store_path(store.BINARY_NAME)


def read_link(path: str) -> str:
    """Return the absolute target of the symlink at `path`."""
    try:
        target = os.readlink(path)
    except OSError as e:
        raise LinkError(f"Could not read link '{path}': {e}") from e
    return os.path.join(os.path.dirname(path), target)


def resolve_link(path: str, hops=1) -> str:
    """Follow `path` through at most `hops` symlinks to a regular file.

    Alias and unqualified links are a single hop from their artifact, the
    active link is at most two. A longer chain can only come from a cycle or
    a corrupted store and is reported as a :class:`LinkError`.
    """
    current = path
    for _ in range(hops):
        if not os.path.islink(current):
            break
        current = read_link(current)
    else:
        if os.path.islink(current):
            raise LinkError(f"Link chain from '{path}' is longer than {hops}.")

    if not fs.isfile(current):
        raise LinkError(f"'{path}' does not point to an installed binary.")
    return current


def _replace(target: str, link: str):
    try:
        fs.replace_symlink(target, link)
    except OSError as e:
        raise LinkError(f"Could not link '{link}' to '{target}': {e}") from e
    logger.debug(f"Linked '{link}' -> '{target}'.")


def set_alias(config: Config, tag: SpecialTag, artifact: InstalledArtifact):
    """Point the alias link for `tag` at `artifact`."""
    if tag is SpecialTag.NONE:
        raise LinkError("'none' cannot be assigned to a version.")
    if not fs.isfile(artifact.path):
        raise LinkError(f"'{artifact.path}' is not an installed binary.")
    _replace(artifact.path, config.store_path(store.alias_name(tag)))


def set_active(config: Config, target_name: str):
    """Point the active link at the store entry `target_name`."""
    if target_name == store.BINARY_NAME:
        raise LinkError("The active link cannot point to itself.")
    target = config.store_path(target_name)
    resolve_link(target)
    _replace(target, active_path(config))


def set_active_none(config: Config):
    """Point the active link at the placeholder reporting that no version is selected."""
    placeholder = config.store_path(store.PLACEHOLDER_NAME)
    if not fs.isfile(placeholder) or os.path.islink(placeholder):
        logger.debug(f"Restoring missing placeholder '{placeholder}'.")
        fs.remove_tree(placeholder)
        utils.write_placeholder(placeholder)
    set_active(config, store.PLACEHOLDER_NAME)


def get_active(config: Config) -> VersionSpecifier:
    """Determine which version specifier the active link selects."""
    path = active_path(config)
    if not os.path.islink(path):
        raise LinkError("No active version is set.")

    name = os.path.basename(read_link(path))
    if not name.startswith(_PREFIX):
        raise LinkError(f"Active link points to unknown file '{name}'.")
    try:
        return parse_specifier(name[len(_PREFIX) :])
    except InvalidVersion as e:
        raise LinkError(f"Active link points to unknown file '{name}'.") from e


def set_unqualified(config: Config, artifact: InstalledArtifact):
    """Point the unqualified link for the artifact's version at it."""
    _replace(artifact.path, config.store_path(store.unqualified_name(artifact.version)))
