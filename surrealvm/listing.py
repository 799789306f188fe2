import logging
import os
import typing as t
from dataclasses import dataclass
from enum import Enum

from surrealvm import fs
from surrealvm import links
from surrealvm import store
from surrealvm.config import Config
from surrealvm.errors import LinkError
from surrealvm.specifier import Custom
from surrealvm.specifier import Special
from surrealvm.specifier import SpecialTag
from surrealvm.specifier import VersionSpecifier
from surrealvm.version import Version

logger = logging.getLogger(__name__)

_ARTIFACT_PREFIX = store.BINARY_NAME + "-v"
_ALIAS_PREFIX = store.BINARY_NAME + "-"


class RowKind(Enum):
    ALIAS = "alias"
    VERSION = "version"


@dataclass
class Row:
    name: str
    kind: RowKind
    path: str
    active: bool = False

    def __str__(self) -> str:
        return f"{self.name} *" if self.active else self.name


def classify(filename: str) -> t.Optional[VersionSpecifier]:
    """Determine what a store entry represents from its name.

    Returns `None` for entries that are not listed.
    """
    if filename.startswith(_ARTIFACT_PREFIX):
        version = filename[len(_ARTIFACT_PREFIX) :]
        if Version.is_valid(version):
            return Custom(Version.parse(version))
        return None

    if filename.startswith(_ALIAS_PREFIX):
        tag = SpecialTag.lookup(filename[len(_ALIAS_PREFIX) :])
        if tag is not None:
            return Special(tag)
    return None


def active_name(config: Config) -> t.Optional[str]:
    """Canonical name of the active selection, or `None` if nothing is selected."""
    try:
        spec = links.get_active(config)
    except LinkError as e:
        logger.warning(str(e))
        return None

    if isinstance(spec, Special) and spec.tag is SpecialTag.NONE:
        return None
    return spec.canonical_name()


def list_versions(config: Config) -> t.List[Row]:
    """List installed versions and aliases, aliases first, marking the active one."""
    store_dir = store.require_store(config)
    aliases: t.Dict[SpecialTag, Row] = {}
    versions: t.List[Row] = []

    for filename in os.listdir(store_dir):
        spec = classify(filename)
        if spec is None:
            continue
        path = os.path.join(store_dir, filename)

        if isinstance(spec, Custom):
            # links named like artifacts are not installed versions
            if os.path.islink(path) or not fs.isfile(path):
                continue
            versions.append(Row(spec.canonical_name(), RowKind.VERSION, path))
        else:
            try:
                links.resolve_link(path)
            except LinkError as e:
                logger.warning(f"Skipping alias '{spec}': {e}")
                continue
            aliases[spec.tag] = Row(spec.canonical_name(), RowKind.ALIAS, path)

    rows = [aliases[tag] for tag in SpecialTag if tag in aliases] + versions

    selected = active_name(config)
    for row in rows:
        row.active = row.name == selected
    return rows
