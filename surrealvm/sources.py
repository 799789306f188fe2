import logging

from surrealvm.config import Config
from surrealvm.downloading import fetch_text
from surrealvm.errors import AliasFormatError
from surrealvm.errors import AliasNetworkError
from surrealvm.errors import DownloadError
from surrealvm.errors import InvalidVersion
from surrealvm.errors import ResolveError
from surrealvm.specifier import Custom
from surrealvm.specifier import Special
from surrealvm.specifier import SpecialTag
from surrealvm.specifier import VersionSpecifier
from surrealvm.version import parse_remote
from surrealvm.version import Version

logger = logging.getLogger(__name__)


def alias_url(config: Config, tag: SpecialTag) -> str:
    return f"{config.download_url}/{tag.value}.txt"


def fetch_alias_version(config: Config, tag: SpecialTag) -> Version:
    """Look up the version currently published for `tag`."""
    url = alias_url(config, tag)
    try:
        content = fetch_text(url)
    except DownloadError as e:
        raise AliasNetworkError(tag.value, e.reason) from e

    try:
        version = parse_remote(content)
    except InvalidVersion as e:
        raise AliasFormatError(tag.value, content) from e

    logger.debug(f"Resolved '{tag}' to '{version}'.")
    return version


def resolve(config: Config, spec: VersionSpecifier) -> Version:
    """Resolve a specifier to a concrete version, looking up aliases remotely."""
    if isinstance(spec, Custom):
        return spec.version

    assert isinstance(spec, Special)
    if spec.tag is SpecialTag.NONE:
        raise ResolveError("'none' does not refer to a version.")
    logger.info(f"Looking up '{spec.tag}' version...")
    return fetch_alias_version(config, spec.tag)
