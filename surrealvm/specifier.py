import typing as t
from dataclasses import dataclass
from enum import Enum

from surrealvm.version import strip_prefix
from surrealvm.version import Version


class SpecialTag(Enum):
    """Reserved version aliases, in the order they are listed."""

    NONE = "none"
    LATEST = "latest"
    BETA = "beta"
    ALPHA = "alpha"
    NIGHTLY = "nightly"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def lookup(cls, name: str) -> t.Optional["SpecialTag"]:
        """Exact, case-sensitive lookup of a tag by name."""
        for tag in cls:
            if tag.value == name:
                return tag
        return None


@dataclass(frozen=True)
class Special:
    tag: SpecialTag

    def canonical_name(self) -> str:
        return self.tag.value

    def __str__(self) -> str:
        return self.canonical_name()


@dataclass(frozen=True)
class Custom:
    version: Version

    def canonical_name(self) -> str:
        return f"v{self.version}"

    def __str__(self) -> str:
        return self.canonical_name()


VersionSpecifier = t.Union[Special, Custom]


def parse_specifier(spec: str) -> VersionSpecifier:
    """Parse user input into a :class:`Special` alias or a :class:`Custom` version.

    Raises :class:`~surrealvm.errors.InvalidVersion` if `spec` is neither.
    """
    tag = SpecialTag.lookup(spec)
    if tag is not None:
        return Special(tag)
    return Custom(Version.parse(strip_prefix(spec)))
