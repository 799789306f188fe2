import re
from dataclasses import dataclass

from surrealvm.errors import InvalidVersion

_NUMERIC = r"0|[1-9][0-9]*"
_IDENTIFIER = r"[0-9A-Za-z-]+"
_SEMVER_PATTERN = re.compile(
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?"
    rf"(?:\+(?P<build>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?"
)


@dataclass(frozen=True)
class Version:
    Major: int
    Minor: int
    Patch: int
    Prerelease: str = ""
    Build: str = ""

    @classmethod
    def parse(cls, version: str) -> "Version":
        match = _SEMVER_PATTERN.fullmatch(version)
        if not match:
            raise InvalidVersion(version)

        # numeric pre-release identifiers must not include leading zeroes
        prerelease = match["prerelease"] or ""
        for part in prerelease.split(".") if prerelease else ():
            if part.isdigit() and len(part) > 1 and part.startswith("0"):
                raise InvalidVersion(version)

        return cls(
            int(match["major"]),
            int(match["minor"]),
            int(match["patch"]),
            prerelease,
            match["build"] or "",
        )

    @classmethod
    def is_valid(cls, version: str):
        try:
            cls.parse(version)
            return True
        except InvalidVersion:
            return False

    def __str__(self):
        out = "{}.{}.{}".format(self.Major, self.Minor, self.Patch)
        if self.Prerelease:
            out += "-{}".format(self.Prerelease)
        if self.Build:
            out += "+{}".format(self.Build)
        return out


def strip_prefix(version: str) -> str:
    """Remove a single leading 'v' from a version string."""
    return version[1:] if version.startswith("v") else version


def parse_remote(text: str) -> Version:
    """Parse a version as served by the download host (whitespace and a 'v' prefix allowed)."""
    return Version.parse(strip_prefix(text.strip()))
