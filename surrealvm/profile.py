import logging
import os
import typing as t

from surrealvm import fs
from surrealvm.config import Config

logger = logging.getLogger(__name__)

CONFIG_MARKER = "# added by SurrealVM"

# Checked in order, only the first one found is changed
PROFILE_FILES = (".bashrc", ".zprofile")


def path_line(config: Config):
    return f"PATH={config.store_dir}:$PATH"


def is_path_line(line: str):
    return line.startswith("PATH=") and line.endswith(":$PATH")


def find_profile(config: Config) -> t.Optional[fs.File]:
    for name in PROFILE_FILES:
        path = os.path.join(config.user_home, name)
        if fs.isfile(path):
            return fs.File(path)
    return None


def add_path(config: Config) -> t.Optional[str]:
    """Add the store directory to `PATH` in the user's shell profile.

    :returns: The name of the profile that was changed, or `None`.
    """
    profile = find_profile(config)
    if not profile:
        return None

    with open(profile, "a") as file:
        file.write(f"{CONFIG_MARKER}\n{path_line(config)}\n")
    logger.debug(f"Added store directory to PATH in '{profile}'.")
    return os.path.basename(profile)


def remove_path(config: Config) -> t.Optional[str]:
    """Remove lines added by :func:`add_path`.

    :returns: The name of the profile that was changed, or `None`.
    """
    profile = find_profile(config)
    if not profile:
        return None

    with open(profile) as file:
        lines = file.readlines()

    kept: t.List[str] = []
    after_marker = False
    for line in lines:
        stripped = line.rstrip("\n")
        # the store directory may have moved since the line was written
        if stripped == path_line(config) or (
            after_marker and is_path_line(stripped)
        ):
            after_marker = False
            continue
        after_marker = stripped == CONFIG_MARKER
        if not after_marker:
            kept.append(line)

    with open(profile, "w") as file:
        file.writelines(kept)
    logger.debug(f"Removed {len(lines) - len(kept)} line(s) from '{profile}'.")
    return os.path.basename(profile)
