import os
import shutil
import sys
import typing as t
import uuid

if sys.version_info < (3, 10):
    import typing_extensions as te
else:
    te = t


class Path(str):
    def __new__(cls, *args, **kwargs):
        self = super().__new__(cls, *args, *kwargs)
        if not (os.path.isfile(self) or os.path.isdir(self)):
            raise FileNotFoundError(self)
        return self


class File(Path):
    def __new__(cls, *args, **kwargs):
        self = str.__new__(cls, *args, **kwargs)
        if not os.path.isfile(self):
            raise FileNotFoundError(self)
        return self


class Directory(Path):
    def __new__(cls, *args, **kwargs):
        self = str.__new__(cls, *args, **kwargs)
        if not os.path.isdir(self):
            raise FileNotFoundError(self)
        return self


def isdir(path: str) -> te.TypeGuard[Directory]:
    return os.path.isdir(path)


def isfile(path: str) -> te.TypeGuard[File]:
    return os.path.isfile(path)


def lexists(path: str):
    """Like :func:`os.path.exists`, but also :literal:`True` for broken symlinks."""
    return os.path.lexists(path)


def find_single_file(path: Directory) -> File:
    """Return the only regular file found anywhere below :param:`path`.

    Raises :class:`FileNotFoundError` if there is none, and
    :class:`ValueError` if there is more than one.
    """
    found: t.List[str] = []
    for dirpath, _, filenames in os.walk(path):
        for f in filenames:
            fp = os.path.join(dirpath, f)
            if os.path.isfile(fp) and not os.path.islink(fp):
                found.append(fp)
    if not found:
        raise FileNotFoundError(f"No file found in '{path}'.")
    if len(found) > 1:
        raise ValueError(f"Expected a single file in '{path}', found {len(found)}.")
    return File(found[0])


def move_new(src: File, dest: str):
    """Move :param:`src` to :param:`dest`, never replacing an existing entry.

    A hard link is created at `dest` and the source removed, which fails with
    :class:`FileExistsError` if `dest` was claimed in the meantime.
    """
    try:
        os.link(src, dest)
    except FileExistsError:
        raise
    except OSError:
        # filesystem without hard links, fall back to a checked rename
        if lexists(dest):
            raise FileExistsError(dest)
        os.rename(src, dest)
        return
    os.remove(src)


def replace_symlink(target: str, link: str):
    """Point :param:`link` at :param:`target`, atomically replacing any previous link.

    The new link is created under a temporary name in the same directory and
    renamed over `link`. Raises :class:`IsADirectoryError` or
    :class:`FileExistsError` if `link` exists and is not a symlink.
    """
    if lexists(link) and not os.path.islink(link):
        if os.path.isdir(link):
            raise IsADirectoryError(link)
        raise FileExistsError(link)

    directory, name = os.path.split(link)
    temp = os.path.join(directory, f"tmp_link_{uuid.uuid4().hex[:8]}_{name}")
    os.symlink(target, temp)
    try:
        os.replace(temp, link)
    except OSError:
        os.remove(temp)
        raise


def remove_tree(path: str):
    if os.path.islink(path) or isfile(path):
        os.remove(path)
    elif isdir(path):
        shutil.rmtree(path)
