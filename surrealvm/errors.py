import sys
import typing as t

import click

if sys.version_info < (3, 10):
    import typing_extensions as te
else:
    te = t


class DownloadError(Exception):
    """A request to a remote resource failed or returned an unexpected status."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class SVMError(click.ClickException):
    """Base class for errors reported to the user by surrealvm commands."""


class ParseError(SVMError):
    pass


class InvalidVersion(ParseError, ValueError):
    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"'{version}' is not a valid version.")


class ResolveError(SVMError):
    pass


class AliasNetworkError(ResolveError):
    def __init__(self, tag: str, reason: t.Any) -> None:
        super().__init__(f"Could not look up version for '{tag}': {reason}")


class AliasFormatError(ResolveError):
    def __init__(self, tag: str, content: str) -> None:
        super().__init__(
            f"Remote version for '{tag}' is not a valid version: {content!r}"
        )


class InstallError(SVMError):
    pass


class LinkError(SVMError):
    pass


class PreconditionError(SVMError):
    pass


P = te.ParamSpec("P")


def silent_exec(
    func: t.Callable[P, t.Any], *params: P.args, **kwargs: P.kwargs
) -> None:
    """Execute `func`, ignoring any :class:`OSError`.

    Used for cleanup of transient files while another error is being raised.

    :returns: `None`
    """
    try:
        func(*params, **kwargs)
    except OSError:
        pass
