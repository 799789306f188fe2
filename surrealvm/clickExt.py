import logging
import os
import sys
import typing as t
from io import UnsupportedOperation

import click

from surrealvm.baseUtils import partition
from surrealvm.baseUtils import T
from surrealvm.config import Env
from surrealvm.errors import InvalidVersion
from surrealvm.logging import configure
from surrealvm.specifier import parse_specifier
from surrealvm.specifier import VersionSpecifier


logger = logging.getLogger(__name__)


class TTYError(click.ClickException):
    def __init__(self, message: str) -> None:
        super().__init__("Could not read from stdin: " + message)


def confirm_ext(*params, default, **attrs):
    """Extension to :func:`click.confirm`.

    Throws a :class:`TTYError` if `stdin` is not a TTY,
    and returns `True` if :attr:`Env.skip_confirmation` is set.
    """

    ctx = click.get_current_context(silent=True)
    env = ctx and ctx.find_object(Env)

    if env and env.skip_confirmation:
        return True

    tty = True
    try:
        tty = sys.stdin.isatty()
    except UnsupportedOperation:
        tty = False

    if not tty:
        raise TTYError("not a tty.\nUse '--yes' to skip confirmation prompts.")

    return click.confirm(default=default, *params, **attrs)


class ParamTypeG(click.ParamType, t.Generic[T]):
    def convert(
        self,
        value: t.Union[str, T],
        param: t.Optional[click.Parameter],
        ctx: t.Optional[click.Context],
    ) -> T:
        return super().convert(value, param, ctx)


class VersionSpec(ParamTypeG[VersionSpecifier]):
    """A version alias (e.g. 'latest') or a semantic version, optionally prefixed with 'v'."""

    name = "version"

    def convert(self, value, param, ctx):
        if not isinstance(value, str):
            return value
        try:
            return parse_specifier(value)
        except InvalidVersion as err:
            self.fail(err.message, param, ctx)


def env_flag_option(
    var: str, *param_decls: str, help="", process_value: t.Any = None, **kwargs: t.Any
):
    def callback(ctx: click.Context, param: click.Parameter, value: bool):
        env = ctx.ensure_object(Env)
        if process_value:
            value = process_value(ctx, param, value)
        setattr(env, var, value)

    kwargs.setdefault("expose_value", False)
    kwargs.setdefault("is_eager", True)
    kwargs.setdefault("help", help)
    kwargs["callback"] = callback
    return click.option(*param_decls, **kwargs)


def yes_option(*param_decls: str, **kwargs: t.Any):
    if not param_decls:
        param_decls = ("--yes", "-y")

    kwargs.setdefault("is_flag", True)
    return env_flag_option(
        "skip_confirmation", *param_decls, help="Skip confirmation prompts.", **kwargs
    )


loglevel_flags = {
    "--debug": logging.DEBUG,
    "--quiet": logging.ERROR,
}


def is_debug_env():
    return os.getenv("SURREALVM_DEBUG", "").lower() in ("true", "yes", "1")


class CatchErrorsGroup(click.Group):
    def main(self, args=None, *params, **extra):
        if args is None:
            args = sys.argv[1:]
        logflags, args = partition(lambda arg: arg in loglevel_flags, list(args))
        debug = "--debug" in logflags or is_debug_env()
        if logflags:
            configure(loglevel_flags[logflags[-1]])
        elif debug:
            configure(logging.DEBUG)
        else:
            configure(logging.INFO)

        try:
            return super().main(args, *params, **extra)
        except SystemExit as e:
            sys.exit(e.code)
        except Exception as e:
            if debug:
                logger.exception("An unhandled exception has occurred:")
            else:
                logger.error(
                    "An unhandled exception has occurred:\n  "
                    + click.style(repr(e), "red")
                )
                logger.error(
                    "Use the --debug flag to disable clean exception handling."
                )
            sys.exit(1)