#!/usr/bin/env python
import logging
import os
from importlib import import_module

import click

import surrealvm.clickExt as clickExt
from surrealvm.config import Config
from surrealvm.config import Env


# This should be the root module logger, even though __name__ is 'surrealvm.surrealvm'
logger = logging.getLogger("surrealvm")


@click.group(
    cls=clickExt.CatchErrorsGroup,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.pass_context
@click.version_option(package_name="surrealvm")
def cli(ctx: click.Context):
    """Install and switch between versions of SurrealDB."""
    # A Config may already be provided by the caller (e.g. tests)
    if not isinstance(ctx.obj, Config):
        ctx.obj = Config.from_environment()
    # Inject another context as the parent
    env_ctx = click.Context(ctx.command, ctx.parent, obj=Env())
    ctx.parent = env_ctx


cmd_folder = os.path.abspath(os.path.join(os.path.dirname(__file__), "commands"))
for filename in sorted(os.listdir(cmd_folder)):
    if filename.endswith(".py") and not filename.startswith("__"):
        import_module(f"surrealvm.commands.{filename[:-3]}")
