import logging
import os
import typing as t

import click
import yaml
from click import echo

import surrealvm.clickExt as clickExt
from surrealvm import links
from surrealvm import listing
from surrealvm import profile
from surrealvm import sources
from surrealvm import store
from surrealvm.config import Config
from surrealvm.config import pass_config
from surrealvm.errors import InstallError
from surrealvm.specifier import Custom
from surrealvm.specifier import Special
from surrealvm.specifier import SpecialTag
from surrealvm.specifier import VersionSpecifier
from surrealvm.store import InstalledArtifact
from surrealvm.store import InstallStatus
from surrealvm.surrealvm import cli

logger = logging.getLogger(__name__)


@cli.command()
@pass_config
def setup(config: Config):
    """Set up the SurrealVM directory and add it to PATH."""
    store.setup(config)
    echo(f"Created '{config.store_dir}'.")

    updated = profile.add_path(config)
    if updated:
        echo(f"{updated} updated")
    else:
        logger.warning("Didn't add to PATH, unsupported shell.")


@cli.command()
@clickExt.yes_option()
@pass_config
def clean(config: Config):
    """Remove SurrealVM with all installed versions, and remove it from PATH."""
    store.require_cleanable(config)
    if not clickExt.confirm_ext(
        f"Remove '{config.store_dir}' and all installed versions?", default=False
    ):
        raise click.Abort()

    store.clean(config)
    updated = profile.remove_path(config)
    if updated:
        echo(f"{updated} updated")
    else:
        logger.warning("Didn't remove from PATH, unsupported shell.")


def format_rows(rows: t.List[listing.Row]):
    return yaml.safe_dump(
        {
            row.name: {
                "kind": row.kind.value,
                "path": os.path.realpath(row.path),
                "active": row.active,
            }
            for row in rows
        },
        sort_keys=False,
    )


@cli.command(name="list")
@click.option("-v", "--verbose", is_flag=True, help="Show link targets.")
@pass_config
def list_cmd(config: Config, verbose: bool):
    """List installed SurrealDB versions."""
    rows = listing.list_versions(config)
    if not rows:
        logger.warning("No versions installed (use 'surrealvm install').")
        return

    if verbose:
        echo(format_rows(rows), nl=False)
        return

    for row in rows:
        echo(str(row))


cli.add_command(list_cmd, name="ls")


def install_version(
    config: Config, spec: VersionSpecifier, skip_existing: bool
) -> InstalledArtifact:
    """Resolve and install `spec`, updating its alias link if it is one."""
    version = sources.resolve(config, spec)
    artifact, status = store.ensure_installed(config, version)

    if status is InstallStatus.ALREADY_INSTALLED:
        if not skip_existing:
            raise InstallError(
                f"Version v{version} is already installed (use --skip-existing to ignore)."
            )
        logger.info(f"Version v{version} is already installed.")

    if isinstance(spec, Special):
        links.set_alias(config, spec.tag, artifact)
    return artifact


def activate(config: Config, spec: VersionSpecifier, artifact: InstalledArtifact):
    if isinstance(spec, Special):
        target = store.alias_name(spec.tag)
    else:
        assert isinstance(spec, Custom)
        target = store.unqualified_name(artifact.version)
        if not os.path.islink(config.store_path(target)):
            # unqualified link may be missing for stores created by older versions
            links.set_unqualified(config, artifact)
    links.set_active(config, target)
    echo(f"Using {spec} (v{artifact.version}).")


@cli.command()
@click.argument(
    "version", type=clickExt.VersionSpec(), default="latest", metavar="VERSION"
)
@click.option(
    "--use", "use_now", is_flag=True, help="Use the version after installing."
)
@click.option(
    "--skip-existing",
    is_flag=True,
    help="Do not fail if the version is already installed.",
)
@pass_config
def install(
    config: Config, version: VersionSpecifier, use_now: bool, skip_existing: bool
):
    """Install a SurrealDB version.

    VERSION can be 'latest', 'beta', 'alpha', 'nightly' or a version number
    (e.g. 'v1.2.3'). Defaults to 'latest'.
    """
    if isinstance(version, Special) and version.tag is SpecialTag.NONE:
        raise click.BadParameter("'none' cannot be installed.", param_hint="VERSION")

    store.require_store(config)
    artifact = install_version(config, version, skip_existing or use_now)
    if use_now:
        activate(config, version, artifact)


@cli.command()
@click.argument(
    "version", type=clickExt.VersionSpec(), default="latest", metavar="VERSION"
)
@click.option(
    "--no-install",
    is_flag=True,
    help="Fail instead of installing a missing version.",
)
@pass_config
def use(config: Config, version: VersionSpecifier, no_install: bool):
    """Use a SurrealDB version.

    VERSION can be 'none', 'latest', 'beta', 'alpha', 'nightly' or a version
    number. Aliases are looked up again and installed if they changed.
    """
    store.require_store(config)
    if isinstance(version, Special) and version.tag is SpecialTag.NONE:
        links.set_active_none(config)
        echo("No version selected.")
        return

    resolved = sources.resolve(config, version)
    artifact = store.find_artifact(config, resolved)
    if not artifact:
        if no_install:
            raise InstallError(
                f"Version v{resolved} is not installed (try: surrealvm install {version})."
            )
        artifact, _ = store.ensure_installed(config, resolved)

    if isinstance(version, Special):
        links.set_alias(config, version.tag, artifact)
    activate(config, version, artifact)
