"""
Repository maintenance commands.

Usage:
    strapi-schema repo merge internal
    strapi-schema repo reset main
    strapi-schema repo publish patch
    strapi-schema repo publish prerelease beta

Failed git, build or upload steps exit with the failing command's exit code.
"""

from pathlib import Path

import click

from ...release import (
    BUMP_TYPES,
    ProcessRunner,
    Publisher,
    ReleaseError,
    merge_branch,
    reset_repository,
)
from ...settings import settings


def _runner(ctx: click.Context) -> ProcessRunner:
    return ctx.obj.get("runner") or ProcessRunner()


def _exit(ctx: click.Context, error: ReleaseError):
    click.secho(f"✗ {error.message}", fg="red", err=True)
    ctx.exit(error.exit_code)


@click.command()
@click.argument("branch")
@click.pass_context
def merge(ctx: click.Context, branch: str):
    """
    Squash-merge BRANCH into the main branch and recreate it from main.

    Example:
        strapi-schema repo merge internal
    """
    try:
        merge_branch(
            branch,
            runner=_runner(ctx),
            main_branch=settings.release.main_branch,
            remote=settings.release.remote,
        )
    except ReleaseError as e:
        _exit(ctx, e)

    click.secho(f"✓ {branch} merged into {settings.release.main_branch} and recreated", fg="green")


@click.command()
@click.argument("branch")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def reset(ctx: click.Context, branch: str, yes: bool):
    """
    Replace the whole history with a single commit on BRANCH.

    Deletes every other local and remote branch and every remote tag.
    """
    if not yes:
        click.confirm(f"Rewrite history to a single commit on '{branch}'?", abort=True)

    try:
        reset_repository(branch, runner=_runner(ctx), remote=settings.release.remote)
    except ReleaseError as e:
        _exit(ctx, e)

    click.secho(f"✓ Repository reset to a single commit on {branch}", fg="green")


@click.command()
@click.argument("bump", type=click.Choice(BUMP_TYPES))
@click.argument("preid", required=False)
@click.pass_context
def publish(ctx: click.Context, bump: str, preid: str | None):
    """
    Bump the version, build, upload, then commit and tag the release.

    PREID is the pre-release label for pre* bumps (alpha, beta, rc).

    Example:
        strapi-schema repo publish prerelease beta
    """
    release = settings.release
    pyproject_path = Path(release.pyproject_path)
    publisher = Publisher(
        pyproject_path,
        pyproject_path.parent / release.resolve_file,
        runner=_runner(ctx),
        main_branch=release.main_branch,
        remote=release.remote,
    )

    try:
        version = publisher.publish(bump, preid)
    except ReleaseError as e:
        _exit(ctx, e)

    click.secho(f"✓ Published {version}", fg="green")


def register_commands(repo_group):
    """Register repository commands."""
    repo_group.add_command(merge)
    repo_group.add_command(reset)
    repo_group.add_command(publish)
