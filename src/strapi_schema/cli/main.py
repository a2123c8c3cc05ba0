"""
strapi-schema CLI entry point.

Usage:
    strapi-schema fetch articles --all
    strapi-schema fetch homepage --single --populate '{"cover": true}'
    strapi-schema token
    strapi-schema repo merge internal
    strapi-schema repo reset main
    strapi-schema repo publish prerelease beta
"""

import sys

import click
from loguru import logger

from ..settings import settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """strapi-schema - typed Strapi REST client and repository tooling."""
    ctx.ensure_object(dict)
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level.upper())


@cli.group()
def repo():
    """Repository maintenance (merge, reset, publish)."""
    pass


# Register commands
from .commands.fetch import register_commands as register_fetch_commands
from .commands.repo import register_commands as register_repo_commands

register_fetch_commands(cli)
register_repo_commands(repo)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
