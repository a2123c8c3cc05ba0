"""
API commands.

Usage:
    strapi-schema fetch articles
    strapi-schema fetch articles --all --page-size 50
    strapi-schema fetch articles --page 2 --populate '{"cover": true}'
    strapi-schema fetch homepage --single
    strapi-schema token --identifier editor@example.com
"""

import asyncio
import json

import click
from loguru import logger

from ...client import StrapiClient
from ...exceptions import StrapiError
from ...models import Credentials, Pagination
from ...settings import Settings, settings


def _settings_with(url: str | None, token: str | None) -> Settings:
    """Copy of the global settings with command line overrides applied."""
    overrides = {}
    if url:
        overrides["url"] = url
    if token:
        overrides["api_token"] = token
    if not overrides:
        return settings
    return settings.model_copy(update={"strapi": settings.strapi.model_copy(update=overrides)})


def _parse_populate(value: str | None):
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--populate")


def _fail(error: StrapiError):
    logger.debug(repr(error))
    click.secho(f"✗ {error.code} {error.message}", fg="red", err=True)
    raise click.Abort()


@click.command()
@click.argument("plural_id")
@click.option("--single", is_flag=True, help="Fetch a single type or one document (plural_id/documentId)")
@click.option("--all", "fetch_all", is_flag=True, help="Walk every page of the collection")
@click.option("--page", type=click.IntRange(min=1), default=None, help="Page to fetch (default: 1)")
@click.option("--page-size", type=click.IntRange(min=1), default=None, help="Page size (default: STRAPI__PAGE_SIZE)")
@click.option("--populate", default=None, help="Populate directive as JSON (e.g. '{\"cover\": true}')")
@click.option("--url", default=None, help="API endpoint override (default: STRAPI__URL)")
@click.option("--token", default=None, help="Bearer token override (default: STRAPI__API_TOKEN)")
@click.pass_context
def fetch(
    ctx: click.Context,
    plural_id: str,
    single: bool,
    fetch_all: bool,
    page: int | None,
    page_size: int | None,
    populate: str | None,
    url: str | None,
    token: str | None,
):
    """
    Fetch entities and print the response as JSON.

    Without --single the path is treated as a collection. By default only
    page 1 is returned; --all follows pageCount until the last page.

    Example:
        strapi-schema fetch articles --all --populate '{"author": true}'
    """
    if single and (fetch_all or page or page_size):
        raise click.UsageError("--single cannot be combined with pagination options")
    if fetch_all and page:
        raise click.UsageError("--all and --page are mutually exclusive")

    populate_value = _parse_populate(populate)
    config = _settings_with(url, token)
    http_client = ctx.obj.get("http_client")

    async def _run():
        options = {"page_size": page_size} if page_size else {}
        client = await StrapiClient.from_settings(config, http_client=http_client, **options)
        if single:
            return await client.get_single(plural_id, populate=populate_value)

        pagination = False if fetch_all else Pagination(page=page or 1)
        return await client.get_collection(plural_id, populate=populate_value, pagination=pagination)

    try:
        response = asyncio.run(_run())
    except StrapiError as e:
        _fail(e)

    click.echo(json.dumps(response.model_dump(), indent=2, default=str))


@click.command()
@click.option("--identifier", "-i", default=None, help="Login identifier (default: STRAPI__IDENTIFIER)")
@click.option("--password", "-p", default=None, help="Login password (default: STRAPI__PASSWORD)")
@click.option("--url", default=None, help="API endpoint override (default: STRAPI__URL)")
@click.pass_context
def token(ctx: click.Context, identifier: str | None, password: str | None, url: str | None):
    """
    Exchange credentials for a JWT and print it.

    Missing values are read from settings, then prompted for.
    """
    identifier = identifier or settings.strapi.identifier or click.prompt("Identifier")
    password = password or settings.strapi.password or click.prompt("Password", hide_input=True)
    endpoint = url or settings.strapi.url

    async def _run():
        client = await StrapiClient.create(
            endpoint,
            auth=Credentials(identifier=identifier, password=password),
            http_client=ctx.obj.get("http_client"),
            timeout=settings.strapi.timeout,
        )
        return client.token

    try:
        jwt = asyncio.run(_run())
    except StrapiError as e:
        _fail(e)

    click.echo(jwt)


def register_commands(cli_group):
    """Register API commands."""
    cli_group.add_command(fetch)
    cli_group.add_command(token)
