"""CLI interface for pocket-client.

Commands:
    setup   - Configure the application consumer key
    login   - Run the authorization flow and print an access token
    add     - Save a URL to Pocket
    status  - Show current configuration
"""

import sys
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    AppConfig,
    config_exists,
    load_config,
    save_config,
)
from .constants import ACCESS_TOKEN_ENV, DEFAULT_REDIRECT_URI
from .errors import PocketError
from .logging_config import setup_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Pocket client — authorize and save bookmarks from the command line."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


def _require_config(config_path: Path) -> AppConfig:
    if not config_exists(config_path):
        click.echo(
            "Error: No config found. Run 'pocket-client setup' first.",
            err=True,
        )
        sys.exit(1)
    try:
        return load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.pass_context
def setup(ctx):
    """Configure the Pocket application consumer key."""
    config_path = ctx.obj["config_path"]

    click.echo("Pocket Client — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("You need a consumer key for your Pocket application.")
    click.echo("Create one at https://getpocket.com/developer/apps/new")
    click.echo()

    consumer_key = click.prompt("consumer_key", hide_input=True)
    redirect_uri = click.prompt("redirect_uri", default=DEFAULT_REDIRECT_URI)

    config = AppConfig(consumer_key=consumer_key, redirect_uri=redirect_uri)
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")
    click.echo("Run 'pocket-client login' to obtain an access token.")


@main.command()
@click.option(
    "--open", "open_browser", is_flag=True, help="Open the authorization page in a browser"
)
@click.pass_context
def login(ctx, open_browser):
    """Authorize this application and print an access token."""
    config = _require_config(ctx.obj["config_path"])

    from .client import PocketClient

    try:
        with PocketClient(config.consumer_key, timeout=config.timeout) as client:
            request_token = client.get_request_token(config.redirect_uri)
            auth_url = client.get_authorization_url(
                request_token, config.redirect_uri
            )

            click.echo("Approve access in your browser:")
            click.echo(f"  {auth_url}")
            if open_browser:
                click.launch(auth_url)
            click.prompt(
                "Press Enter once you have approved access",
                default="",
                show_default=False,
            )

            response = client.authorize(request_token)
    except PocketError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nLogged in as {response.username or '<unknown>'}")
    click.echo(f"Access token: {response.access_token}")
    click.echo(f"Export it as {ACCESS_TOKEN_ENV} to use 'pocket-client add'.")


@main.command()
@click.argument("url")
@click.option("--title", default="", help="Bookmark title")
@click.option("--tag", "tags", multiple=True, help="Tag to apply (repeatable)")
@click.option(
    "--access-token",
    envvar=ACCESS_TOKEN_ENV,
    required=True,
    help=f"User access token (or set {ACCESS_TOKEN_ENV})",
)
@click.pass_context
def add(ctx, url, title, tags, access_token):
    """Save URL to Pocket."""
    config = _require_config(ctx.obj["config_path"])

    from .client import PocketClient
    from .models import AddInput

    item = AddInput(url=url, access_token=access_token, title=title, tags=tags)
    try:
        with PocketClient(config.consumer_key, timeout=config.timeout) as client:
            client.add(item)
    except PocketError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Added {url}")


@main.command()
@click.pass_context
def status(ctx):
    """Show current configuration."""
    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)

    click.echo("Pocket Client — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured'} ({config_path})")

    if not has_config:
        click.echo("\nRun 'pocket-client setup' to get started.")
        return

    config = load_config(config_path)
    click.echo(f"Redirect URI: {config.redirect_uri}")
    click.echo(f"Timeout: {config.timeout:g}s")
