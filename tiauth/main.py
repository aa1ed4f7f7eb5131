"""tiauth CLI — thin wrapper around AuthSessionManager.

This module adds:
- Click commands for login, logout, status and mid
- Config-file resolution with CLI overrides
- Rich rendering of the session status
"""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from tiauth._version import __version__
from tiauth.config import AuthConfig, load_config
from tiauth.errors import AuthError
from tiauth.logging import setup_logging
from tiauth.manager import AuthSessionManager


def _fail(exc: AuthError) -> click.ClickException:
    message = f"{exc} [{exc.code.value}]"
    if exc.hint:
        message = f"{message}\n{exc.hint}"
    return click.ClickException(message)


@click.group()
@click.version_option(version=__version__, prog_name="tiauth")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: ~/.titanium/tiauth.yaml or ./.tiauth.yaml).",
)
@click.option(
    "--home-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding auth_session.json and mid.json (default: ~/.titanium).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: WARNING).",
)
@click.option("--log-file", default=None, help="Also write logs to this file.")
@click.pass_context
def cli(ctx, config_path, home_dir, log_level, log_file):
    """tiauth - manage the CLI's authentication session."""
    file_config = load_config(config_path)
    config = AuthConfig.from_sources(
        file_config, home_dir=home_dir, log_level=log_level, log_file=log_file
    )
    setup_logging(config.log_level, config.log_file)
    ctx.obj = config


def _manager(ctx) -> AuthSessionManager:
    return AuthSessionManager(ctx.obj)


@cli.command()
@click.option("--username", "-u", prompt=True, help="Account email address.")
@click.option(
    "--password", "-p", prompt=True, hide_input=True, help="Account password."
)
@click.option(
    "--mid", default=None,
    help="Use this machine id; the session is then not written to disk.",
)
@click.option("--login-url", default=None, help="Override the login endpoint.")
@click.option("--proxy", default=None, help="Proxy server to use.")
@click.pass_context
def login(ctx, username, password, mid, login_url, proxy):
    """Log in and store the session cookie."""
    manager = _manager(ctx)
    try:
        record = asyncio.run(
            manager.login(
                username, password, mid=mid, login_url=login_url, proxy=proxy
            )
        )
    except AuthError as exc:
        raise _fail(exc) from exc
    email = (record.data or {}).get("email") or username
    click.echo(f"Logged in as {email}")


@cli.command()
@click.option("--logout-url", default=None, help="Override the logout endpoint.")
@click.option("--proxy", default=None, help="Proxy server to use.")
@click.pass_context
def logout(ctx, logout_url, proxy):
    """End the session on the server and locally."""
    manager = _manager(ctx)
    try:
        result = asyncio.run(manager.logout(logout_url=logout_url, proxy=proxy))
    except AuthError as exc:
        if exc.result is not None:
            click.echo("Local session cleared.", err=True)
        raise _fail(exc) from exc
    if result.already_logged_out:
        click.echo("Already logged out.")
    else:
        click.echo("Logged out.")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON.")
@click.pass_context
def status(ctx, as_json):
    """Show the current session."""
    snapshot = _manager(ctx).status()
    if as_json:
        click.echo(json.dumps(snapshot.model_dump(by_alias=True)))
        return

    table = Table(box=None, padding=(0, 2), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row(
        "Logged in",
        "[green]yes[/green]" if snapshot.logged_in else "[red]no[/red]",
    )
    if snapshot.logged_in:
        table.add_row("Email", str(snapshot.email or "-"))
        table.add_row("UID", str(snapshot.uid or "-"))
        table.add_row("GUID", str(snapshot.guid or "-"))
    Console().print(table)


@cli.command()
@click.pass_context
def mid(ctx):
    """Print this machine's identifier, creating it if needed."""
    click.echo(_manager(ctx).resolve_machine_id())


if __name__ == "__main__":
    cli()
