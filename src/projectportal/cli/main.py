"""Command-line entry point for the project portal."""

import logging
import os
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from .. import __version__
from ..exceptions import StoreCorruptedError
from ..models.config import PortalConfig, discover_config
from ..storage.json_store import JsonProjectStore
from .config import config


def _load_config(config_path: str | None) -> PortalConfig:
    try:
        return discover_config(Path.cwd(), Path(config_path) if config_path else None)
    except (yaml.YAMLError, ValidationError) as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)


def _open_store(portal_config: PortalConfig) -> JsonProjectStore:
    try:
        return JsonProjectStore(portal_config.database_path)
    except StoreCorruptedError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="projectportal")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Config file (default: .projectportal.yaml in the current directory)",
)
@click.pass_context
def cli(ctx, config_path):
    """Student project submission portal."""
    ctx.obj = {"config_path": config_path}


@cli.command()
@click.option("--host", default=None, help="Interface to bind (overrides config)")
@click.option("--port", type=int, default=None, help="Port to listen on (overrides config)")
@click.option(
    "--config",
    "serve_config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Config file for this server (overrides the global --config)",
)
@click.option("--reload", is_flag=True, help="Restart the server when code changes")
@click.pass_context
def serve(ctx, host, port, serve_config_path, reload):
    """Run the portal web server.

    Examples:

        \b
        # Serve with settings from .projectportal.yaml
        projectportal serve

        \b
        # Serve on all interfaces
        projectportal serve --host 0.0.0.0 --port 8080

        \b
        # Development server with a specific config
        projectportal serve --config dev.yaml --reload
    """
    import uvicorn

    from ..api.app import CONFIG_ENV_VAR, create_app

    config_path = serve_config_path or ctx.obj["config_path"]
    portal_config = _load_config(config_path)
    logging.basicConfig(
        level=portal_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = host or portal_config.host
    port = port or portal_config.port
    log_level = portal_config.log_level.lower()

    click.echo(f"Student Project Portal running on http://{host}:{port}")
    click.echo(f"Default save location: {portal_config.default_save_path}")
    click.echo(f"Database: {portal_config.database_path}")

    if reload:
        # The reloader re-imports the app in a child process, so the config
        # path travels through the environment.
        if config_path:
            os.environ[CONFIG_ENV_VAR] = str(Path(config_path).resolve())
        uvicorn.run(
            "projectportal.api.app:app_factory",
            factory=True,
            reload=True,
            host=host,
            port=port,
            log_level=log_level,
        )
        return

    app = create_app(portal_config, store=_open_store(portal_config))
    uvicorn.run(app, host=host, port=port, log_level=log_level)


@cli.command()
@click.pass_context
def stats(ctx):
    """Show submission statistics."""
    store = _open_store(_load_config(ctx.obj["config_path"]))
    summary = store.stats()

    click.echo(f"Projects:       {summary.total_projects}")
    click.echo(f"Team members:   {summary.total_team_members}")
    click.echo(f"Avg team size:  {summary.average_team_size}")
    click.echo(f"Stored bytes:   {summary.total_file_bytes}")
    click.echo(f"Latest:         {summary.latest_submission or '-'}")
    click.echo(f"Database:       {summary.database_path} ({summary.database_size_bytes} bytes)")


@cli.command()
@click.pass_context
def compact(ctx):
    """Rewrite the database file, dropping duplicate records."""
    store = _open_store(_load_config(ctx.obj["config_path"]))
    if store.compact():
        click.echo(f"✅ Database compacted: {store.db_path}")
    else:
        click.echo(f"❌ Failed to compact database: {store.db_path}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def migrate(ctx):
    """Upgrade project folders that still use the old layout."""
    from ..services.migration import LegacyFolderMigrator

    store = _open_store(_load_config(ctx.obj["config_path"]))
    result = LegacyFolderMigrator(store).run()

    click.echo(f"Updated {result.updated_count} existing folders with new file structure")
    if result.skipped_ids:
        click.echo(f"Skipped {len(result.skipped_ids)} projects with missing folders")
    if result.failed_ids:
        click.echo(f"⚠️  {len(result.failed_ids)} projects failed:", err=True)
        for project_id in result.failed_ids:
            click.echo(f"  - {project_id}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("query")
@click.option(
    "--type",
    "search_type",
    default=None,
    help="Field to search: project, member, usn or folder (default: all)",
)
@click.pass_context
def search(ctx, query, search_type):
    """Search stored projects by QUERY."""
    store = _open_store(_load_config(ctx.obj["config_path"]))
    try:
        projects = store.search(query, search_type)
    except ValueError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if not projects:
        click.echo("No matching projects.")
        return

    for project in projects:
        members = ", ".join(f"{m.name} ({m.usn})" for m in project.team_members)
        click.echo(f"{project.id}  {project.project_name}  [{members}]")
        click.echo(f"    {project.project_path}")


cli.add_command(config)


if __name__ == "__main__":
    cli()
