"""Configuration management commands."""

import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from ..models.config import PortalConfig


@click.group()
def config():
    """Manage configuration files."""
    pass


@config.command()
@click.argument("config_path", type=click.Path(exists=True))
@click.option("--verbose", "-v", is_flag=True, help="Show detailed validation info")
def validate(config_path, verbose):
    """Validate configuration file.

    CONFIG_PATH: Path to .projectportal.yaml

    Checks for:
    - Valid YAML syntax
    - Known keys with valid values
    - Usable save and database locations (warnings)

    Examples:

        \b
        # Validate config file
        projectportal config validate .projectportal.yaml

        \b
        # Validate with verbose output
        projectportal config validate my-config.yaml --verbose
    """
    config_file = Path(config_path)

    if verbose:
        click.echo(f"Validating: {config_file}")
        click.echo("=" * 50)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if verbose:
            click.echo("✓ YAML syntax valid")

        config_obj = PortalConfig.from_yaml_dict(data)

        if verbose:
            click.echo("✓ Schema validation passed")

        warnings = []
        errors = []

        save_path = config_obj.default_save_path
        if save_path.exists() and not save_path.is_dir():
            errors.append(f"default_save_path exists but is not a directory: {save_path}")

        db_path = config_obj.database_path
        if db_path.exists() and db_path.is_dir():
            errors.append(f"database_path is a directory: {db_path}")
        elif not db_path.exists():
            warnings.append(f"database_path does not exist yet and will be created: {db_path}")

        if config_obj.public_dir and not config_obj.public_dir.is_dir():
            warnings.append(
                f"public_dir not found, pages will be disabled: {config_obj.public_dir}"
            )

        if config_obj.host not in ("127.0.0.1", "localhost"):
            warnings.append(
                f"Server binds to {config_obj.host}; the portal has no authentication"
            )

        if verbose:
            click.echo("✓ Semantic validation complete")
            click.echo()

        if not errors and not warnings:
            click.echo(f"✅ Config valid: {config_file}")
            sys.exit(0)

        if errors:
            click.echo(f"❌ Config validation failed: {config_file}", err=True)
            click.echo("\nErrors:", err=True)
            for error in errors:
                click.echo(f"  - {error}", err=True)
            sys.exit(1)

        click.echo(f"⚠️  Config valid with warnings: {config_file}")
        click.echo("\nWarnings:")
        for warning in warnings:
            click.echo(f"  - {warning}")
        sys.exit(0)

    except yaml.YAMLError as e:
        click.echo(f"❌ YAML syntax error: {config_file}", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)

    except ValidationError as e:
        click.echo(f"❌ Config validation failed: {config_file}", err=True)
        click.echo("\nSchema errors:", err=True)
        for error in e.errors():
            field = " → ".join(str(x) for x in error["loc"])
            click.echo(f"  - {field}: {error['msg']}", err=True)
        sys.exit(1)


@config.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=".projectportal.yaml",
    help="Output file path (default: .projectportal.yaml)",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing file")
def init(output, force):
    """Write a config file populated with the default settings.

    Examples:

        \b
        # Initialize default config
        projectportal config init

        \b
        # Overwrite existing file
        projectportal config init --force
    """
    output_path = Path(output)

    if output_path.exists() and not force:
        if not click.confirm(f"File {output_path} already exists. Overwrite?"):
            click.echo("Cancelled.")
            sys.exit(0)

    try:
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(PortalConfig().to_yaml_dict(), f, sort_keys=False)
    except OSError as e:
        click.echo(f"❌ Error creating config: {str(e)}", err=True)
        sys.exit(1)

    click.echo(f"✅ Created config: {output_path}")
    click.echo("\nEdit this file to set the save location and database path.")
    click.echo("Run 'projectportal config validate' to check your changes.")
