"""Main CLI entry point for the Wellness Record Builder.

This module provides the main Click command group for the wellness-record CLI.
"""

from pathlib import Path
from typing import Optional

import click

from wellness_record import __version__
from wellness_record.cli.feed_commands import feed
from wellness_record.cli.record_commands import record
from wellness_record.config import load_config
from wellness_record.logging_audit import configure_logging
from wellness_record.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="wellness-record")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-pii",
    is_flag=True,
    help="Redact PII (names, ABHA ids, phone numbers) from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_pii: bool,
) -> None:
    """Wellness Record Builder - NDHM FHIR Wellness Record generator.

    Loads a person feed, lets you pick a person and ABHA address, and builds
    an NDHM Wellness Record document bundle from the observations you enter.

    Common usage:

        # List persons in the feed
        wellness-record feed list patients.json

        # Generate a record for the first person with two vitals
        wellness-record record generate --feed patients.json --hr 72 --spo2 98

        # Use custom configuration file
        wellness-record --config custom/config.json feed list

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["verbose"] = verbose
    ctx.obj["redact_pii"] = redact_pii
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact_pii_setting = redact_pii if redact_pii else config_obj.logging.redact_pii

    configure_logging(
        level=log_level, log_file=log_file_path, redact_pii=redact_pii_setting
    )


cli.add_command(feed)
cli.add_command(record)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        wellness-record config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)

        click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
        click.echo(f"\nConfiguration file: {config_file}")
        click.echo("\nFeed:")
        click.echo(f"  Source:      {config_obj.feed.source}")
        click.echo(f"  Timeout:     {config_obj.feed.timeout}s")

        click.echo("\nPractitioner:")
        click.echo(f"  Name:        {config_obj.attester.name}")
        click.echo(f"  License:     {config_obj.attester.license}")
        click.echo(f"  Login id:    {config_obj.attester.login_id}")

        terminology = config_obj.terminology
        click.echo("\nTerminology:")
        click.echo(f"  Physical activity:  {terminology.physical_activity.system}|{terminology.physical_activity.code}")
        click.echo(f"  General assessment: {terminology.general_assessment.system}|{terminology.general_assessment.code}")
        click.echo(f"  Lifestyle:          {terminology.lifestyle.system}|{terminology.lifestyle.code}")
        click.echo(f"  Document type:      {terminology.document_type.system}|{terminology.document_type.code}")

        click.echo("\nLogging:")
        click.echo(f"  Level:       {config_obj.logging.level}")
        click.echo(f"  Log file:    {config_obj.logging.log_file}")
        click.echo(f"  Redact PII:  {config_obj.logging.redact_pii}")

    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"wellness-record version {__version__}")


if __name__ == "__main__":
    cli()
