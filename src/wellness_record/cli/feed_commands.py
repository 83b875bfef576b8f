"""Feed-related CLI commands for the Wellness Record Builder."""

import json as json_lib
import logging
import sys
from typing import Optional

import click

from wellness_record.cli.output import console_logging_suppressed
from wellness_record.feed import load_feed
from wellness_record.models.person import Gender

logger = logging.getLogger(__name__)


@click.group()
def feed() -> None:
    """Person feed commands."""
    pass


@feed.command("list")
@click.argument("source", required=False)
@click.option("--json", "json_output", is_flag=True, help="Output persons as JSON")
@click.pass_context
def list_command(ctx: click.Context, source: Optional[str], json_output: bool) -> None:
    """Load the person feed and list the normalized persons.

    SOURCE is a URL, JSON file or CSV file (default: feed.source from config).
    Exits with code 1 when the feed cannot be loaded.

    Examples:

        wellness-record feed list patients.json

        wellness-record feed list https://example.org/patients.json --json
    """
    feed_config = ctx.obj["config"].feed
    source = source or feed_config.source

    with console_logging_suppressed(json_output):
        result = load_feed(source, timeout=feed_config.timeout)

    if not result.persons:
        click.secho(result.message or f"No persons found in {source}", fg="red", err=True)
        sys.exit(1)

    if json_output:
        rows = [
            {
                "index": index,
                "name": person.display_name,
                "gender": None if person.gender is Gender.ABSENT else person.gender.value,
                "birth_date": person.birth_date,
                "abha_number": person.external_health_id,
                "abha_addresses": list(person.health_address_candidates),
                "selected_abha_address": person.external_health_address,
                "warnings": list(result.diagnostics.get(index, ())),
            }
            for index, person in enumerate(result.persons)
        ]
        click.echo(json_lib.dumps(rows, indent=2, ensure_ascii=False))
        return

    click.secho(result.message, fg="green")
    for index, person in enumerate(result.persons):
        click.echo(f"\n[{index}] {person.display_name or '(no name)'}")
        click.echo(f"    Gender:        {person.gender.value}")
        click.echo(f"    Date of birth: {person.birth_date or 'Not provided'}")
        click.echo(f"    ABHA number:   {person.external_health_id or 'Not provided'}")
        addresses = ", ".join(person.health_address_candidates) or "None"
        click.echo(f"    ABHA addresses: {addresses}")
        for note in result.diagnostics.get(index, ()):
            click.secho(f"    Warning: {note}", fg="yellow")
