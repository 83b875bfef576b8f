"""Wellness Record CLI commands.

This module provides the ``record generate`` command, the command-line
counterpart of the wellness form: pick a person from the feed, enter
observations and produce the FHIR document bundle.
"""

import json as json_lib
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from wellness_record.document import WellnessRecordGenerator, attester_from_config
from wellness_record.document.inputs import (
    merge_inputs,
    observation_inputs_from_dict,
    parse_lifestyle_pair,
    vitals_from_form,
)
from wellness_record.feed import load_feed, select_health_address
from wellness_record.models.observations import ObservationInputs
from wellness_record.profiles import VITAL_PRESETS
from wellness_record.utils.exceptions import (
    BundleIntegrityError,
    PreconditionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def vital_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add one option per vital sign preset (--hr, --systolic...)."""
    for key, label, unit, _ in reversed(VITAL_PRESETS):
        func = click.option(
            f"--{key}", key, default=None, help=f"{label} ({unit})"
        )(func)
    return func


def load_inputs_file(path: Path) -> ObservationInputs:
    """Load observation inputs from a JSON file.

    Raises:
        ValidationError: If the file is not valid JSON or has the wrong shape
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json_lib.load(f)
    except json_lib.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e.msg} at line {e.lineno}") from e
    return observation_inputs_from_dict(data)


@click.group()
def record() -> None:
    """Wellness Record generation commands."""
    pass


@record.command("generate")
@click.option("--feed", "feed_source", default=None, help="Person feed URL or file (default: feed.source)")
@click.option("--patient", "patient_index", type=int, default=0, show_default=True, help="Index of the person in the feed")
@click.option("--abha-address", default=None, help="ABHA address to use (default: first candidate)")
@click.option("--practitioner-name", default=None, help="Practitioner name (overrides config)")
@click.option("--license", "license_number", default=None, help="Practitioner license (overrides config)")
@click.option("--login-id", default=None, help="Practitioner login id (overrides config)")
@click.option("--physical-activity", default=None, help="Physical activity summary")
@click.option("--general-notes", default=None, help="General assessment notes")
@click.option("--pain/--no-pain", default=None, help="Any current pain?")
@click.option("--lifestyle", multiple=True, metavar="LABEL=VALUE", help="Lifestyle item (repeatable)")
@vital_options
@click.option(
    "--inputs",
    "inputs_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with observation inputs",
)
@click.option("--seed", type=int, default=None, help="Seed for reproducible resource ids")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the bundle to this file instead of stdout",
)
@click.pass_context
def generate_command(
    ctx: click.Context,
    feed_source: Optional[str],
    patient_index: int,
    abha_address: Optional[str],
    practitioner_name: Optional[str],
    license_number: Optional[str],
    login_id: Optional[str],
    physical_activity: Optional[str],
    general_notes: Optional[str],
    pain: Optional[bool],
    lifestyle: tuple[str, ...],
    inputs_file: Optional[Path],
    seed: Optional[int],
    output: Optional[Path],
    **vitals: Optional[str],
) -> None:
    """Generate a Wellness Record bundle for one person of the feed.

    Exits with code 0 and prints the bundle JSON (or writes it with
    --output). Exits with code 1 when the feed cannot be loaded, the inputs
    are invalid or generation is refused.

    Examples:

        # Heart rate and SpO2 for the first person
        wellness-record record generate --feed patients.json --hr 72 --spo2 98

        # Second person, specific ABHA address, lifestyle items
        wellness-record record generate --feed patients.json --patient 1 \\
            --abha-address asha@sbx --lifestyle Smoking=false --lifestyle "Diet=Vegetarian"

        # Observations from a file, reproducible ids, saved to disk
        wellness-record record generate --inputs inputs.json --seed 42 --output bundle.json
    """
    config = ctx.obj["config"]
    source = feed_source or config.feed.source

    result = load_feed(source, timeout=config.feed.timeout)
    if not result.persons:
        click.secho(result.message or f"No persons found in {source}", fg="red", err=True)
        sys.exit(1)
    if not 0 <= patient_index < len(result.persons):
        click.secho(
            f"Person index {patient_index} out of range (feed has {len(result.persons)} persons)",
            fg="red",
            err=True,
        )
        sys.exit(1)

    try:
        person = result.persons[patient_index]
        if abha_address is not None:
            person = select_health_address(person, abha_address)

        base_inputs = load_inputs_file(inputs_file) if inputs_file else None
        observations = merge_inputs(
            base_inputs,
            physical_activity=physical_activity,
            general_notes=general_notes,
            pain=pain,
            lifestyle=tuple(parse_lifestyle_pair(pair) for pair in lifestyle),
            vitals=vitals_from_form(vitals),
        )
    except (ValidationError, OSError) as e:
        click.secho(f"Invalid input: {e}", fg="red", err=True)
        logger.error(f"Invalid input: {e}")
        sys.exit(1)

    overrides = {
        key: value
        for key, value in (
            ("name", practitioner_name),
            ("license", license_number),
            ("login_id", login_id),
        )
        if value is not None
    }
    attester = attester_from_config(config.attester.model_copy(update=overrides))

    generator = WellnessRecordGenerator(config)
    try:
        bundle = generator.generate(person, attester, observations, seed=seed)
    except PreconditionError as e:
        click.secho(f"Generation refused: {e}", fg="red", err=True)
        sys.exit(1)
    except BundleIntegrityError as e:
        click.secho(f"Generation failed: {e}", fg="red", err=True)
        sys.exit(1)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        bundle.to_file(output)
        click.secho(generator.last_message, fg="green")
        click.echo(f"Bundle written to: {output}")
        click.echo(f"SHA256: {bundle.sha256_hash}")
    else:
        click.echo(bundle.to_json())
