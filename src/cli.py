#!/usr/bin/env python3
"""
cbkctl - command line interface for the ChatBotKit reconciler.

Provides kubectl-like commands for looking up and managing ChatBotKit
entities, plus plan/apply over a declared configuration file.
"""

import asyncio
import json
import logging
import os
import sys

import click
import yaml
from tabulate import tabulate

from config import LoggingConfig, load_config
from controller import ChangeAction, Controller
from entities import KINDS, get_kind
from errors import ReconcilerError
from provider import Provider
from schema_sync import API_SPEC_URL, declared_record_schema, validate_api_sync
from validation import validate_spec_against_schema

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

KIND_ARGUMENT = click.Choice(sorted(KINDS), case_sensitive=False)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_file(filename: str):
    """Read a YAML or JSON document."""
    with open(filename, "r") as f:
        if filename.endswith(".yaml") or filename.endswith(".yml"):
            return yaml.safe_load(f)
        return json.load(f)


def _load_record(kind: str, filename: str) -> dict:
    """Read a declared record and check it against the kind's schema."""
    record = _load_file(filename)
    if not isinstance(record, dict):
        _fail(f"{filename} must contain a single {kind} object")
    ok, error = validate_spec_against_schema(record, declared_record_schema(kind))
    if not ok:
        _fail(f"Invalid {kind} in {filename}: {error}")
    return record


def _load_desired(filename: str) -> dict:
    """Read a declared configuration: a mapping of '<kind>.<name>' to records."""
    desired = _load_file(filename) or {}
    if not isinstance(desired, dict):
        _fail(f"{filename} must map '<kind>.<name>' addresses to records")
    for address, record in desired.items():
        kind = address.partition(".")[0].lower()
        if kind not in KINDS:
            _fail(f"Unknown resource kind in address '{address}'")
        if not isinstance(record, dict):
            _fail(f"{address}: record must be an object")
        ok, error = validate_spec_against_schema(record, declared_record_schema(kind))
        if not ok:
            _fail(f"{address}: {error}")
    return desired


def _load_state(filename: str) -> dict:
    if not os.path.exists(filename):
        return {}
    with open(filename, "r") as f:
        state = json.load(f)
    if not isinstance(state, dict):
        _fail(f"{filename} is not a state file")
    return state


def _redact(kind: str, record: dict) -> dict:
    return {
        key: value
        for key, value in record.items()
        if key not in get_kind(kind).sensitive_fields
    }


def _echo_record(record: dict, output: str) -> None:
    if output == "yaml":
        click.echo(yaml.dump(record, default_flow_style=False))
    else:
        click.echo(json.dumps(record, indent=2))


def _provider() -> Provider:
    """Build a provider configured from the environment."""
    try:
        config = load_config()
        provider = Provider()
        provider.configure(config.client)
    except ValueError as e:
        _fail(str(e))
    return provider


def _run(coro):
    """Run a coroutine, reporting reconciler errors on stderr."""
    try:
        return asyncio.run(coro)
    except (ReconcilerError, ValueError) as e:
        _fail(str(e))


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Overrides the LOG_LEVEL environment variable",
)
def cli(log_level):
    """cbkctl - kubectl-like interface for ChatBotKit resources"""
    level = (log_level or LoggingConfig.from_env().log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


@cli.command(name="list")
@click.argument("kind", type=KIND_ARGUMENT)
@click.option(
    "--output", "-o", type=click.Choice(["table", "json", "yaml"]), default="table"
)
def list_entities(kind, output):
    """List every entity of a kind"""
    provider = _provider()
    records = _run(provider.datasource(kind.lower()).fetch_all())

    if output == "json":
        click.echo(json.dumps(records, indent=2))
    elif output == "yaml":
        click.echo(yaml.dump(records, default_flow_style=False))
    elif not records:
        click.echo(f"No {kind.lower()} entities found")
    else:
        headers = ["ID", "Name", "Created", "Updated"]
        rows = [
            [r["id"], r.get("name", ""), r["created_at"], r["updated_at"]]
            for r in records
        ]
        click.echo(tabulate(rows, headers=headers, tablefmt="grid"))


@cli.command()
@click.argument("kind", type=KIND_ARGUMENT)
@click.argument("entity_id")
@click.option("--output", "-o", type=click.Choice(["json", "yaml"]), default="json")
def describe(kind, entity_id, output):
    """Describe a single entity"""
    provider = _provider()
    record = _run(provider.datasource(kind.lower()).fetch_one(entity_id))
    _echo_record(record, output)


@cli.command()
@click.argument("kind", type=KIND_ARGUMENT)
@click.argument("filename", type=click.Path(exists=True))
def create(kind, filename):
    """Create an entity from a YAML/JSON file"""
    kind = kind.lower()
    record = _load_record(kind, filename)
    provider = _provider()
    state = _run(provider.resource(kind).create(record))

    click.echo(f"{kind} created successfully!")
    click.echo(f"ID: {state['id']}")
    _echo_record(_redact(kind, state), "json")


@cli.command()
@click.argument("kind", type=KIND_ARGUMENT)
@click.argument("entity_id")
@click.argument("filename", type=click.Path(exists=True))
def update(kind, entity_id, filename):
    """Overwrite an entity with the contents of a YAML/JSON file"""
    kind = kind.lower()
    record = _load_record(kind, filename)
    provider = _provider()
    resource = provider.resource(kind)
    state = _run(resource.update(resource.import_state(entity_id), record))

    click.echo(f"{kind} updated successfully!")
    _echo_record(_redact(kind, state), "json")


@cli.command()
@click.argument("kind", type=KIND_ARGUMENT)
@click.argument("entity_id")
@click.confirmation_option(prompt="Are you sure you want to delete this entity?")
def delete(kind, entity_id):
    """Delete an entity"""
    kind = kind.lower()
    provider = _provider()
    resource = provider.resource(kind)
    _run(resource.delete(resource.import_state(entity_id)))
    click.echo(f"{kind} {entity_id} deleted")


@cli.command(name="import")
@click.argument("kind", type=KIND_ARGUMENT)
@click.argument("entity_id")
@click.option("--output", "-o", type=click.Choice(["json", "yaml"]), default="json")
def import_entity(kind, entity_id, output):
    """Import an existing entity and show the refreshed record"""
    kind = kind.lower()
    provider = _provider()
    resource = provider.resource(kind)
    state = _run(resource.read(resource.import_state(entity_id)))
    if state is None:
        _fail(f"{kind} {entity_id} does not exist")
    _echo_record(_redact(kind, state), output)


@cli.command()
@click.argument("desired_file", type=click.Path(exists=True))
@click.argument("state_file", type=click.Path())
def plan(desired_file, state_file):
    """Show the changes apply would make, without refreshing state"""
    desired = _load_desired(desired_file)
    state = _load_state(state_file)
    try:
        changes = Controller(Provider()).plan(desired, state)
    except ValueError as e:
        _fail(str(e))

    if not changes:
        click.echo("No changes. Remote configuration matches.")
        return

    rows = [
        [change.action.value, change.address, ", ".join(change.changed_fields)]
        for change in changes
    ]
    click.echo(tabulate(rows, headers=["Action", "Address", "Fields"], tablefmt="grid"))

    counts = {action: 0 for action in ChangeAction}
    for change in changes:
        counts[change.action] += 1
    click.echo(
        f"Plan: {counts[ChangeAction.CREATE]} to create, "
        f"{counts[ChangeAction.UPDATE]} to update, "
        f"{counts[ChangeAction.DELETE]} to delete."
    )


@cli.command()
@click.argument("desired_file", type=click.Path(exists=True))
@click.argument("state_file", type=click.Path())
def apply(desired_file, state_file):
    """Reconcile remote entities with a declared configuration file"""
    desired = _load_desired(desired_file)
    state = _load_state(state_file)
    provider = _provider()
    controller = Controller(provider, load_config().controller)
    report = _run(controller.apply(desired, state))

    with open(state_file, "w") as f:
        json.dump(report.state, f, indent=2, sort_keys=True)

    rows = [
        [
            result.address,
            result.action.value,
            "✓" if result.success else "✗",
            "yes" if result.drift_detected else "",
            result.message,
        ]
        for result in report.results
    ]
    click.echo(
        tabulate(
            rows,
            headers=["Address", "Action", "Success", "Drift", "Message"],
            tablefmt="grid",
        )
    )

    if not report.success:
        _fail(f"{len(report.failed)} address(es) failed to reconcile")


@cli.command(name="validate-api")
@click.option("--url", default=API_SPEC_URL, help="OpenAPI spec endpoint")
def validate_api(url):
    """Check the entity models against the ChatBotKit API schema"""
    report = validate_api_sync(url)
    click.echo(f"Schema source: {report.source}")

    rows = []
    for kind, result in report.results.items():
        rows.extend([kind, "error", message] for message in result.errors)
        rows.extend([kind, "warning", message] for message in result.warnings)
        if not result.errors and not result.warnings:
            rows.append([kind, "ok", ""])
    click.echo(tabulate(rows, headers=["Kind", "Level", "Message"], tablefmt="grid"))

    if not report.ok:
        _fail("API schema is out of sync with the entity models")


if __name__ == "__main__":
    cli()
