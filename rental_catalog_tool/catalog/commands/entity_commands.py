"""
Entity commands: save, get, list and delete for every entity kind.

One click group is built per kind from the same factory, so delegations,
cars, bookings and users share option handling, output and exit codes.
"""

import json
import sys
from typing import Any

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreSettings, open_catalog
from ..core import keys
from ..exceptions import CatalogError
from ..logging_config import get_logger
from ..models import Entity, EntityKind
from ..utils import output_json, output_text
from .options import fail, store_options

logger = get_logger(__name__)

# Owner listings available per kind: option name -> repository method
_LIST_FILTERS: dict[EntityKind, dict[str, str]] = {
    EntityKind.CAR: {"delegation": "list_by_delegation"},
    EntityKind.BOOKING: {"car": "list_by_car", "user": "list_by_user"},
}

_ERRORS = (CatalogError, ValueError, TypeError, ClientError, BotoCoreError)


def _load_attributes(raw: str) -> dict[str, Any]:
    """Parse the JSON attributes argument ('-' reads stdin)."""
    if raw == "-":
        raw = sys.stdin.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Attributes are not valid JSON: {e.msg}")
    if not isinstance(data, dict):
        raise ValueError("Attributes must be a JSON object")
    return data


def _format_text(attributes: dict[str, Any]) -> str:
    return "  ".join(f"{name}={value}" for name, value in attributes.items())


def _emit(entity: Entity, text: bool) -> None:
    attributes = keys.to_attributes(entity)
    if text:
        output_text(_format_text(attributes))
    else:
        output_json(attributes)


def _save_command(kind: EntityKind) -> click.Command:
    @click.command("save")
    @click.argument("attributes")
    @store_options
    @click.pass_context
    def save_command(
        ctx: click.Context,
        attributes: str,
        settings: StoreSettings,
        text: bool,
    ) -> None:
        try:
            entity = keys.from_attributes(kind, _load_attributes(attributes))
            logger.info(f"Saving {kind.value} in table '{settings.table_name}'")
            saved = open_catalog(settings).repository(kind).save(entity)
            _emit(saved, text)
        except _ERRORS as e:
            fail(ctx, e, text)

    save_command.help = (
        f"Create or replace a {kind.value}.\n\n"
        f"ATTRIBUTES is a JSON object (or '-' to read it from stdin). "
        f"A {kind.value} without an identifier gets a new one.\n\n"
        f"Exit codes: 0 saved, 1 unknown owner or conflicting booking, "
        f"2 invalid input, 3 AWS error."
    )
    return save_command


def _get_command(kind: EntityKind) -> click.Command:
    @click.command("get")
    @click.argument("identifier")
    @store_options
    @click.pass_context
    def get_command(
        ctx: click.Context,
        identifier: str,
        settings: StoreSettings,
        text: bool,
    ) -> None:
        try:
            logger.info(f"Getting {kind.value} '{identifier}'")
            entity = open_catalog(settings).repository(kind).require(identifier)
            _emit(entity, text)
        except _ERRORS as e:
            fail(ctx, e, text)

    get_command.help = f"Get a {kind.value} by identifier.\n\nExit codes: 0 found, 1 not found."
    return get_command


def _list_command(kind: EntityKind) -> click.Command:
    filters = _LIST_FILTERS.get(kind, {})

    @store_options
    @click.pass_context
    def list_command(
        ctx: click.Context,
        settings: StoreSettings,
        text: bool,
        **selected: str | None,
    ) -> None:
        chosen = {name: value for name, value in selected.items() if value}
        if len(chosen) > 1:
            fail(ctx, ValueError(f"Use only one of --{', --'.join(chosen)}"), text)

        try:
            repository = open_catalog(settings).repository(kind)
            if chosen:
                name, value = next(iter(chosen.items()))
                logger.info(f"Listing {kind.value} records with {name} '{value}'")
                entities = getattr(repository, filters[name])(value)
            else:
                logger.info(f"Listing all {kind.value} records")
                entities = repository.list_all()
        except _ERRORS as e:
            fail(ctx, e, text)

        rows = [keys.to_attributes(entity) for entity in entities]
        if text:
            if not rows:
                output_text(f"No {kind.value} records found")
            for row in rows:
                output_text(_format_text(row))
        else:
            output_json({"items": rows, "count": len(rows)})

    for name in filters:
        list_command = click.option(f"--{name}", help=f"Only records of this {name}")(
            list_command
        )
    command = click.command("list")(list_command)
    command.help = (
        f"List {kind.value} records.\n\n"
        f"Without a filter the whole table is scanned."
    )
    return command


def _delete_command(kind: EntityKind) -> click.Command:
    cascade = {
        EntityKind.DELEGATION: " Its cars and their bookings are deleted too.",
        EntityKind.CAR: " Its bookings are deleted too.",
        EntityKind.USER: " Their bookings are deleted too.",
    }.get(kind, "")

    @click.command("delete")
    @click.argument("identifier")
    @store_options
    @click.pass_context
    def delete_command(
        ctx: click.Context,
        identifier: str,
        settings: StoreSettings,
        text: bool,
    ) -> None:
        try:
            logger.info(f"Deleting {kind.value} '{identifier}'")
            open_catalog(settings).repository(kind).delete(identifier)
        except _ERRORS as e:
            fail(ctx, e, text)

        if text:
            output_text(f"Deleted {kind.value} '{identifier}'")
        else:
            output_json({"kind": kind.value, "id": identifier, "deleted": True})

    delete_command.help = (
        f"Delete a {kind.value}.{cascade}\n\n"
        f"Deleting a missing {kind.value} succeeds, so an interrupted delete can be rerun."
    )
    return delete_command


def entity_group(kind: EntityKind) -> click.Group:
    """Build the command group for one entity kind."""

    @click.group(kind.value)
    def group() -> None:
        pass

    group.help = f"Manage {kind.value} records"
    group.add_command(_save_command(kind))
    group.add_command(_get_command(kind))
    group.add_command(_list_command(kind))
    group.add_command(_delete_command(kind))
    return group


delegation_group = entity_group(EntityKind.DELEGATION)
car_group = entity_group(EntityKind.CAR)
booking_group = entity_group(EntityKind.BOOKING)
user_group = entity_group(EntityKind.USER)
