"""
Composite key encoding for the single-table layout.

Every entity kind lives under ``<PREFIX>#<id>`` / ``METADATA#<id>`` with an
``itemType`` tag. Encoding and decoding go through the static schema table
in ``models.SCHEMAS``; nothing here performs I/O.
"""

import dataclasses
import secrets
from datetime import date
from typing import Any, TypeVar

from ..constants import ATTR_PK, ATTR_SK, ATTR_TYPE, IDENTIFIER_BYTES, PREFIX_METADATA
from ..exceptions import InvalidIdentifier, InvalidKey
from ..models import SCHEMAS, Attribute, Entity, EntityKey, EntityKind, EntitySchema
from ..utils import format_key, parse_iso_date, parse_key

E = TypeVar("E", bound=Entity)

_KINDS_BY_PREFIX = {schema.key_prefix: kind for kind, schema in SCHEMAS.items()}
_KINDS_BY_TAG = {kind.value: kind for kind in EntityKind}


def new_identifier() -> str:
    """Return 128 random bits from the OS CSPRNG as 32 hex characters."""
    return secrets.token_hex(IDENTIFIER_BYTES)


def derive_key(kind: EntityKind, identifier: str | None) -> EntityKey:
    """
    Derive the partition key, sort key and type tag of an entity.

    Args:
        kind: Entity kind
        identifier: Entity identifier

    Returns:
        EntityKey(pk, sk, type_tag)

    Raises:
        InvalidIdentifier: If identifier is empty
    """
    if not identifier:
        raise InvalidIdentifier(f"{kind.value} identifier cannot be empty")
    schema = SCHEMAS[kind]
    return EntityKey(
        pk=format_key(schema.key_prefix, identifier),
        sk=format_key(PREFIX_METADATA, identifier),
        type_tag=kind.value,
    )


def key_of(entity: Entity) -> EntityKey:
    """Derive the key of an entity instance."""
    schema = SCHEMAS[entity.kind]
    return derive_key(entity.kind, schema.identifier(entity))


def parse_partition_key(pk: str) -> tuple[EntityKind, str]:
    """
    Split a partition key back into its kind and identifier.

    Raises:
        InvalidKey: If the prefix is unknown or the identifier is empty
    """
    prefix, identifier = parse_key(pk)
    kind = _KINDS_BY_PREFIX.get(prefix)
    if kind is None or not identifier:
        raise InvalidKey(f"Unrecognised partition key '{pk}'")
    return kind, identifier


def assign_identifier(entity: E) -> E:
    """
    Return the entity with an identifier, generating one if absent.

    Identifiers are never changed once present.

    Raises:
        InvalidIdentifier: If the identifier is still empty afterwards
    """
    schema = SCHEMAS[entity.kind]
    if not schema.identifier(entity):
        entity = dataclasses.replace(entity, **{schema.id_field: new_identifier()})
    if not schema.identifier(entity):
        raise InvalidIdentifier(f"Could not assign an identifier to {entity.kind.value}")
    return entity


def _dump_value(attribute: Attribute, value: Any) -> Any:
    if attribute.type is date:
        return value.isoformat()
    if attribute.type is list:
        return list(value)
    return value


def _load_value(attribute: Attribute, value: Any) -> Any:
    if value is None:
        return None
    if attribute.type is date:
        return parse_iso_date(value, attribute.name)
    if attribute.type is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{attribute.name} must be true or false, got {value!r}")
        return value
    if attribute.type is list:
        if not isinstance(value, (list, tuple, set)):
            raise ValueError(f"{attribute.name} must be a list, got {value!r}")
        return [str(v) for v in value]
    return attribute.type(value)


def to_attributes(entity: Entity) -> dict[str, Any]:
    """
    Render an entity as plain attributes (identifier included, keys excluded).

    None-valued attributes are omitted.
    """
    schema = SCHEMAS[entity.kind]
    data: dict[str, Any] = {}
    identifier = schema.identifier(entity)
    if identifier:
        data[schema.id_attribute] = identifier
    for attribute in schema.attributes:
        value = getattr(entity, attribute.field)
        if value is not None:
            data[attribute.name] = _dump_value(attribute, value)
    return data


def from_attributes(kind: EntityKind, data: dict[str, Any]) -> Entity:
    """Build an entity of ``kind`` from plain attributes, ignoring unknown ones."""
    schema: EntitySchema = SCHEMAS[kind]
    values: dict[str, Any] = {schema.id_field: data.get(schema.id_attribute)}
    for attribute in schema.attributes:
        if attribute.name in data:
            loaded = _load_value(attribute, data[attribute.name])
            if loaded is not None:
                values[attribute.field] = loaded
    entity: Entity = schema.entity_class(**values)
    return entity


def encode(entity: Entity) -> dict[str, Any]:
    """
    Encode an entity as a table item.

    Raises:
        InvalidIdentifier: If the entity has no identifier
    """
    key = key_of(entity)
    item = to_attributes(entity)
    item[ATTR_PK] = key.pk
    item[ATTR_SK] = key.sk
    item[ATTR_TYPE] = key.type_tag
    return item


def decode(item: dict[str, Any]) -> Entity:
    """
    Decode a table item into the entity kind named by its type tag.

    Raises:
        InvalidKey: If the type tag is unknown or the stored keys do not
            match the ones derived from the item's identifier
    """
    kind = _KINDS_BY_TAG.get(str(item.get(ATTR_TYPE, "")))
    if kind is None:
        raise InvalidKey(f"Unknown item type '{item.get(ATTR_TYPE)}'")

    entity = from_attributes(kind, item)
    expected = key_of(entity)
    if item.get(ATTR_PK) != expected.pk or item.get(ATTR_SK) != expected.sk:
        raise InvalidKey(
            f"Stored key ({item.get(ATTR_PK)}, {item.get(ATTR_SK)}) does not match "
            f"{kind.value} identifier '{SCHEMAS[kind].identifier(entity)}'"
        )
    return entity
