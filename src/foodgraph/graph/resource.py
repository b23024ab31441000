"""Resource identity and soft-delete/timestamp lifecycle shared by nodes and edges."""

import secrets
import string
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict

from foodgraph.config import get_settings
from foodgraph.exceptions import EmptyLabelSetError

ID_SEPARATOR = ":"
ID_SUFFIX_ALPHABET = string.ascii_letters + string.digits

# Property names shared by every stored resource
CREATED = "created"
LAST_MODIFIED = "lastModified"
DELETED = "deleted"


class Resource(BaseModel):
    """Creation, modification and soft-deletion timestamps."""

    model_config = ConfigDict(from_attributes=True)

    created: datetime | None = None
    last_modified: datetime | None = None
    deleted: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.deleted is None

    def resource_properties(self) -> dict[str, Any]:
        """Timestamps keyed by their stored property names."""
        return {
            CREATED: self.created,
            LAST_MODIFIED: self.last_modified,
            DELETED: self.deleted,
        }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def id_prefix(labels: Iterable[str], namespace: str | None = None) -> str:
    """Deterministic part of an id: namespace followed by the sorted lower-case labels."""
    cleaned = sorted({label.strip().lower() for label in labels if label and label.strip()})
    if not cleaned:
        raise EmptyLabelSetError()
    namespace = namespace if namespace is not None else get_settings().id_namespace
    return ID_SEPARATOR.join([namespace, *cleaned]) + ID_SEPARATOR


def random_suffix(length: int | None = None) -> str:
    length = length if length is not None else get_settings().id_suffix_length
    return "".join(secrets.choice(ID_SUFFIX_ALPHABET) for _ in range(length))


def format_id(prefix: str, suffix: str) -> str:
    return prefix + suffix


def generate_id(
    labels: Iterable[str],
    namespace: str | None = None,
    suffix_length: int | None = None,
) -> str:
    """
    Generate a globally unique resource id for a set of node labels.

    Blank labels are dropped; the rest are lower-cased, sorted and joined after
    the namespace, followed by a random alphanumeric suffix.

    Raises:
        EmptyLabelSetError: if no usable label remains.
    """
    return format_id(id_prefix(labels, namespace), random_suffix(suffix_length))


def touch(resource: Resource, now: datetime) -> Resource:
    """
    Record a modification on an in-memory resource.

    Same rule as the store applies in Cypher: lastModified never moves backwards.
    """
    if resource.last_modified is None or now > resource.last_modified:
        resource.last_modified = now
    return resource


def soft_delete(resource: Resource, now: datetime) -> bool:
    """
    Mark an in-memory resource deleted, as the store does on delete.

    Returns:
        True if the resource was live and is now deleted, False if it was
        already deleted (a no-op; the original timestamp is kept).
    """
    if resource.deleted is not None:
        return False
    resource.deleted = now
    return True


def live(variable: str) -> str:
    """Cypher predicate that keeps only non-deleted nodes or relationships."""
    return f"{variable}.{DELETED} IS NULL"


def to_native_datetime(value: Any) -> datetime | None:
    """Convert a driver temporal value (neo4j.time.DateTime) into a datetime."""
    if value is None:
        return None
    if hasattr(value, "to_native"):
        value = value.to_native()
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def parse_resource(properties: Mapping[str, Any]) -> dict[str, datetime | None]:
    """Extract Resource fields from a stored property map."""
    return {
        "created": to_native_datetime(properties.get(CREATED)),
        "last_modified": to_native_datetime(properties.get(LAST_MODIFIED)),
        "deleted": to_native_datetime(properties.get(DELETED)),
    }
