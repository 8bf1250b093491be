"""Deterministic local identifiers for remote items and auxiliary entities."""

from __future__ import annotations

import hashlib
from typing import Optional

from gdataminer.errors import InvalidArgumentError
from gdataminer.models.remote_item import ItemKind

_PREFIX = "gd"
_CONTAINER_MARKER = "collection"


def identifier(kind: ItemKind, namespace: str, provider_id: str) -> str:
    """
    Return the local identifier for a remote item.

    Containers get a "collection" marker so a folder or album never collides
    with a leaf item sharing the same raw provider id.
    """
    _require(namespace, "namespace")
    _require(provider_id, "provider_id")
    kind = ItemKind(kind)

    if kind.is_container:
        return f"{_PREFIX}:{_CONTAINER_MARKER}:{namespace}:{kind.value}:{provider_id}"
    return f"{_PREFIX}:{namespace}:{kind.value}:{provider_id}"


def namespace_of(local_id: str) -> Optional[str]:
    """Return the provider namespace embedded in an item identifier, if any."""
    parts = local_id.split(":", 4)
    if len(parts) < 4 or parts[0] != _PREFIX:
        return None
    if parts[1] == _CONTAINER_MARKER:
        return parts[2] if len(parts) == 5 else None
    return parts[1]


def datasource_urn(account_id: str) -> str:
    """Return the datasource scope owning all resources of one account."""
    _require(account_id, "account_id")
    return f"{_PREFIX}:goa-account:{account_id}"


def person_identifier(email: Optional[str], display_name: Optional[str]) -> str:
    """
    Return the identifier for a person.

    Without an email, a SHA-256 digest of the display name stands in, so the
    same name maps to the same person across runs.
    """
    email = (email or "").strip().lower()
    if email:
        return f"mailto:{email}"

    name = (display_name or "").strip()
    if not name:
        raise InvalidArgumentError("person needs an email or a display name")
    digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
    return f"{_PREFIX}:contact:sha256:{digest}"


def equipment_identifier(make: Optional[str], model: Optional[str]) -> str:
    """Return the identifier for a (make, model) equipment pair."""
    make = (make or "").strip()
    model = (model or "").strip()
    if not make and not model:
        raise InvalidArgumentError("equipment needs a make or a model")
    return f"urn:equipment:{make}:{model}:"


def _require(value: object, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{field_name} must be a non-empty string")
