"""Containment and sharing relations for a resynced item."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from gdataminer.errors import GDataMinerError, InvalidArgumentError
from gdataminer.models import AccessRule, ParentRef
from gdataminer.store import ResourceHandle
from gdataminer.util.ids import identifier
from gdataminer.util.mime import type_tags_for

from . import vocab
from .resolver import AuxiliaryResolver
from .upserter import Upserter

logger = logging.getLogger(__name__)


class HierarchyLinker:
    """Links an item to its containers (folders, albums)."""

    def __init__(self, upserter: Upserter, namespace: str) -> None:
        self._upserter = upserter
        self._namespace = namespace

    def link_parents(
        self,
        writer: Any,
        resource: ResourceHandle,
        parents: Iterable[ParentRef],
    ) -> list[str]:
        """
        Ensure a minimal container resource per parent and record
        nie:isPartOf. Parents are not resynced here; they may never be
        visited as items in this pass.
        """
        linked: list[str] = []
        for ref in parents:
            if not ref.kind.is_container:
                raise InvalidArgumentError(
                    "parent reference must point at a container",
                    details={"provider_id": ref.provider_id, "kind": ref.kind.value},
                )
            parent_id = identifier(ref.kind, self._namespace, ref.provider_id)
            if parent_id in linked:
                continue

            parent, _ = self._upserter.upsert(parent_id, type_tags_for(ref.kind))
            writer.set_relation(resource, vocab.IS_PART_OF, parent)
            linked.append(parent_id)
        return linked


class SharingResolver:
    """Turns access rules into nco:contributor relations."""

    def __init__(self, resolver: AuxiliaryResolver) -> None:
        self._resolver = resolver

    def link_contributors(
        self,
        writer: Any,
        resource: ResourceHandle,
        rules: Iterable[AccessRule],
    ) -> list[tuple[AccessRule, GDataMinerError]]:
        """
        Link every individual scope; public ("default") and domain scopes
        name nobody and are skipped.

        Returns the rules that could not be resolved, with their errors.
        """
        errors: list[tuple[AccessRule, GDataMinerError]] = []
        for rule in rules:
            if not rule.is_individual:
                continue

            try:
                contact = self._resolver.ensure_person(rule.scope_value, "")
            except GDataMinerError as exc:
                logger.warning(
                    "Unable to resolve contributor %r for %s: %s",
                    rule.scope_value,
                    resource.local_id,
                    exc,
                )
                errors.append((rule, exc))
                continue

            writer.set_relation(resource, vocab.CONTRIBUTOR, contact)
        return errors
