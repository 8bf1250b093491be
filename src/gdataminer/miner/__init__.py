"""Reconciliation engine exports for gdataminer."""

from __future__ import annotations

from .account import AccountContext
from .crawler import PaginatedCrawler
from .driver import ReconciliationDriver
from .linker import HierarchyLinker, SharingResolver
from .resolver import AuxiliaryResolver
from .resource_set import PreviousResourceSet
from .upserter import Upserter

__all__ = [
    "AccountContext",
    "AuxiliaryResolver",
    "HierarchyLinker",
    "PaginatedCrawler",
    "PreviousResourceSet",
    "ReconciliationDriver",
    "SharingResolver",
    "Upserter",
]
