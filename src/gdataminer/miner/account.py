"""Per-pass account context injected into the reconciliation driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gdataminer.util.ids import datasource_urn


@dataclass(slots=True)
class AccountContext:
    """
    Account session handed to one pass.

    Attributes:
        account_id: Online account identifier; derives the datasource scope.
        sources: Collection sources keyed by collection kind
            (e.g. "documents", "photos"). Each source exposes namespace,
            list_page, list_children, list_access_rules and has_children.
    """

    account_id: str
    sources: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.account_id, str) or not self.account_id.strip():
            raise ValueError("AccountContext.account_id must be a non-empty string")

    @property
    def datasource(self) -> str:
        return datasource_urn(self.account_id)
