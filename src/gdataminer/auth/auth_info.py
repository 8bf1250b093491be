"""Account credentials for gdataminer (installed-app OAuth)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

READONLY_SCOPES: dict[str, str] = {
    "documents": "https://www.googleapis.com/auth/drive.readonly",
    "photos": "https://www.googleapis.com/auth/photoslibrary.readonly",
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Where the miner finds its OAuth material.

    kind must be "oauth"; data must include:
        - client_secrets_file
        - token_file
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "oauth":
            raise ValueError("AuthInfo.kind must be 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("client_secrets_file", "token_file"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @property
    def client_secrets_file(self) -> str:
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        return str(self.data["token_file"])


def scopes_for(collections: list[str] | tuple[str, ...]) -> list[str]:
    """Return the read-only scopes needed to crawl the given collections."""
    unknown = [c for c in collections if c not in READONLY_SCOPES]
    if unknown:
        raise ValueError(f"Unknown collections: {', '.join(unknown)}")
    return [READONLY_SCOPES[c] for c in collections]
