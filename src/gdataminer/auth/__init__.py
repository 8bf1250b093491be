"""Public auth exports for gdataminer."""

from __future__ import annotations

from .auth_info import READONLY_SCOPES, AuthInfo, scopes_for
from .oauth_client import OAuthClient

__all__ = ["AuthInfo", "OAuthClient", "READONLY_SCOPES", "scopes_for"]
