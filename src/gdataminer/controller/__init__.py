"""Collection source exports for gdataminer."""

from __future__ import annotations

from .base import ApiController, RetryPolicy
from .drive_controller import GoogleDriveController
from .photos_controller import GooglePhotosController

__all__ = [
    "ApiController",
    "RetryPolicy",
    "GoogleDriveController",
    "GooglePhotosController",
]
