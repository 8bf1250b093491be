"""Field selectors for Google API list responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "description,"
    "parents,"
    "starred,"
    "trashed,"
    "webViewLink,"
    "modifiedTime,"
    "createdTime,"
    "owners(displayName,emailAddress),"
    "imageMediaMetadata(width,height,cameraMake,cameraModel,"
    "exposureTime,aperture,focalLength,isoSpeed)"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

PERMISSION_LIST_FIELDS: str = (
    "nextPageToken,permissions(id,type,role,emailAddress,domain,displayName)"
)

# Photos Library page size limits.
ALBUM_PAGE_SIZE_MAX: int = 50
MEDIA_PAGE_SIZE_MAX: int = 100
