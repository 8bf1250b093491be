from .cancel import CancelToken
from .ids import (
    datasource_urn,
    equipment_identifier,
    identifier,
    namespace_of,
    person_identifier,
)
from .mime import (
    FOLDER_MIME,
    KIND_TABLE,
    REMOTE_DATA_OBJECT,
    kind_for_drive_mime,
    kind_for_media_mime,
    mime_override_for,
    type_tags_for,
)
from .time import is_newer, normalize_dt, parse_optional, parse_rfc3339, to_rfc3339

__all__ = [
    "CancelToken",
    "identifier",
    "namespace_of",
    "datasource_urn",
    "person_identifier",
    "equipment_identifier",
    "FOLDER_MIME",
    "KIND_TABLE",
    "REMOTE_DATA_OBJECT",
    "type_tags_for",
    "mime_override_for",
    "kind_for_drive_mime",
    "kind_for_media_mime",
    "parse_rfc3339",
    "parse_optional",
    "is_newer",
    "to_rfc3339",
    "normalize_dt",
]
