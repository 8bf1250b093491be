"""Property, relation and type names written to the local store."""

from __future__ import annotations

# Item properties
URL = "nie:url"
MIME_TYPE = "nie:mimeType"
TITLE = "nie:title"
DESCRIPTION = "nie:description"
CONTENT_CREATED = "nie:contentCreated"
HAS_TAG = "nao:hasTag"
FAVORITE_TAG = "nao:predefined-tag-favorite"

# Media properties
WIDTH = "nfo:width"
HEIGHT = "nfo:height"
EXPOSURE_TIME = "nmm:exposureTime"
FNUMBER = "nmm:fnumber"
FOCAL_LENGTH = "nmm:focalLength"
ISO_SPEED = "nmm:isoSpeed"

# Relations
IS_PART_OF = "nie:isPartOf"
CREATOR = "nco:creator"
CONTRIBUTOR = "nco:contributor"
EQUIPMENT = "nfo:equipment"

# Auxiliary entities
CONTACT_TYPE = "nco:Contact"
FULLNAME = "nco:fullname"
EMAIL_ADDRESS = "nco:hasEmailAddress"
EQUIPMENT_TYPE = "nfo:Equipment"
MANUFACTURER = "nfo:manufacturer"
MODEL = "nfo:model"
