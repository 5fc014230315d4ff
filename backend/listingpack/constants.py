"""Shared constants for ListingPack."""

from __future__ import annotations

import re

# Hosts that refuse cross-origin decode or serve streams that defeat pixel reads
PROBLEMATIC_CDN_HOSTS = ("ddfcdn.realtor.ca", "mlsphotos.onregional.com")

# Drawn full-canvas over the last image of every package
CLOSING_OVERLAY_URL = (
    "https://cdn.prod.website-files.com/651d8cc426674e7695b3aaf4/"
    "683751a58e87589038656ccb_10.png"
)

# Content-addressed mirror (Uploadcare)
MIRROR_UPLOAD_BASE = "https://upload.uploadcare.com"
MIRROR_CDN_BASE = "https://ucarecdn.com"
MIRROR_UUID_PATTERN = re.compile(r"ucarecdn\.com/([a-f0-9-]+)", re.IGNORECASE)

# Listing photo galleries only carry these formats
IMAGE_URL_PATTERN = re.compile(r"\.(jpeg|jpg|gif|png|webp)$", re.IGNORECASE)

# Error placeholder
PLACEHOLDER_BACKGROUND = (211, 211, 211)  # CSS "lightgray"
PLACEHOLDER_TEXT_COLOR = (255, 0, 0)
PLACEHOLDER_CAPTION = "Error Processing Image"
PLACEHOLDER_CAPTION_SIZE = 16
PLACEHOLDER_FILENAME_SIZE = 12
PLACEHOLDER_FILENAME_MAX_CHARS = 25

PNG_DATA_URL_PREFIX = "data:image/png;base64,"
