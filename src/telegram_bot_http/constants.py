"""
Project-wide constants for the Telegram Bot API HTTP layer
"""  # noqa: D200, D212, D415

import re

# ==============================================================================
# API and Network Configuration
# ==============================================================================

DEFAULT_BASE_URL = "https://api.telegram.org"

# Timeout settings
DEFAULT_TIMEOUT = 60  # seconds
DEFAULT_CONNECT_TIMEOUT = 10  # seconds

# Worker threads used when requests are dispatched asynchronously
ASYNC_MAX_WORKERS = 4

# ==============================================================================
# Request Parameters
# ==============================================================================

# Field holding a media group (list of structured media items)
MEDIA_KEY = "media"

# Structured keyboard field that is sent as a JSON string
REPLY_MARKUP_KEY = "reply_markup"

# Symbolic reference to a sibling multipart part
ATTACH_SCHEME = "attach://"

# Opaque file identifiers issued by the platform, e.g. "AgACAgIAAxkBAAIBY2...".
# Word characters and dashes only, at least one digit and one capital letter.
FILE_ID_PATTERN = re.compile(r"^(?=[\w-]*\d)(?=[\w-]*[A-Z])[\w-]{20,}$")

# ==============================================================================
# File Uploads
# ==============================================================================

DEFAULT_MIME_TYPE = "application/octet-stream"
URL_FETCH_TIMEOUT = 30.0  # seconds
