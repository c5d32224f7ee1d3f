"""Application-wide constants.

This module centralizes all magic numbers and configuration constants
to ensure a single source of truth and easier maintenance.
"""

# =============================================================================
# Fetching
# =============================================================================

# Maximum number of browser pages navigating at the same time
DEFAULT_FETCH_CONCURRENCY = 16

# Timeout for a single browser navigation (seconds)
BROWSER_PAGE_LOAD_TIMEOUT_SECONDS = 30.0

# Timeout for plain HTTP fallback requests (seconds)
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

# =============================================================================
# HTML validation
# =============================================================================

# Structural parse errors tolerated before a snippet is considered unrenderable
DEFAULT_MAX_HTML_ERRORS = 2

# =============================================================================
# Article extraction
# =============================================================================

# Joins serialized elements matched by selectors
SNIPPET_SEPARATOR = "<br>\n"

# Subtrees removed from automatically extracted articles (readers choke on them)
STRIPPED_AUTO_TAGS = ("style", "svg")

# =============================================================================
# E-book
# =============================================================================

EPUB_EXTENSION = ".epub"
EPUB_LANGUAGE = "en"
EPUB_AUTHOR = "content-to-reader"
EPUB_TITLE_PREFIX = "Reader digest"
TEMP_DIR_PREFIX = "content-to-reader-"

# =============================================================================
# Configuration files
# =============================================================================

DEFAULT_CONFIG_FILENAME = "./ctr-config.yaml"
SUPPORTED_CONFIG_EXTENSIONS = (".yaml", ".yml")

# =============================================================================
# Device delivery
# =============================================================================

SMTP_HOST = "smtp.gmail.com"
SMTP_PORT = 465
SMTP_TIMEOUT_SECONDS = 10.0
EPUB_MEDIA_TYPE = ("application", "epub+zip")
