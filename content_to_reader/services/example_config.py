"""Example configuration file written by ``content-to-reader get-config``."""

import asyncio
from pathlib import Path

import logfire

from content_to_reader.constants import SUPPORTED_CONFIG_EXTENSIONS

EXAMPLE_CONFIG = """\
#
# This is a content-to-reader configuration file.
# Use this file to generate EPUBs from WWW pages.
#

# Filename or output path of the resulting EPUB file. Not required if `toDevice` is present.
output: "news.epub"

# Uncomment to send the resulting EPUB to your reader device using your email account.
# Credentials aren't stored anywhere and are used solely for sending the file.
# Not required if `output` is present.
# toDevice:
#   # Email address of your reader device (e.g. Kindle).
#   deviceEmail: "me@kindle.com"
#   # Email address of your Gmail account.
#   senderEmail: "me@gmail.com"
#   # Application password of your Gmail account:
#   # https://support.google.com/mail/answer/185833?hl=en
#   senderPassword: "app-password"

# Content of the resulting EPUB, one chapter per page.
pages:
  # Extract content automatically by passing the URL only.
  - "https://page.com"
  # Or use selectors to pick what you want.
  - url: "https://page.com/post"
    selectors:
      # Select the first matching element...
      - name: "Header" # Name is optional but helps debugging
        first: ".page-content header"
      # ... or all of them.
      - name: "Content"
        all:
          # Nest selectors to build verbose element queries
          ".page-content .contents":
            [
              "h1",
              "h2",
              "h3",
              "p",
              "code",
              { ".custom-tip": ["p", "div", { ".some-class": ["a", "p"] }] },
            ]
"""


async def generate_example_config_file(path: str | Path) -> Path:
    """Save the example YAML configuration at ``path``.

    Args:
        path: Destination; ``.yaml`` is appended when it has another extension

    Returns:
        Path the file was written to
    """
    destination = Path(path)
    if destination.suffix.lower() not in SUPPORTED_CONFIG_EXTENSIONS:
        destination = destination.with_name(f"{destination.stem}.yaml")
    await asyncio.to_thread(destination.write_text, EXAMPLE_CONFIG, encoding="utf-8")
    logfire.info("Example configuration written", destination=str(destination))
    return destination
