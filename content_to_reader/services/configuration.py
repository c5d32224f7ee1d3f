"""Load and validate page-set configuration files.

Configuration returned by ``ConfigurationParser`` decides where the pages
come from, how their content is selected, and where the e-book goes.
"""

import asyncio
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import ValidationError as PydanticValidationError

from content_to_reader.constants import SUPPORTED_CONFIG_EXTENSIONS
from content_to_reader.errors import ConfigurationError
from content_to_reader.logging_config import redact_tokens
from content_to_reader.models.config_models import (
    Configuration,
    ConfigurationInput,
    PageInput,
    PageSpec,
)
from content_to_reader.models.selector_models import ResolvedSelector
from content_to_reader.services.selector_resolver import resolve


def _first_issue(error: PydanticValidationError) -> ConfigurationError:
    """Turn the first pydantic issue into a ``ConfigurationError`` with a dotted path."""
    issue = error.errors()[0]
    path = ".".join(str(part) for part in issue["loc"]) or None
    ctx_error = issue.get("ctx", {}).get("error")
    message = str(ctx_error) if isinstance(ctx_error, Exception) else issue["msg"]
    return ConfigurationError(message, path=path)


def _page_spec(page: PageInput) -> PageSpec:
    if not page.selectors:
        return PageSpec(url=page.url)

    resolved = []
    for selector in page.selectors:
        mode = "first" if selector.first is not None else "all"
        tree = selector.first if mode == "first" else selector.all
        resolved.append(
            ResolvedSelector(query=resolve(tree), mode=mode, name=selector.name)
        )
    return PageSpec(url=page.url, selectors=resolved)


class ConfigurationParser:
    """Parse a YAML configuration into a validated ``Configuration``."""

    def __init__(self, path: str | Path | None = None):
        """Initialize the parser.

        Args:
            path: Configuration file used by ``get()``; only YAML is supported

        Raises:
            ConfigurationError: If the file extension isn't supported
        """
        self._path = Path(path) if path is not None else None
        if self._path is not None and self._path.suffix.lower() not in SUPPORTED_CONFIG_EXTENSIONS:
            raise ConfigurationError(
                f"Unsupported configuration file type {self._path.suffix!r}",
                path=str(self._path),
            )

    async def get(self) -> Configuration:
        """Read the configuration file and parse it.

        Raises:
            ConfigurationError: If no path was given, it can't be read or it's invalid
        """
        if self._path is None:
            raise ConfigurationError("No configuration file path given")
        try:
            content = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Can't read configuration file: {e.strerror or e}", path=str(self._path)
            ) from e
        return self.parse(content)

    def parse(self, raw_text: str) -> Configuration:
        """Validate a YAML document and resolve its selectors.

        Args:
            raw_text: YAML source

        Returns:
            Configuration with flattened selectors

        Raises:
            ConfigurationError: With the dotted path of the first offending field
        """
        try:
            raw: Any = yaml.safe_load(raw_text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}") from e

        if not isinstance(raw, dict):
            source = f"{self._path}: " if self._path else ""
            raise ConfigurationError(
                f"{source}Invalid configuration file. Expected a mapping with `pages`, "
                f"got {type(raw).__name__}. Run `content-to-reader get-config` for an example."
            )

        try:
            document = ConfigurationInput.model_validate(raw)
        except PydanticValidationError as e:
            raise _first_issue(e) from e

        configuration = Configuration(
            pages=[_page_spec(page) for page in document.pages],
            output=document.output,
            to_device=document.to_device,
        )
        logfire.info(
            "Configuration parsed",
            source=str(self._path) if self._path else None,
            page_count=len(configuration.pages),
            pages_with_selectors=sum(1 for p in configuration.pages if p.selectors),
            output=configuration.output,
            to_device=(
                redact_tokens(document.to_device.model_dump())
                if document.to_device is not None
                else None
            ),
        )
        return configuration
