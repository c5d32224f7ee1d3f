"""Configuration file models.

``ConfigurationInput`` and friends mirror the YAML document and carry every
validation rule. ``Configuration`` is the resolved result handed to the
pipeline: selector trees are already flattened into query strings.
"""

from dataclasses import dataclass, field
from typing import Any, List
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from content_to_reader.errors import ConfigurationError
from content_to_reader.models.selector_models import ResolvedSelector
from content_to_reader.services.output_path import sanitize_output_path
from content_to_reader.services.selector_resolver import build_selector_tree

FIRST_OR_ALL_REQUIRED = "If you define selector then `first` or `all` must be set"
FIRST_AND_ALL_CONFLICT = "You can't have both `first` and `all`"
OUTPUT_OR_DEVICE_REQUIRED = "Either `output` or `toDevice` must be set"


class DeviceDeliveryConfig(BaseModel):
    """Credentials and addresses used to email the e-book to a reader device."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    device_email: EmailStr = Field(..., alias="deviceEmail")
    sender_email: EmailStr = Field(..., alias="senderEmail")
    sender_password: str = Field(..., alias="senderPassword", min_length=1)


class SelectorSpecInput(BaseModel):
    """One selector entry of a page: exactly one of ``first`` / ``all``."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    first: Any = None
    all: Any = None

    @field_validator("first", "all")
    @classmethod
    def _build_tree(cls, value: Any) -> Any:
        if value is None:
            return None
        return build_selector_tree(value)

    @model_validator(mode="after")
    def _exactly_one_mode(self) -> "SelectorSpecInput":
        if self.first is None and self.all is None:
            raise ValueError(FIRST_OR_ALL_REQUIRED)
        if self.first is not None and self.all is not None:
            raise ValueError(FIRST_AND_ALL_CONFLICT)
        return self


class PageInput(BaseModel):
    """A page entry: a bare URL string or ``{url, selectors}``."""

    url: str
    selectors: List[SelectorSpecInput] | None = None

    @model_validator(mode="before")
    @classmethod
    def _bare_url(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"url": data}
        return data

    @field_validator("url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL can't be empty")
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"{value!r} is not an http(s) URL")
        return value


class ConfigurationInput(BaseModel):
    """The whole configuration document."""

    model_config = ConfigDict(populate_by_name=True)

    output: str | None = None
    to_device: DeviceDeliveryConfig | None = Field(default=None, alias="toDevice")
    pages: List[PageInput] = Field(..., min_length=1)

    @field_validator("output")
    @classmethod
    def _sanitize_output(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            return sanitize_output_path(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def _has_destination(self) -> "ConfigurationInput":
        if self.output is None and self.to_device is None:
            raise ValueError(OUTPUT_OR_DEVICE_REQUIRED)
        return self


@dataclass
class PageSpec:
    """A page to include; ``selectors is None`` means automatic extraction."""

    url: str
    selectors: List[ResolvedSelector] | None = None


@dataclass
class Configuration:
    """Validated configuration with resolved selectors."""

    pages: List[PageSpec] = field(default_factory=list)
    output: str | None = None
    to_device: DeviceDeliveryConfig | None = None
