"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire

from content_to_reader.config import get_settings


def setup_logfire() -> None:
    """
    Initialize and configure Pydantic Logfire for the CLI process.

    Sets up:
    - Logfire export (only when a token is configured)
    - Pydantic instrumentation (configuration validation logging)
    - Console logging through the standard library
    """
    settings = get_settings()

    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "send_to_logfire": "if-token-present",
        "console": False,
    }

    # Add token if provided (for cloud logging)
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)
    logfire.instrument_pydantic()

    log_level = settings.log_level.upper()

    if settings.env == "local":
        # Local: Console formatting for development
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(message)s",  # Logfire handles structured formatting
        )


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Args:
        value: Value to mask
        mask_char: Character to use for masking

    Returns:
        Masked string
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    # Show first 2 and last 2 characters, mask the rest
    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """
    Redact credentials and addresses from log data.

    Args:
        data: Dictionary that may contain sensitive values

    Returns:
        Dictionary with sensitive values masked
    """
    redacted = data.copy()
    sensitive_keys = [
        "password",
        "sender_password",
        "to_device",
        "device_email",
        "sender_email",
        "token",
        "secret",
    ]

    for key in sensitive_keys:
        if key in redacted:
            if isinstance(redacted[key], str):
                redacted[key] = mask_pii(redacted[key])
            elif isinstance(redacted[key], dict):
                redacted[key] = redact_tokens(redacted[key])

    return redacted
