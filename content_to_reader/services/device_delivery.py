"""Send finished e-books to reader devices by email.

Reader devices such as Kindle accept documents mailed to a per-device
address. The e-book goes out as a base64 ``application/epub+zip``
attachment from the user's own (Gmail) account.
"""

import asyncio
import smtplib
import uuid
from datetime import date
from email.message import EmailMessage
from typing import Protocol

import logfire

from content_to_reader.config import get_settings
from content_to_reader.constants import EPUB_MEDIA_TYPE
from content_to_reader.errors import DeliveryError
from content_to_reader.logging_config import mask_pii
from content_to_reader.models.config_models import DeviceDeliveryConfig


def attachment_name(today: date | None = None) -> str:
    """Attachment filename embedding the date, e.g. ``2024-05-01 news.epub``."""
    today = today or date.today()
    return f"{today.isoformat()} news.epub"


class DeviceDelivery(Protocol):
    """Protocol for delivering an e-book to a device."""

    async def deliver(
        self, binary: bytes, filename: str, target: DeviceDeliveryConfig
    ) -> None:
        """Deliver ``binary`` once.

        Raises:
            DeliveryError: If delivery fails
        """
        ...


class SmtpDeviceDelivery:
    """Deliver e-books through an SMTP-over-SSL server (Gmail by default)."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self._host = host or settings.smtp_host
        self._port = port or settings.smtp_port
        self._timeout = timeout or settings.smtp_timeout_seconds

    def build_message(
        self, binary: bytes, filename: str, target: DeviceDeliveryConfig
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = filename
        message["From"] = str(target.sender_email)
        message["To"] = str(target.device_email)
        message["X-Universally-Unique-Identifier"] = str(uuid.uuid4())
        message.set_content(f"{filename} sent by content-to-reader.")
        maintype, subtype = EPUB_MEDIA_TYPE
        message.add_attachment(binary, maintype=maintype, subtype=subtype, filename=filename)
        return message

    async def deliver(
        self, binary: bytes, filename: str, target: DeviceDeliveryConfig
    ) -> None:
        message = self.build_message(binary, filename, target)
        logfire.info(
            "Sending e-book to device",
            device_email=mask_pii(str(target.device_email)),
            sender_email=mask_pii(str(target.sender_email)),
            size_bytes=len(binary),
        )
        try:
            await asyncio.to_thread(self._send, message, target)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(
                "Error during sending to device. Please double check your credentials and try again."
            ) from e

    def _send(self, message: EmailMessage, target: DeviceDeliveryConfig) -> None:
        with smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout) as smtp:
            smtp.login(str(target.sender_email), target.sender_password)
            smtp.send_message(message)
