"""
Fleet Management API — Email Notification Service
=================================================

What:  Composes and sends transactional email, optionally with an attachment.
How:   Messages are built with `email.message.EmailMessage` and delivered by
       `smtplib.SMTP` in a worker thread so the event loop is not blocked.
Who:   Called by the /api/emails routes and the trajectory export route.

Failure model:
    Sending is fire-and-forget: no retry, no queue, no delivery receipt.
    SMTP rejections / connection errors → MailTransportError
    socket timeout                      → OperationTimeoutError
    unreadable static attachment        → AttachmentUnavailableError

SMTP credentials arrive through MailSettings in the constructor.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.utils import parseaddr
from pathlib import Path
from typing import Callable

import aiofiles

from fleet_api.exceptions import (
    AttachmentUnavailableError,
    MailTransportError,
    OperationTimeoutError,
)

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "Fleet Management API"
SUBJECT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PLAIN_TEXT_BODY = "Test email: plain email text sent."
STATIC_ATTACHMENT_BODY = "Test email: email with attachment sent."
XLSX_MAINTYPE = "application"
XLSX_SUBTYPE = "vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class MailSettings:
    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True
    timeout: float = 15.0
    static_attachment_path: str = "resources/data/query-roles.txt"

    @property
    def from_address(self) -> str:
        return self.sender or self.username


def format_size_kb(size_in_bytes: int) -> str:
    """Size in kilobytes with two decimals, e.g. 2048 → "2.00 KB"."""
    return f"{size_in_bytes / 1024.0:.2f} KB"


def excel_attachment_filename(taxi_id: int, date_string: str) -> str:
    return f"trajectories_{taxi_id}_{date_string}.xlsx"


def render_report_html(taxi_id: int, date_string: str, size_in_bytes: int) -> str:
    return (
        "<p>Hello, the following attachment includes a report of:</p>"
        "<table border='1'>"
        "<tr><th>Taxi ID</th><th>Date</th><th>File Size</th></tr>"
        "<tr>"
        f"<td>{taxi_id}</td>"
        f"<td>{date_string}</td>"
        f"<td>{format_size_kb(size_in_bytes)}</td>"
        "</tr>"
        "</table>"
    )


class EmailService:
    def __init__(
        self,
        mail_settings: MailSettings,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.mail_settings = mail_settings
        self._clock = clock

    # ── Public operations ─────────────────────────────────────────────────

    async def send_plain_text(self, to_email: str) -> None:
        """Fixed subject, fixed plain-text body, no attachment."""
        message = self.build_plain_text_message(to_email)
        await self._send(message)

    async def send_with_static_attachment(self, to_email: str) -> None:
        """
        Fixed body with the configured local file attached as text/plain.

        Raises:
            AttachmentUnavailableError: the file cannot be read
        """
        path = Path(self.mail_settings.static_attachment_path)
        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except OSError as e:
            logger.error("Static attachment %s unreadable: %s", path, str(e))
            raise AttachmentUnavailableError(
                message="The email attachment is not available.",
                context={"path": str(path), "error_type": type(e).__name__},
            )

        message = self.build_static_attachment_message(to_email, path.name, content)
        await self._send(message)

    async def send_with_excel_attachment(
        self,
        to_email: str,
        taxi_id: int,
        date_string: str,
        spreadsheet_bytes: bytes,
    ) -> None:
        """HTML report summarizing taxi, date and size, with the .xlsx attached."""
        message = self.build_excel_message(to_email, taxi_id, date_string, spreadsheet_bytes)
        await self._send(message)

    # ── Message composition ───────────────────────────────────────────────

    def build_plain_text_message(self, to_email: str) -> EmailMessage:
        message = self._new_message(to_email, self._subject())
        message.set_content(PLAIN_TEXT_BODY)
        return message

    def build_static_attachment_message(
        self,
        to_email: str,
        filename: str,
        content: bytes,
    ) -> EmailMessage:
        message = self._new_message(to_email, self._subject())
        message.set_content(STATIC_ATTACHMENT_BODY)
        message.add_attachment(content, maintype="text", subtype="plain", filename=filename)
        return message

    def build_excel_message(
        self,
        to_email: str,
        taxi_id: int,
        date_string: str,
        spreadsheet_bytes: bytes,
    ) -> EmailMessage:
        message = self._new_message(to_email, self._subject(report=True))
        message.set_content(
            render_report_html(taxi_id, date_string, len(spreadsheet_bytes)),
            subtype="html",
        )
        message.add_attachment(
            bytes(spreadsheet_bytes),
            maintype=XLSX_MAINTYPE,
            subtype=XLSX_SUBTYPE,
            filename=excel_attachment_filename(taxi_id, date_string),
        )
        return message

    def _subject(self, report: bool = False) -> str:
        prefix = f"{SUBJECT_PREFIX} Report" if report else SUBJECT_PREFIX
        return f"{prefix} {self._clock().strftime(SUBJECT_TIMESTAMP_FORMAT)}"

    def _new_message(self, to_email: str, subject: str) -> EmailMessage:
        _, address = parseaddr(to_email or "")
        if "@" not in address:
            raise MailTransportError(
                message=f"Invalid recipient address: {to_email!r}",
                context={"recipient": to_email},
            )
        message = EmailMessage()
        try:
            message["From"] = self.mail_settings.from_address
            message["To"] = address
            message["Subject"] = subject
        except ValueError as e:
            raise MailTransportError(
                message="The message headers are malformed.",
                context={"recipient": to_email, "error": str(e)},
            )
        return message

    # ── Transport ─────────────────────────────────────────────────────────

    async def _send(self, message: EmailMessage) -> None:
        recipient = message["To"]
        timeout = self.mail_settings.timeout
        try:
            await asyncio.to_thread(self._deliver, message)
        except TimeoutError:
            logger.error("SMTP delivery to %s timed out after %.1fs", recipient, timeout)
            raise OperationTimeoutError(operation="mail delivery", timeout=timeout)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", recipient, str(e))
            raise MailTransportError(
                message="The email could not be sent.",
                context={"recipient": recipient, "error_type": type(e).__name__},
            )
        logger.info("Email '%s' sent to %s", message["Subject"], recipient)

    def _deliver(self, message: EmailMessage) -> None:
        cfg = self.mail_settings
        if not cfg.host:
            raise smtplib.SMTPConnectError(-1, "MAIL_HOST is not configured")
        with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout) as smtp:
            if cfg.use_tls:
                smtp.starttls()
            if cfg.username:
                smtp.login(cfg.username, cfg.password)
            smtp.send_message(message)
