"""
Outbound e-mail for agent notifications.

SmtpEmailSender delivers through an SMTP relay with STARTTLS.
OutboxEmailSender keeps messages locally (and optionally appends them to
a JSONL file) for environments without SMTP credentials.
"""
import json
import logging
import smtplib
from collections import deque
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from pathlib import Path
from typing import Optional

from ..config.settings import Settings

log = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail relay."""


@dataclass
class OutgoingEmail:
    """A composed message ready for delivery."""
    to: list[str]
    subject: str
    html: str
    text: str = ""
    sender: str = ""


@dataclass
class DeliveryReceipt:
    """What the sender reports back after delivery."""
    message_id: str
    transport: str
    sent_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class SmtpEmailSender:
    """Deliver messages through an SMTP relay."""

    transport = "smtp"

    def __init__(self, host: str, port: int, username: str, password: str, default_sender: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.default_sender = default_sender

    def send(self, email: OutgoingEmail) -> DeliveryReceipt:
        msg = MIMEMultipart("alternative")
        msg["From"] = email.sender or self.default_sender
        msg["To"] = ", ".join(email.to)
        msg["Subject"] = email.subject
        msg["Message-ID"] = make_msgid()
        if email.text:
            msg.attach(MIMEText(email.text, "plain"))
        msg.attach(MIMEText(email.html, "html"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            log.error("E-mail to %s failed: %s", email.to, e)
            raise EmailDeliveryError(str(e)) from e

        message_id = msg["Message-ID"]
        log.info("E-mail sent: %s → %s", email.subject[:60], ", ".join(email.to))
        return DeliveryReceipt(message_id=message_id, transport=self.transport)


class OutboxEmailSender:
    """
    Collect messages instead of sending them.

    Only the last ``keep_last`` messages stay in memory; the JSONL file,
    when configured, keeps every one.
    """

    transport = "outbox"

    def __init__(self, outbox_path: Optional[Path] = None, default_sender: str = "", keep_last: int = 100):
        self.outbox_path = outbox_path
        self.default_sender = default_sender
        self.sent: deque[OutgoingEmail] = deque(maxlen=keep_last)
        self.count = 0

    def send(self, email: OutgoingEmail) -> DeliveryReceipt:
        if not email.sender:
            email.sender = self.default_sender
        self.sent.append(email)
        self.count += 1
        message_id = f"outbox-{self.count}"

        if self.outbox_path is not None:
            try:
                self.outbox_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.outbox_path, 'a', encoding='utf-8') as f:
                    f.write(json.dumps({"id": message_id, **asdict(email)}) + "\n")
            except OSError as e:
                raise EmailDeliveryError(str(e)) from e

        log.info("E-mail queued to outbox: %s → %s", email.subject[:60], ", ".join(email.to))
        return DeliveryReceipt(message_id=message_id, transport=self.transport)


def build_sender(settings: Settings):
    """SMTP when credentials are configured, otherwise the outbox."""
    if settings.smtp_configured:
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            default_sender=settings.notify_from,
        )
    log.warning("SMTP not configured; notifications go to the outbox")
    return OutboxEmailSender(settings.outbox_path, default_sender=settings.notify_from)
