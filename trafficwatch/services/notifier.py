"""Deliver alert emails over SMTP."""
import asyncio
import logging
import smtplib
from email.message import Message
from typing import Protocol

from trafficwatch.errors import NotificationSendError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def send(self, sender: str, recipient: str, message: Message) -> None: ...


class SmtpNotifier:
    def __init__(
        self,
        host: str,
        port: int = 25,
        *,
        username: str = "",
        password: str = "",
        starttls: bool = False,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def _send_sync(self, sender: str, recipient: str, message: Message) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(message, from_addr=sender, to_addrs=[recipient])

    async def send(self, sender: str, recipient: str, message: Message) -> None:
        try:
            await asyncio.to_thread(self._send_sync, sender, recipient, message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationSendError(f"SMTP delivery to {recipient} failed: {e}") from e
        logger.info("Sent %r to %s via %s:%s", message["Subject"], recipient, self.host, self.port)
