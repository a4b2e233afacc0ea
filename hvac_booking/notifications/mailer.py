"""
Outbound mail for confirmed bookings.

One message goes to the customer and a separate one to the business inbox; both
carry the calendar invite.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from ..config import Settings
from ..errors import DeliveryError
from ..schemas import BookingRequest

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def deliver(self, booking: BookingRequest, invite: bytes) -> None:
        ...


def customer_message_text(booking: BookingRequest, business_name: str) -> str:
    return (
        f"Hi {booking.name},\n\n"
        f"Your appointment with {business_name} is confirmed:\n\n"
        f"Date: {booking.date}\n"
        f"Time: {booking.time}\n"
        f"Phone: {booking.phone}\n"
        f"Address: {booking.address}\n"
        f"Details: {booking.details}\n\n"
        "Thank you!"
    )


def business_message_text(booking: BookingRequest) -> str:
    return (
        "New appointment booked:\n\n"
        f"Name: {booking.name}\n"
        f"Email: {booking.email}\n"
        f"Phone: {booking.phone}\n"
        f"Date: {booking.date}\n"
        f"Time: {booking.time}\n"
        f"Address: {booking.address}\n"
        f"Details: {booking.details}\n"
    )


class SmtpNotifier:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def from_address(self) -> str:
        return f'"{self.settings.business_name}" <{self.settings.email_user}>'

    def build_message(self, to: str, subject: str, text: str, invite: bytes) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        msg.set_content(text)
        msg.add_attachment(
            invite,
            maintype="text",
            subtype="calendar",
            filename="invite.ics",
            params={"method": "REQUEST"},
        )
        return msg

    def _connect(self) -> smtplib.SMTP:
        host = self.settings.smtp_host
        port = self.settings.smtp_port
        timeout = self.settings.mail_timeout_seconds
        if port == 465:
            context = ssl.create_default_context()
            return smtplib.SMTP_SSL(host, port, context=context, timeout=timeout)
        server = smtplib.SMTP(host, port, timeout=timeout)
        if self.settings.smtp_use_tls:
            try:
                server.starttls(context=ssl.create_default_context())
            except (smtplib.SMTPException, OSError):
                server.close()
                raise
        return server

    def send(self, msg: EmailMessage) -> None:
        server = self._connect()
        try:
            server.login(self.settings.email_user, self.settings.email_pass)
            server.send_message(msg)
        finally:
            # A server that hangs up after accepting the message still delivered it.
            try:
                server.quit()
            except smtplib.SMTPServerDisconnected:
                server.close()
        logger.info(f"✅ Email sent to {msg['To']} via {self.settings.smtp_host}")

    def deliver(self, booking: BookingRequest, invite: bytes) -> None:
        if not self.settings.mail_configured:
            logger.error("❌ Mail not sent: EMAIL_USER/EMAIL_PASS are not configured")
            raise DeliveryError()

        outgoing = [
            (
                booking.email,
                "Your Appointment is Confirmed",
                customer_message_text(booking, self.settings.business_name),
            ),
            (
                self.settings.business_inbox,
                f"New Appointment - {booking.name} on {booking.date} at {booking.time}",
                business_message_text(booking),
            ),
        ]

        failed = []
        for to, subject, text in outgoing:
            try:
                # Header values with CR/LF are rejected while the message is built.
                self.send(self.build_message(to, subject, text, invite))
            except (smtplib.SMTPException, OSError, ValueError) as e:
                logger.error(f"❌ Mail error for {to!r}: {e}")
                failed.append(to)
        if failed:
            raise DeliveryError(recipients=failed)
