"""SMTP email adapter for real delivery (Gmail or any STARTTLS relay)."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from storefront.notifications.channel.email_port import EmailPort


class SmtpEmailAdapter(EmailPort):
    def __init__(self, host: str, port: int, username: str | None, password: str | None, sender: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender

    def send(self, to: str, subject: str, body: str) -> dict:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message["Message-ID"], "status": "sent"}
