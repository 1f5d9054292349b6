"""Email adapter that writes each message to a file instead of sending it."""

import time
from pathlib import Path

from notifications.channel.email_port import Delivery, EmailMessage, EmailPort


class FileEmailAdapter(EmailPort):
    def __init__(self, directory: str = "/tmp/emails"):
        self.directory = Path(directory)

    def send(self, message: EmailMessage) -> Delivery:
        message_id = f"email-{time.time_ns()}"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / f"{message_id}.txt").write_text(
                f"To: {message.to}\nSubject: {message.subject}\n\n{message.body}\n",
                encoding="utf-8",
            )
        except OSError as exc:
            return Delivery(sent=False, error=str(exc))

        return Delivery(sent=True, message_id=message_id)
