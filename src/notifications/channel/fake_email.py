"""In-memory email adapter for tests."""

from uuid import uuid4

from notifications.channel.email_port import Delivery, EmailMessage, EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps every accepted message in ``sent_emails``; can be told to fail."""

    def __init__(self):
        self.sent_emails: list[EmailMessage] = []
        self.failure_reason: str | None = None

    def fail_with(self, reason: str = "Email delivery failed"):
        self.failure_reason = reason

    def send(self, message: EmailMessage) -> Delivery:
        if self.failure_reason is not None:
            return Delivery(sent=False, error=self.failure_reason)

        self.sent_emails.append(message)
        return Delivery(sent=True, message_id=f"email-{uuid4().hex[:12]}")

    def reset(self):
        self.sent_emails.clear()
        self.failure_reason = None
