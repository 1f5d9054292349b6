"""Outgoing email: the message, the delivery outcome and the adapter interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


@dataclass(frozen=True)
class Delivery:
    """Outcome of one send. ``error`` is only set when ``sent`` is false."""

    sent: bool
    message_id: str | None = None
    error: str | None = None


class EmailPort(ABC):
    @abstractmethod
    def send(self, message: EmailMessage) -> Delivery:
        """Hand ``message`` to the transport. Failures are reported, not raised."""
