"""Email channel adapters."""

from notifications.channel.email_port import Delivery, EmailMessage, EmailPort
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.file_email import FileEmailAdapter

__all__ = ["Delivery", "EmailMessage", "EmailPort", "FakeEmailAdapter", "FileEmailAdapter"]
