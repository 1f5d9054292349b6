"""Email templates. Each renders a subject and body from a context dict."""

from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.welcome import WelcomeTemplate

__all__ = ["OrderConfirmationTemplate", "WelcomeTemplate"]
