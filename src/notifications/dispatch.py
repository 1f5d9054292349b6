"""Best-effort email dispatch through an email channel adapter."""

import structlog

from notifications.channel.email_port import EmailMessage, EmailPort

logger = structlog.get_logger(__name__)


class Mailer:
    """Renders a template and hands it to the email adapter.

    Delivery failures are logged and reported through the return value; they
    never propagate into the operation that triggered the email.
    """

    def __init__(self, adapter: EmailPort):
        self.adapter = adapter

    def send_template(self, to: str, template, context: dict) -> bool:
        content = template.render(context)
        message = EmailMessage(to=to, subject=content["subject"], body=content["body"])
        try:
            delivery = self.adapter.send(message)
        except Exception as e:
            logger.error("Email dispatch failed", to=to, template=template.__name__, error=str(e))
            return False

        if not delivery.sent:
            logger.warning(
                "Email not sent",
                to=to,
                template=template.__name__,
                error=delivery.error or "Unknown dispatch error",
            )
            return False

        logger.info("Email sent", to=to, template=template.__name__, message_id=delivery.message_id)
        return True
