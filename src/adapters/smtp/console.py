"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging outgoing messages for development use.
"""

import logging
import uuid

from src.domain.ports import OutgoingEmail, SendResult

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - logs the message instead of sending it.
    """

    def send(self, message: OutgoingEmail) -> SendResult:
        """
        Log the message (simulates email delivery).

        The subject and plain-text body are logged at INFO level to be
        visible in docker-compose logs.

        Args:
            message: Outgoing email built by the notification dispatcher

        Returns:
            Successful SendResult with a generated message id
        """
        message_id = f"console-{uuid.uuid4().hex}"
        logger.info(
            "[EMAIL] To: %s Subject: %s Id: %s\n%s",
            ", ".join(message.to),
            message.subject,
            message_id,
            message.text,
        )
        return SendResult(success=True, message_id=message_id)
