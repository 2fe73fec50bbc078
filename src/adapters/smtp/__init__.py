"""Email sender adapters - Console and SMTP implementations."""

from .console import ConsoleEmailSender
from .sender import SmtpConfig, SmtpEmailSender

__all__ = ["ConsoleEmailSender", "SmtpConfig", "SmtpEmailSender"]
