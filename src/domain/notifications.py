"""
Notification dispatch - Post-registration emails.

After a registration is persisted, two independent emails go out: a
confirmation to the supplier and an alert to the administrators. Both
are attempted concurrently and joined before returning. A failure of
either is captured as a failed SendResult and never raised.

Field values hold plain text (markup already removed by the validator)
and are HTML-escaped when interpolated into the HTML bodies.
"""

import logging
from html import escape
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from .ports import EmailSender, NotificationReport, OutgoingEmail, SendResult
from .supplier import SupplierRegistration

logger = logging.getLogger(__name__)

_ADMIN_FIELDS = (
    ("Company name", "company_name"),
    ("Contact person", "contact_person"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Address", "address"),
    ("City", "city"),
    ("Postal code", "postal_code"),
    ("Country", "country"),
    ("VAT number", "vat_number"),
    ("IBAN", "iban"),
    ("BIC", "bic"),
    ("Bank name", "bank_name"),
)


def mask_iban(iban: str) -> str:
    """Keep country, check digits and last four characters."""
    if len(iban) <= 8:
        return iban
    return f"{iban[:4]}{'*' * (len(iban) - 8)}{iban[-4:]}"


def build_confirmation(registration: SupplierRegistration) -> OutgoingEmail:
    greeting = registration.contact_person or registration.company_name
    text = (
        f"Dear {greeting},\n\n"
        f"Thank you for registering {registration.company_name} as a supplier.\n"
        f"We received your details and bank account {mask_iban(registration.iban)}.\n"
        "Our team will review your registration and contact you if anything is missing.\n"
    )
    html = (
        "<html><body>"
        f"<p>Dear {escape(greeting)},</p>"
        f"<p>Thank you for registering <strong>{escape(registration.company_name)}</strong> as a supplier.</p>"
        f"<p>We received your details and bank account <code>{mask_iban(registration.iban)}</code>.</p>"
        "<p>Our team will review your registration and contact you if anything is missing.</p>"
        "</body></html>"
    )
    return OutgoingEmail(
        to=(registration.email,),
        subject="Supplier registration received",
        html=html,
        text=text,
    )


def build_admin_alert(
    registration: SupplierRegistration, recipients: Sequence[str]
) -> OutgoingEmail:
    rows = [
        (label, getattr(registration, attribute))
        for label, attribute in _ADMIN_FIELDS
        if getattr(registration, attribute) is not None
    ]
    text = "New supplier registration\n\n" + "".join(f"{label}: {value}\n" for label, value in rows)
    html = (
        "<html><body><h2>New supplier registration</h2><table>"
        + "".join(f"<tr><th>{label}</th><td>{escape(value)}</td></tr>" for label, value in rows)
        + "</table></body></html>"
    )
    return OutgoingEmail(
        to=tuple(recipients),
        subject=f"New supplier registration: {registration.company_name}",
        html=html,
        text=text,
    )


class NotificationDispatcher:
    """
    Sends the confirmation and admin-alert emails for a registration.

    Never raises: transport exceptions and unsuccessful sends are both
    reported through the returned NotificationReport.
    """

    def __init__(self, sender: EmailSender, admin_recipients: Sequence[str]) -> None:
        self._sender = sender
        self._admin_recipients = list(admin_recipients)

    def dispatch(self, registration: SupplierRegistration) -> NotificationReport:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify") as executor:
            confirmation = executor.submit(
                self._attempt, "confirmation", build_confirmation(registration)
            )
            if self._admin_recipients:
                admin_alert = executor.submit(
                    self._attempt,
                    "admin alert",
                    build_admin_alert(registration, self._admin_recipients),
                )
            else:
                admin_alert = None

            report = NotificationReport(
                confirmation=confirmation.result(),
                admin_alert=(
                    admin_alert.result()
                    if admin_alert is not None
                    else SendResult.failed("No admin recipients configured")
                ),
            )

        if admin_alert is None:
            logger.warning("Admin alert skipped: no admin recipients configured")
        return report

    def _attempt(self, kind: str, message: OutgoingEmail) -> SendResult:
        try:
            result = self._sender.send(message)
        except Exception as e:
            logger.exception("Failed to send %s email", kind)
            return SendResult.failed(str(e) or e.__class__.__name__)

        if result.success:
            logger.info("Sent %s email (message id %s)", kind, result.message_id)
        else:
            logger.warning("Failed to send %s email: %s", kind, result.error)
        return result
