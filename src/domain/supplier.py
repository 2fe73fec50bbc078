"""
Supplier entity - The persisted registration record.

A registration is created by one successful workflow run and is
never mutated afterwards. Email is the natural identity (dedup key).
"""

from dataclasses import asdict, dataclass

# Countries accepted by the registration form (exact, case-sensitive match)
SUPPORTED_COUNTRIES = ("Belgium", "Netherlands", "France", "Germany", "Luxembourg")


@dataclass(frozen=True)
class SupplierRegistration:
    """Validated and sanitized supplier registration."""

    company_name: str
    email: str
    iban: str
    contact_person: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    vat_number: str | None = None
    bic: str | None = None
    bank_name: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return populated fields only (absent optional fields omitted)."""
        return {key: value for key, value in asdict(self).items() if value is not None}
