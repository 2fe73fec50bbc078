"""
Supplier validation and sanitization.

validate() is a pure function: it normalizes every field of a raw
submission, checks formats, strips markup from free text and collects
ALL errors instead of stopping at the first one, so the caller can
report every problem in a single response.

Sanitized free-text values are later interpolated into HTML email
bodies, so sanitization removes tags (and the content of script/style
elements) and escapes what remains.
"""

import html
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import nh3
import phonenumbers
from email_validator import EmailNotValidError, validate_email

from .supplier import SUPPORTED_COUNTRIES, SupplierRegistration

# Country-prefixed VAT formats accepted by the form
VAT_PATTERNS: dict[str, re.Pattern[str]] = {
    "BE": re.compile(r"^BE[0-9]{10}$"),
    "NL": re.compile(r"^NL[0-9]{9}B[0-9]{2}$"),
    "FR": re.compile(r"^FR[A-Z0-9]{2}[0-9]{9}$"),
    "DE": re.compile(r"^DE[0-9]{9}$"),
    "LU": re.compile(r"^LU[0-9]{8}$"),
}

POSTAL_CODE_PATTERN = re.compile(r"^[A-Za-z0-9\s\-]{2,20}$")
BIC_PATTERN = re.compile(r"^[A-Z]{4}[A-Z]{2}[A-Z0-9]{2}([A-Z0-9]{3})?$")
IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}$")
_WHITESPACE = re.compile(r"\s+")

# Total IBAN length per country (ISO 13616 registry)
IBAN_LENGTHS: dict[str, int] = {
    "AD": 24, "AE": 23, "AL": 28, "AT": 20, "AZ": 28, "BA": 20, "BE": 16,
    "BG": 22, "BH": 22, "BR": 29, "BY": 28, "CH": 21, "CR": 22, "CY": 28,
    "CZ": 24, "DE": 22, "DK": 18, "DO": 28, "EE": 20, "EG": 29, "ES": 24,
    "FI": 18, "FO": 18, "FR": 27, "GB": 22, "GE": 22, "GI": 23, "GL": 18,
    "GR": 27, "GT": 28, "HR": 21, "HU": 28, "IE": 22, "IL": 23, "IQ": 23,
    "IS": 26, "IT": 27, "JO": 30, "KW": 30, "KZ": 20, "LB": 28, "LC": 32,
    "LI": 21, "LT": 20, "LU": 20, "LV": 21, "MC": 27, "MD": 24, "ME": 22,
    "MK": 19, "MR": 27, "MT": 31, "MU": 30, "NL": 18, "NO": 15, "PK": 24,
    "PL": 28, "PS": 29, "PT": 25, "QA": 29, "RO": 24, "RS": 22, "SA": 24,
    "SC": 31, "SE": 24, "SI": 19, "SK": 24, "SM": 27, "ST": 25, "SV": 28,
    "TL": 23, "TN": 24, "TR": 26, "UA": 29, "VA": 22, "VG": 24, "XK": 20,
}

# Wire name -> (attribute name, human label)
FIELDS: dict[str, tuple[str, str]] = {
    "companyName": ("company_name", "Company name"),
    "contactPerson": ("contact_person", "Contact person"),
    "email": ("email", "Email"),
    "phone": ("phone", "Phone number"),
    "address": ("address", "Address"),
    "city": ("city", "City"),
    "postalCode": ("postal_code", "Postal code"),
    "country": ("country", "Country"),
    "vatNumber": ("vat_number", "VAT number"),
    "iban": ("iban", "IBAN"),
    "bic": ("bic", "BIC"),
    "bankName": ("bank_name", "Bank name"),
}

REQUIRED_FIELDS = ("companyName", "email", "iban")

MAX_LENGTHS = {
    "companyName": 255,
    "contactPerson": 255,
    "address": 500,
    "city": 100,
    "phone": 100,
    "bankName": 255,
}


@dataclass(frozen=True)
class ValidationResult:
    """Accumulated errors plus the sanitized fields that passed."""

    errors: list[str] = field(default_factory=list)
    sanitized: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_registration(self) -> SupplierRegistration:
        """Build the entity; only meaningful when is_valid."""
        if self.errors:
            raise ValueError("Cannot build a registration from an invalid submission")
        return SupplierRegistration(**self.sanitized)


def sanitize(value: str) -> str:
    """
    Remove all markup (and script/style content), keep plain text.

    Entity-encoded markup is decoded and cleaned again until nothing
    changes, so the result holds no tags. Characters such as & stay
    literal; HTML output must escape them.
    """
    text = value
    while True:
        cleaned = html.unescape(nh3.clean(text, tags=set()))
        if cleaned == text:
            return cleaned.strip()
        text = cleaned


def normalize_iban(value: str) -> str:
    return _WHITESPACE.sub("", value).upper()


def is_valid_iban(value: str) -> bool:
    """
    Structural + ISO 7064 mod-97 check.

    Expects an already normalized IBAN (no spaces, upper case).
    """
    if not IBAN_PATTERN.match(value):
        return False
    expected_length = IBAN_LENGTHS.get(value[:2])
    if expected_length is not None and len(value) != expected_length:
        return False
    rearranged = value[4:] + value[:4]
    digits = "".join(str(int(char, 36)) for char in rearranged)
    return int(digits) % 97 == 1


def normalize_vat_number(value: str) -> str:
    return _WHITESPACE.sub("", value).upper()


def match_vat_country(value: str) -> str | None:
    """Return the country prefix whose pattern matches, or None."""
    for country, pattern in VAT_PATTERNS.items():
        if pattern.match(value):
            return country
    return None


def is_valid_bic(value: str) -> bool:
    return bool(BIC_PATTERN.match(value))


def is_valid_phone(value: str, default_region: str = "BE") -> bool:
    """
    Lenient international check.

    Numbers with a leading + (or 00) are parsed as international;
    anything else is read against default_region. Only length
    plausibility is required, not an assigned number range.
    """
    candidate = "+" + value[2:] if value.startswith("00") else value
    try:
        number = phonenumbers.parse(candidate, default_region)
    except phonenumbers.NumberParseException:
        return False
    return phonenumbers.is_possible_number(number)


def validate(
    raw: Mapping[str, Any],
    *,
    require_vat_number: bool = False,
    default_phone_region: str = "BE",
) -> ValidationResult:
    """
    Validate and sanitize a raw supplier submission.

    Args:
        raw: Decoded JSON object keyed by wire (camelCase) field names
        require_vat_number: Treat vatNumber as a required field
        default_phone_region: Region for phone numbers without a + prefix

    Returns:
        ValidationResult with every error found and the sanitized
        fields; absent optional fields are omitted from sanitized.
    """
    if not isinstance(raw, Mapping):
        return ValidationResult(errors=["Request body must be a JSON object"])

    errors: list[str] = []
    sanitized: dict[str, str] = {}
    required = REQUIRED_FIELDS + (("vatNumber",) if require_vat_number else ())

    values: dict[str, str] = {}
    wrong_type: set[str] = set()
    for key, (_, label) in FIELDS.items():
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            errors.append(f"{label} must be a string")
            wrong_type.add(key)
            continue
        value = value.strip()
        if value:
            values[key] = value

    for key in required:
        if key not in values and key not in wrong_type:
            errors.append(f"{FIELDS[key][1]} is required")

    def put(key: str, value: str) -> None:
        sanitized[FIELDS[key][0]] = value

    def free_text(key: str) -> None:
        if key not in values:
            return
        label = FIELDS[key][1]
        clean = sanitize(values[key])
        if not clean:
            if key in required:
                errors.append(f"{label} is required")
            return
        limit = MAX_LENGTHS[key]
        if len(clean) > limit:
            errors.append(f"{label} must be at most {limit} characters")
            return
        put(key, clean)

    free_text("companyName")
    free_text("contactPerson")

    if "email" in values:
        try:
            info = validate_email(values["email"], check_deliverability=False)
        except EmailNotValidError:
            errors.append("Invalid email format")
        else:
            # Dedup key: IDNA (ASCII) domain, so every spelling of a domain maps to one key
            put("email", f"{info.local_part}@{info.ascii_domain}".lower())

    if "phone" in values:
        phone = sanitize(values["phone"])
        if not is_valid_phone(values["phone"], default_phone_region):
            errors.append("Invalid phone number")
        elif len(phone) > MAX_LENGTHS["phone"]:
            errors.append(f"Phone number must be at most {MAX_LENGTHS['phone']} characters")
        else:
            put("phone", phone)

    free_text("address")
    free_text("city")

    if "postalCode" in values:
        if POSTAL_CODE_PATTERN.match(values["postalCode"]):
            put("postalCode", sanitize(values["postalCode"]))
        else:
            errors.append("Invalid postal code")

    if "country" in values:
        if values["country"] in SUPPORTED_COUNTRIES:
            put("country", values["country"])
        else:
            errors.append(f"Country must be one of: {', '.join(SUPPORTED_COUNTRIES)}")

    if "vatNumber" in values:
        vat_number = normalize_vat_number(values["vatNumber"])
        if match_vat_country(vat_number):
            put("vatNumber", vat_number)
        else:
            errors.append("Invalid VAT number format")

    if "iban" in values:
        iban = normalize_iban(values["iban"])
        if is_valid_iban(iban):
            put("iban", iban)
        else:
            errors.append("Invalid IBAN")

    if "bic" in values:
        bic = values["bic"].upper()
        if is_valid_bic(bic):
            put("bic", bic)
        else:
            errors.append("Invalid BIC/SWIFT code")

    free_text("bankName")

    return ValidationResult(errors=errors, sanitized=sanitized)
