"""
API request and response models.

Pydantic models for FastAPI endpoint serialization and OpenAPI schema
generation. Fields are snake_case in Python and camelCase on the wire.

The registration request body is deliberately NOT modelled here: the
domain validator consumes the raw JSON object so that every field
error can be reported at once with 400 instead of pydantic's 422.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SupplierSummary(CamelModel):
    """Identifying fields echoed back after registration."""

    company_name: str
    email: str


class EmailStatus(CamelModel):
    """Outcome of the two post-registration emails."""

    confirmation_sent: bool
    notification_sent: bool


class RegisterResponse(CamelModel):
    """Response model for a persisted registration."""

    message: str
    data: SupplierSummary
    email_status: EmailStatus


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
    details: list[str] | None = None


class VatValidationRequest(CamelModel):
    """Request model for standalone VAT number validation."""

    vat_number: str | None = Field(default=None, description="VAT number, spaces allowed")


class VatValidationResponse(CamelModel):
    """Response model for standalone VAT number validation."""

    valid: bool
    vat_number: str
    country: str | None
    message: str


class ConfigDiagnostics(CamelModel):
    """Configuration health report; never includes secret values."""

    status: str
    secret_providers: list[str]
    secrets: dict[str, bool]
    email_backend: str
    expected_fields: list[str]
