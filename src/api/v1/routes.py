"""
API v1 routes.

Defines REST endpoints for the supplier self-registration API.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from src.api.cors import cors_headers
from src.api.dependencies import get_client_id, get_registration_service
from src.api.errors import INTERNAL_ERROR
from src.api.models import (
    EmailStatus,
    ErrorResponse,
    RegisterResponse,
    SupplierSummary,
    VatValidationRequest,
    VatValidationResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.exceptions import (
    DependencyError,
    InvalidSubmission,
    RateLimitExceeded,
    SupplierAlreadyRegistered,
)
from src.domain.registration import RegistrationService
from src.domain.validation import match_vat_country, normalize_vat_number

router = APIRouter(tags=["v1"])


@router.post(
    "/suppliers",
    response_model=RegisterResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Register a supplier",
    description="Submit company, tax and banking details. The registration is "
    "stored once per email address; confirmation and admin emails are best-effort.",
)
def register_supplier(
    payload: dict[str, Any] = Body(...),
    client_id: str = Depends(get_client_id),
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register a new supplier.

    Returns 200 once the registration is stored, together with the
    status of the confirmation and admin notification emails.
    """
    try:
        outcome = service.register(payload, client_id)
    except RateLimitExceeded:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again later",
        ) from None
    except InvalidSubmission as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Validation failed", "details": e.errors},
        ) from None
    except SupplierAlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A supplier with this email is already registered",
        ) from None
    except DependencyError:
        # Detail already logged where the dependency failed
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        ) from None

    registration = outcome.registration
    return RegisterResponse(
        message="Supplier registered successfully",
        data=SupplierSummary(company_name=registration.company_name, email=registration.email),
        email_status=EmailStatus(
            confirmation_sent=outcome.notifications.confirmation.success,
            notification_sent=outcome.notifications.admin_alert.success,
        ),
    )


@router.post(
    "/vat/validate",
    response_model=VatValidationResponse,
    responses={400: {"model": ErrorResponse, "description": "VAT number missing"}},
    summary="Validate a VAT number",
    description="Check a VAT number against the supported country formats "
    "(BE, NL, FR, DE, LU) without registering anything.",
)
async def validate_vat(request_data: VatValidationRequest) -> VatValidationResponse:
    if not request_data.vat_number or not request_data.vat_number.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="VAT number is required",
        )

    vat_number = normalize_vat_number(request_data.vat_number)
    country = match_vat_country(vat_number)
    return VatValidationResponse(
        valid=country is not None,
        vat_number=vat_number,
        country=country,
        message=f"Valid {country} VAT number" if country else "Invalid VAT number format",
    )


@router.options("/{path:path}", include_in_schema=False)
async def preflight(path: str, settings: Settings = Depends(get_settings)) -> Response:
    """Answer CORS preflight requests with an empty 200."""
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers(settings.cors_allow_origin))
