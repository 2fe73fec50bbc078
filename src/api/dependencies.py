"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Long-lived collaborators (pool, secret resolver, email sender,
rate limiter) are created during app lifespan and kept in app.state.
"""

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresSupplierRepository
from src.config.settings import Settings, get_settings
from src.domain.notifications import NotificationDispatcher
from src.domain.ports import EmailSender, RateLimiter
from src.domain.registration import RegistrationService
from src.domain.secrets import ADMIN_EMAILS, SecretResolver, parse_recipients


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresSupplierRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresSupplierRepository(pool)


def get_secret_resolver(request: Request) -> SecretResolver:
    return request.app.state.secrets


def get_email_sender(request: Request) -> EmailSender:
    """Get the email sender selected at startup (console or SMTP)."""
    return request.app.state.email_sender


def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the process-wide rate limiter owned by the app."""
    return request.app.state.rate_limiter


def get_notifier(
    email_sender: EmailSender = Depends(get_email_sender),
    secrets: SecretResolver = Depends(get_secret_resolver),
) -> NotificationDispatcher:
    """Create dispatcher with admin recipients resolved from secrets."""
    admin_recipients = parse_recipients(secrets.get_optional(ADMIN_EMAILS))
    return NotificationDispatcher(sender=email_sender, admin_recipients=admin_recipients)


def get_registration_service(
    request: Request,
    notifier: NotificationDispatcher = Depends(get_notifier),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, notifier and rate limiter for the
    domain service.
    """
    return RegistrationService(
        repository=get_repository(request),
        notifier=notifier,
        rate_limiter=rate_limiter,
        require_vat_number=settings.require_vat_number,
        default_phone_region=settings.default_phone_region,
    )


def get_client_id(request: Request) -> str:
    """
    Derive a stable client key for rate limiting.

    Prefers the first X-Forwarded-For hop, then X-Real-IP, then the
    socket peer address.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    client_id = forwarded.split(",", 1)[0].strip() or request.headers.get("x-real-ip", "").strip()
    if not client_id and request.client is not None:
        client_id = request.client.host
    return client_id or "unknown"
