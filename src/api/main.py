"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.adapters.secrets import EnvironmentSecretProvider, KeyVaultSecretProvider
from src.adapters.smtp import ConsoleEmailSender, SmtpConfig, SmtpEmailSender
from src.api.cors import install_cors
from src.api.dependencies import get_email_sender, get_secret_resolver
from src.api.errors import install_exception_handlers
from src.api.models import ConfigDiagnostics
from src.api.v1 import router as v1_router
from src.config.logging_setup import configure_logging
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailSender
from src.domain.rate_limiter import SlidingWindowRateLimiter
from src.domain.secrets import (
    DATABASE_URL,
    EMAIL_CONNECTION_STRING,
    SecretResolver,
)
from src.domain.validation import FIELDS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Supplier self-registration API v1 - Register suppliers and check VAT numbers",
    },
]


def build_secret_resolver(settings: Settings) -> SecretResolver:
    """Key Vault first (when configured), environment variables as fallback."""
    providers = []
    if settings.key_vault_url:
        providers.append(KeyVaultSecretProvider.from_vault_url(settings.key_vault_url))
    providers.append(EnvironmentSecretProvider())
    return SecretResolver(providers)


def build_email_sender(settings: Settings, secrets: SecretResolver) -> EmailSender:
    if settings.email_backend == "smtp":
        config = SmtpConfig.from_connection_string(secrets.get(EMAIL_CONNECTION_STRING))
        logger.info("Email delivery via SMTP relay %s:%s", config.host, config.port)
        return SmtpEmailSender(config, sender_address=settings.email_sender_address)
    logger.info("Email delivery via console logger")
    return ConsoleEmailSender()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Resolves secrets and creates database connection pool on startup
    - Runs migrations on startup
    - Creates the email sender and the process-wide rate limiter
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")
    secrets = build_secret_resolver(settings)

    logger.info("Connecting to database...")
    pool = ConnectionPool(
        conninfo=secrets.get(DATABASE_URL),
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store collaborators in app state for dependency injection
    app.state.pool = pool
    app.state.secrets = secrets
    app.state.email_sender = build_email_sender(settings, secrets)
    app.state.rate_limiter = SlidingWindowRateLimiter(
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
    )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="supplier-intake",
    description="Supplier self-registration API - Validates, deduplicates and stores "
    "supplier company, tax and banking details",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_exception_handlers(app)
install_cors(app, get_settings().cors_allow_origin)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}


@app.get("/health/config", response_model=ConfigDiagnostics)
async def config_check(
    secrets: SecretResolver = Depends(get_secret_resolver),
    email_sender: EmailSender = Depends(get_email_sender),
) -> ConfigDiagnostics:
    """
    Configuration diagnostics.

    Reports which secrets resolve and which form fields are expected,
    never the secret values themselves.
    """
    availability = secrets.availability()
    required = set(REQUIRED_FIELDS)
    if get_settings().require_vat_number:
        required.add("vatNumber")

    return ConfigDiagnostics(
        status="ok" if all(availability.values()) else "degraded",
        secret_providers=secrets.provider_names,
        secrets=availability,
        email_backend=type(email_sender).__name__,
        expected_fields=[f"{name} (required)" if name in required else name for name in FIELDS],
    )
