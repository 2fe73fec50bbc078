"""
PostgreSQL repository adapter - Implements SupplierRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Duplicate handling:
-------------------
exists_by_email() is a friendly pre-check only. Two concurrent
submissions for the same email can both pass it, so the UNIQUE
constraint on suppliers.email is the real guard: insert() translates
the resulting UniqueViolation into SupplierAlreadyRegistered so the
caller sees the same 409 either way.

Any other psycopg error is logged with full detail and surfaced as
RegistrationStoreError, which the API reports as a generic 500.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import RegistrationStoreError, SupplierAlreadyRegistered
from src.domain.supplier import SupplierRegistration

logger = logging.getLogger(__name__)

_COLUMNS = (
    "company_name",
    "contact_person",
    "email",
    "phone",
    "address",
    "city",
    "postal_code",
    "country",
    "vat_number",
    "iban",
    "bic",
    "bank_name",
)


class PostgresSupplierRepository:
    """
    Implements SupplierRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def exists_by_email(self, email: str) -> bool:
        """
        Check whether a supplier is registered under this email.

        Args:
            email: Normalized email address (lowercase, stripped)

        Returns:
            True if a row exists for the email

        Raises:
            RegistrationStoreError: Database unavailable or query failed
        """
        sql = "SELECT 1 FROM suppliers WHERE email = %s"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                return cursor.fetchone() is not None
        except psycopg.Error as e:
            logger.exception("Duplicate check failed")
            raise RegistrationStoreError("Duplicate check failed") from e

    def insert(self, registration: SupplierRegistration) -> int:
        """
        Insert a new supplier registration.

        Args:
            registration: Validated and sanitized registration

        Returns:
            Primary key of the new row

        Raises:
            SupplierAlreadyRegistered: UNIQUE(email) violated by a concurrent insert
            RegistrationStoreError: Any other database failure
        """
        placeholders = ", ".join(["%s"] * len(_COLUMNS))
        sql = f"""
            INSERT INTO suppliers ({", ".join(_COLUMNS)})
            VALUES ({placeholders})
            RETURNING id
        """
        params = tuple(getattr(registration, column) for column in _COLUMNS)

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            logger.info("Concurrent duplicate registration rejected by constraint")
            raise SupplierAlreadyRegistered(registration.email) from e
        except psycopg.Error as e:
            logger.exception("Supplier insert failed")
            raise RegistrationStoreError("Supplier insert failed") from e

        return row[0]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except (OSError, psycopg.Error) as e:
            logger.exception("Migration failed: %s", sql_file.name)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
