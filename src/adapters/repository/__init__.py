"""Repository adapters - Database implementations."""

from .postgres import PostgresSupplierRepository, run_migrations

__all__ = ["PostgresSupplierRepository", "run_migrations"]
